# tests/test_routes/test_websockets.py
import pytest

from storefront.core.exceptions import ContentStoreError
from storefront.routes.websockets import LiveSearchSession
from storefront.services.websockets.manager import manager


def test_live_search_submit_returns_results(test_client):
    with test_client.websocket_connect("/ws/search") as websocket:
        websocket.send_json({"q": "silver", "lang": "en", "sort": "price-desc", "submit": True})
        data = websocket.receive_json()

    assert data["query"] == "silver"
    assert data["sort"] == "price-desc"
    assert data["total"] == 1
    assert [p["name"] for p in data["products"]] == ["Silver Ring"]


def test_live_search_debounces_keystrokes(test_client):
    """Only the result for the latest input is delivered"""
    with test_client.websocket_connect("/ws/search") as websocket:
        for text in ["e", "ea", "ear"]:
            websocket.send_json({"q": text, "lang": "en"})
        websocket.send_json({"q": "earrings", "lang": "en", "submit": True})
        data = websocket.receive_json()

    assert data["query"] == "earrings"
    assert [p["name"] for p in data["products"]] == ["Gold Earrings"]


def test_live_search_within_category(test_client, mock_content):
    with test_client.websocket_connect("/ws/search") as websocket:
        websocket.send_json({"q": "", "lang": "nl", "category": "jewelry"})
        data = websocket.receive_json()

    assert data["total"] == 2
    assert [p["itemNumber"] for p in data["products"]] == ["A0", "A1"]
    mock_content.get_catalog.assert_awaited_with("jewelry")


def test_live_search_ignores_malformed_messages(test_client):
    with test_client.websocket_connect("/ws/search") as websocket:
        websocket.send_text("not json")
        websocket.send_text("[1, 2]")
        websocket.send_json({"q": "bell", "submit": True})
        data = websocket.receive_json()

    assert [p["name"] for p in data["products"]] == ["Brass Bell"]


def test_live_search_store_failure(test_client, mock_content):
    mock_content.get_catalog.side_effect = ContentStoreError("down")

    with test_client.websocket_connect("/ws/search") as websocket:
        websocket.send_json({"q": "ring", "submit": True})
        data = websocket.receive_json()

    assert data["error"] == "Failed to search products"
    assert data["products"] == []


def test_live_search_ignores_non_string_fields(test_client, mock_content):
    with test_client.websocket_connect("/ws/search") as websocket:
        websocket.send_json({"q": "silver", "sort": 5, "category": {"slug": "jewelry"}, "lang": ["nl"], "submit": True})
        data = websocket.receive_json()

    assert data["sort"] == "featured"
    assert [p["name"] for p in data["products"]] == ["Silver Ring"]
    mock_content.get_catalog.assert_awaited_with(None)


@pytest.mark.asyncio
async def test_session_treats_non_string_query_as_empty(mock_content):
    session = LiveSearchSession(mock_content)

    data = await session.run({"q": 42, "sort": None, "category": 7})

    assert data["query"] == ""
    assert data["total"] == 3


def test_disconnect_releases_connection(test_client):
    with test_client.websocket_connect("/ws/search") as websocket:
        websocket.send_json({"q": "bell", "submit": True})
        websocket.receive_json()
        assert len(manager) == 1

    assert len(manager) == 0
