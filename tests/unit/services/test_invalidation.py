# tests/unit/services/test_invalidation.py
import hashlib
import hmac
import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from storefront.core.enums import DocumentType
from storefront.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ContentStoreError,
    PurgeError,
    ValidationError,
)
from storefront.schemas.webhook import ContentChangeEvent, InvalidationResult
from storefront.services.invalidation import (
    InvalidationService,
    compute_invalidation_paths,
    sign,
    verify_signature,
)
from storefront.services.page_cache import PageCache

SECRET = "webhook-secret"


def signed(body: dict):
    raw = json.dumps(body).encode()
    return raw, sign(raw, SECRET)


"""
1. Signature verification
"""

def test_verify_accepts_hmac_of_raw_body():
    raw = b'{"_id": "abc", "_type": "homePage"}'
    digest = hmac.new(SECRET.encode(), raw, hashlib.sha256).hexdigest()

    assert verify_signature(raw, f"sha256={digest}", SECRET) is True


def test_verify_rejects_single_bit_change_in_body():
    raw = b'{"_id": "abc", "_type": "homePage"}'
    signature = sign(raw, SECRET)
    tampered = bytes([raw[0] ^ 0x01]) + raw[1:]

    assert verify_signature(tampered, signature, SECRET) is False


def test_verify_rejects_single_bit_change_in_signature():
    raw = b'{"_id": "abc", "_type": "homePage"}'
    signature = sign(raw, SECRET)
    last = signature[-1]
    flipped = chr(ord(last) ^ 0x01)

    assert verify_signature(raw, signature[:-1] + flipped, SECRET) is False


def test_verify_is_sensitive_to_reserialized_json():
    """The signature covers the exact bytes; re-serialized JSON does not verify"""
    raw = b'{"_type":"homePage","_id":"abc"}'
    signature = sign(raw, SECRET)
    reserialized = json.dumps(json.loads(raw)).encode()

    assert reserialized != raw
    assert verify_signature(reserialized, signature, SECRET) is False


@pytest.mark.parametrize("header", [None, "", "abc123", "sha1=deadbeef", "sha256=", "sha256=zz", "sha256=ünïcode"])
def test_verify_returns_false_for_malformed_headers(header):
    assert verify_signature(b"{}", header, SECRET) is False


def test_verify_returns_false_without_secret():
    raw = b"{}"
    assert verify_signature(raw, sign(raw, SECRET), "") is False


def test_verify_tolerates_surrounding_whitespace():
    raw = b'{"_id": "abc", "_type": "homePage"}'

    assert verify_signature(raw, "  " + sign(raw, SECRET) + " ", SECRET) is True
    assert verify_signature(raw, "\t" + sign(raw, SECRET), SECRET) is True


"""
2. Path computation
"""

def event(**kwargs) -> ContentChangeEvent:
    kwargs.setdefault("document_id", "doc-1")
    return ContentChangeEvent(**kwargs)


def test_product_with_category_paths():
    paths = compute_invalidation_paths(event(
        document_type=DocumentType.PRODUCT, slug="silver-ring", category_slug="jewelry",
    ))

    assert paths == {
        "/en/jewelry/silver-ring", "/nl/jewelry/silver-ring",
        "/en/jewelry", "/nl/jewelry",
        "/en", "/nl",
    }


def test_product_without_category_paths():
    paths = compute_invalidation_paths(event(document_type=DocumentType.PRODUCT, slug="silver-ring"))

    assert paths == {"/en/products/silver-ring", "/nl/products/silver-ring", "/en", "/nl"}


def test_product_without_slug_still_invalidates_listings():
    assert compute_invalidation_paths(event(document_type=DocumentType.PRODUCT)) == {"/en", "/nl"}
    assert compute_invalidation_paths(event(document_type=DocumentType.PRODUCT, category_slug="jewelry")) == {
        "/en/jewelry", "/nl/jewelry", "/en", "/nl",
    }


def test_category_paths():
    paths = compute_invalidation_paths(event(document_type=DocumentType.CATEGORY, slug="jewelry"))

    assert paths == {"/en/jewelry", "/nl/jewelry", "/en", "/nl"}


def test_home_and_about_paths():
    assert compute_invalidation_paths(event(document_type=DocumentType.HOME_PAGE)) == {"/en", "/nl"}
    assert compute_invalidation_paths(event(document_type=DocumentType.ABOUT_PAGE)) == {"/en/about", "/nl/about"}


def test_store_settings_paths():
    paths = compute_invalidation_paths(event(document_type=DocumentType.STORE_SETTINGS))

    assert paths == {"/en", "/nl", "/en/contact", "/nl/contact", "/en/about", "/nl/about"}


def test_unknown_type_yields_nothing():
    assert compute_invalidation_paths(event(document_type=DocumentType.UNKNOWN, slug="x")) == set()


def test_path_computation_is_pure():
    e = event(document_type=DocumentType.PRODUCT, slug="silver-ring", category_slug="jewelry")

    assert compute_invalidation_paths(e) == compute_invalidation_paths(e)


"""
3. Notification handling
"""

@pytest.mark.asyncio
async def test_handle_notification_purges_all_paths():
    cache = PageCache(ttl=60)
    cache.set("/en/jewelry/silver-ring", "<html>old</html>")
    service = InvalidationService(purger=cache)
    raw, signature = signed({
        "_id": "prod-1", "_type": "product",
        "slug": {"current": "silver-ring"},
        "category": {"_ref": "cat-1", "slug": {"current": "jewelry"}},
    })

    result = await service.handle_notification(raw, signature, SECRET)

    assert result.status_code == 200
    assert set(result.revalidated) == {
        "/en/jewelry/silver-ring", "/nl/jewelry/silver-ring", "/en/jewelry", "/nl/jewelry", "/en", "/nl",
    }
    assert result.errors == []
    assert result.documents == [{"id": "prod-1", "type": "product"}]
    assert cache.get("/en/jewelry/silver-ring") is None


@pytest.mark.asyncio
async def test_handle_notification_reports_partial_failure():
    """One failing purge is recorded; the others still go through"""
    purger = MagicMock(spec=PageCache)

    async def purge(path):
        if path == "/en/contact":
            raise PurgeError(path, "cache unavailable")

    purger.purge = AsyncMock(side_effect=purge)
    service = InvalidationService(purger=purger)
    raw, signature = signed({"_id": "storeSettings", "_type": "storeSettings"})

    result = await service.handle_notification(raw, signature, SECRET)

    assert result.status_code == 207
    assert purger.purge.await_count == 6
    assert len(result.revalidated) == 5
    assert "/en/contact" not in result.revalidated
    assert len(result.errors) == 1
    assert "/en/contact" in result.errors[0]
    purger.purge_all.assert_awaited_once()


@pytest.mark.asyncio
async def test_purge_returning_false_counts_as_failure():
    purger = MagicMock(spec=PageCache)
    purger.purge = AsyncMock(side_effect=lambda path: path != "/nl")
    service = InvalidationService(purger=purger)
    raw, signature = signed({"_id": "home", "_type": "homePage"})

    result = await service.handle_notification(raw, signature, SECRET)

    assert result.revalidated == ["/en"]
    assert result.errors == ["Failed to revalidate /nl"]
    assert result.status_code == 207


@pytest.mark.asyncio
async def test_missing_secret_is_configuration_error():
    service = InvalidationService(purger=PageCache())
    raw, signature = signed({"_id": "home", "_type": "homePage"})

    with pytest.raises(ConfigurationError):
        await service.handle_notification(raw, signature, "")


@pytest.mark.asyncio
@pytest.mark.parametrize("signature", [None, "", "sha256=" + "0" * 64])
async def test_bad_signature_is_authentication_error(signature):
    purger = MagicMock(spec=PageCache)
    purger.purge = AsyncMock()
    service = InvalidationService(purger=purger)

    with pytest.raises(AuthenticationError):
        await service.handle_notification(b'{"_id": "home", "_type": "homePage"}', signature, SECRET)

    purger.purge.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", [b"not json", b"[]", b'{"_type": "product"}', b'{"_id": "x"}', b'{"_id": 3, "_type": "product"}'])
async def test_malformed_body_is_validation_error(raw):
    service = InvalidationService(purger=PageCache())

    with pytest.raises(ValidationError):
        await service.handle_notification(raw, sign(raw, SECRET), SECRET)


@pytest.mark.asyncio
async def test_mutation_envelope_unions_paths():
    service = InvalidationService(purger=PageCache())
    raw, signature = signed({
        "_type": "webhook",
        "mutations": [
            {"_id": "about", "_type": "aboutPage", "patch": {"id": "about"}},
            {"_id": "cat-1", "_type": "category", "createOrReplace": {"_id": "cat-1", "_type": "category", "slug": {"current": "decor"}}},
        ],
    })

    result = await service.handle_notification(raw, signature, SECRET)

    assert set(result.revalidated) == {"/en/about", "/nl/about", "/en/decor", "/nl/decor", "/en", "/nl"}
    assert [d["type"] for d in result.documents] == ["aboutPage", "category"]


@pytest.mark.asyncio
async def test_category_reference_is_resolved_before_computing_paths():
    content = MagicMock()
    content.resolve_category_slug = AsyncMock(return_value="jewelry")
    service = InvalidationService(purger=PageCache(), content_service=content)
    raw, signature = signed({
        "_id": "prod-1", "_type": "product",
        "slug": {"current": "silver-ring"},
        "category": {"_ref": "cat-1"},
    })

    result = await service.handle_notification(raw, signature, SECRET)

    content.resolve_category_slug.assert_awaited_once_with("cat-1")
    assert "/en/jewelry/silver-ring" in result.revalidated
    assert "/nl/jewelry" in result.revalidated
    content.clear_cache.assert_called_once()


@pytest.mark.asyncio
async def test_unresolvable_category_reference_falls_back_to_products_path():
    content = MagicMock()
    content.resolve_category_slug = AsyncMock(side_effect=ContentStoreError("down"))
    service = InvalidationService(purger=PageCache(), content_service=content)
    raw, signature = signed({
        "_id": "prod-1", "_type": "product",
        "slug": {"current": "silver-ring"},
        "category": {"_ref": "cat-1"},
    })

    result = await service.handle_notification(raw, signature, SECRET)

    assert set(result.revalidated) == {"/en/products/silver-ring", "/nl/products/silver-ring", "/en", "/nl"}


@pytest.mark.asyncio
async def test_three_paths_one_failure_gives_two_successes_and_one_error():
    purger = MagicMock(spec=PageCache)
    purger.purge = AsyncMock(side_effect=[None, PurgeError("/nl/about"), None])
    service = InvalidationService(purger=purger)

    result = await service.purge_paths({"/en/about", "/nl/about", "/en"}, InvalidationResult())

    assert result.status_code == 207
    assert len(result.revalidated) == 2
    assert len(result.errors) == 1


@pytest.mark.asyncio
async def test_envelope_with_untyped_patch_still_purges_typed_documents():
    cache = PageCache(ttl=60)
    cache.set("/en/about", "<html>old</html>")
    service = InvalidationService(purger=cache)
    raw, signature = signed({"mutations": [
        {"createOrReplace": {"_id": "about", "_type": "aboutPage"}},
        {"patch": {"id": "drafts.x"}},
    ]})

    result = await service.handle_notification(raw, signature, SECRET)

    assert result.status_code == 200
    assert set(result.revalidated) == {"/en/about", "/nl/about"}
    assert result.documents == [{"id": "about", "type": "aboutPage"}]
    assert cache.get("/en/about") is None


"""
4. Shared layout
"""

@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"_id": "cat-1", "_type": "category", "slug": {"current": "jewelry"}},
    {"_id": "storeSettings", "_type": "storeSettings"},
])
async def test_layout_documents_purge_every_page(body):
    purger = MagicMock(spec=PageCache)
    service = InvalidationService(purger=purger)
    raw, signature = signed(body)

    result = await service.handle_notification(raw, signature, SECRET)

    purger.purge_all.assert_awaited_once()
    assert result.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"_id": "prod-1", "_type": "product", "slug": {"current": "silver-ring"}},
    {"_id": "about", "_type": "aboutPage"},
])
async def test_page_documents_leave_other_pages_cached(body):
    cache = PageCache(ttl=60)
    cache.set("/en/contact", "<html>contact</html>")
    service = InvalidationService(purger=cache)
    raw, signature = signed(body)

    await service.handle_notification(raw, signature, SECRET)

    assert cache.get("/en/contact") == "<html>contact</html>"


@pytest.mark.asyncio
async def test_failed_layout_purge_is_multi_status():
    purger = MagicMock(spec=PageCache)
    purger.purge_all = AsyncMock(side_effect=RuntimeError("cache unavailable"))
    service = InvalidationService(purger=purger)
    raw, signature = signed({"_id": "cat-1", "_type": "category", "slug": {"current": "decor"}})

    result = await service.handle_notification(raw, signature, SECRET)

    assert result.status_code == 207
    assert set(result.revalidated) == {"/en/decor", "/nl/decor", "/en", "/nl"}
    assert result.errors == ["Failed to revalidate shared layout: cache unavailable"]


@pytest.mark.asyncio
async def test_purger_without_purge_all_is_skipped():
    class PathOnlyPurger:
        async def purge(self, path):
            return True

    service = InvalidationService(purger=PathOnlyPurger())
    raw, signature = signed({"_id": "storeSettings", "_type": "storeSettings"})

    result = await service.handle_notification(raw, signature, SECRET)

    assert result.status_code == 200
    assert len(result.revalidated) == 6
