# storefront/routes/websockets.py
"""
Live search over a websocket.

The browser sends every keystroke as ``{"q", "lang", "sort", "category",
"submit"}``. Input is debounced server-side and only the result for the
latest input is sent back; ``submit`` skips the quiet period.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from storefront.core.config import get_settings
from storefront.core.enums import DEFAULT_LOCALE, SortOption
from storefront.core.exceptions import ContentStoreError
from storefront.core.i18n import is_supported
from storefront.services import catalog
from storefront.services.content_service import ContentService
from storefront.services.debounce import Debouncer
from storefront.services.websockets.manager import manager

logger = logging.getLogger(__name__)

router = APIRouter()


def _text(request: Dict[str, Any], key: str) -> str:
    # Client messages are untrusted JSON; non-string values are ignored
    value = request.get(key)
    return value if isinstance(value, str) else ""


class LiveSearchSession:
    """Per-connection search state; the catalog snapshot is loaded once per category"""

    def __init__(self, content: ContentService):
        self.content = content
        self._catalogs: Dict[Optional[str], List] = {}

    async def _entries(self, category: Optional[str]):
        if category not in self._catalogs:
            self._catalogs[category] = await self.content.get_catalog(category)
        return self._catalogs[category]

    async def run(self, request: Dict[str, Any]) -> Dict[str, Any]:
        lang = request.get("lang") if is_supported(request.get("lang")) else DEFAULT_LOCALE
        query = _text(request, "q")
        sort_option = SortOption.parse(request.get("sort"))
        category = _text(request, "category") or None

        try:
            entries = await self._entries(category)
        except ContentStoreError as e:
            logger.error(f"Live search could not load catalog: {e}")
            return {"query": query, "products": [], "total": 0, "error": "Failed to search products"}

        results = catalog.view(entries, query, lang, sort_option)
        return {
            "query": query.strip(),
            "sort": sort_option.value,
            "total": len(results),
            "products": [entry.to_json(lang) for entry in results],
        }


@router.websocket("/ws/search")
async def live_search(websocket: WebSocket):
    settings = get_settings()
    session = LiveSearchSession(websocket.app.state.content_service)

    async def deliver(result: Dict[str, Any]):
        await manager.send_json(result, websocket)

    debouncer = Debouncer(session.run, delay=settings.SEARCH_DEBOUNCE_MS / 1000, deliver=deliver)

    await manager.connect(websocket, debouncer)
    try:
        while True:
            try:
                data = json.loads(await websocket.receive_text())
            except ValueError:
                continue
            if not isinstance(data, dict):
                continue
            if data.get("submit") or not str(data.get("q") or "").strip():
                # Explicit submit and cleared input are answered at once
                debouncer.submit(data)
            else:
                debouncer.schedule(data)
    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected")
    finally:
        manager.disconnect(websocket)
