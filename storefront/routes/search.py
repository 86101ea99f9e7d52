import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from storefront.core.config import Settings, get_settings
from storefront.core.enums import DEFAULT_LOCALE
from storefront.core.exceptions import ContentStoreError
from storefront.core.i18n import is_supported
from storefront.dependencies import get_content_service
from storefront.schemas.catalog import CatalogEntry
from storefront.services.content_service import ContentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])


@router.get("/search")
async def search_products(
    q: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    lang: str = DEFAULT_LOCALE,
    content: ContentService = Depends(get_content_service),
    settings: Settings = Depends(get_settings),
):
    """Header search dropdown: prefix match on product names and descriptions"""
    term = (q or "").strip()
    if len(term) < settings.SEARCH_MIN_LENGTH:
        return {"products": [], "total": 0, "message": "Search term too short"}

    limit = limit or settings.SEARCH_DROPDOWN_LIMIT
    lang = lang if is_supported(lang) else DEFAULT_LOCALE

    try:
        products, total = await content.search_products(term, limit)
    except ContentStoreError as e:
        logger.error(f"Search API error: {e}")
        return JSONResponse(
            {"error": "Failed to search products", "products": [], "total": 0},
            status_code=500,
        )

    return {
        "products": [CatalogEntry.from_product(p).to_json(lang) for p in products],
        "total": total,
        "query": term,
        "limit": limit,
    }
