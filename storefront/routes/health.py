from fastapi import APIRouter, Depends

from storefront.core.exceptions import ContentStoreError
from storefront.dependencies import get_content_service, get_page_cache
from storefront.services.content_service import ContentService
from storefront.services.page_cache import PageCache

router = APIRouter(tags=["health"])

@router.get("/health")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "Devanshi Culture Shop storefront"}

@router.get("/health/content")
async def content_health(
    content: ContentService = Depends(get_content_service),
    cache: PageCache = Depends(get_page_cache),
):
    """Check the content store answers and report page cache size"""
    try:
        categories = await content.get_all_categories()
    except ContentStoreError as e:
        return {
            "status": "unhealthy",
            "content_store": "error",
            "error": str(e)
        }
    return {
        "status": "healthy",
        "content_store": "connected",
        "categories_count": len(categories),
        "cached_pages": len(cache),
    }
