"""
FastAPI dependencies for the services created at startup.
"""

from fastapi import Depends, Request

from storefront.services.content_service import ContentService
from storefront.services.invalidation import InvalidationService
from storefront.services.page_cache import PageCache


def get_content_service(request: Request) -> ContentService:
    return request.app.state.content_service


def get_page_cache(request: Request) -> PageCache:
    return request.app.state.page_cache


def get_invalidation_service(
    page_cache: PageCache = Depends(get_page_cache),
    content_service: ContentService = Depends(get_content_service),
) -> InvalidationService:
    return InvalidationService(purger=page_cache, content_service=content_service)
