import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from storefront.core.config import Settings, get_settings
from storefront.core.exceptions import ContentStoreError
from storefront.core.templates import templates
from storefront.dependencies import get_content_service
from storefront.services import seo
from storefront.services.content_service import ContentService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["seo"])


@router.get("/sitemap.xml")
async def sitemap(
    request: Request,
    content: ContentService = Depends(get_content_service),
    settings: Settings = Depends(get_settings),
):
    entries = seo.static_sitemap_entries(settings)
    try:
        params = await content.get_sitemap_params()
        entries += seo.dynamic_sitemap_entries(settings, params)
    except ContentStoreError as e:
        # Static pages are still worth publishing
        logger.error(f"Error generating sitemap: {e}")

    return templates.TemplateResponse(
        request, "sitemap.xml", {"entries": entries}, media_type="application/xml"
    )


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots(settings: Settings = Depends(get_settings)):
    return seo.robots_txt(settings)
