"""
Server-rendered storefront pages.

Every page lives under a locale prefix. Rendered HTML for plain GETs (no
query string) of pages the content webhook can address is kept in the
page cache until the webhook purges the path or its TTL runs out. The
category overview and search pages are always rendered fresh.
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Optional, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from storefront.core.config import Settings, get_settings
from storefront.core.enums import DEFAULT_LOCALE, SortOption
from storefront.core.exceptions import ContentStoreError
from storefront.core.i18n import alternate_locale, is_supported, translate
from storefront.core.templates import templates
from storefront.dependencies import get_content_service, get_page_cache
from storefront.schemas.catalog import CatalogEntry
from storefront.services import catalog, seo, whatsapp
from storefront.services.content_service import ContentService, catalog_entries
from storefront.services.page_cache import PageCache

logger = logging.getLogger(__name__)
router = APIRouter(tags=["pages"])

T = TypeVar('T')

FEATURED_COUNT = 8
RELATED_COUNT = 4


async def _optional(awaitable: Awaitable[T], default: T, what: str) -> T:
    """Secondary page data degrades to a default instead of failing the page"""
    try:
        return await awaitable
    except ContentStoreError as e:
        logger.warning(f"Could not load {what}: {e}")
        return default


def _cached(request: Request, cache: PageCache) -> Optional[HTMLResponse]:
    if request.url.query:
        return None
    html = cache.get(request.url.path)
    if html is None:
        return None
    return HTMLResponse(html, headers={"x-page-cache": "hit"})


def _render(
    request: Request,
    template: str,
    context: Dict[str, Any],
    cache: Optional[PageCache] = None,
    status_code: int = 200,
):
    response = templates.TemplateResponse(request, template, context, status_code=status_code)
    if cache is not None and status_code == 200 and not request.url.query:
        cache.set(request.url.path, response.body.decode("utf-8"))
        response.headers["x-page-cache"] = "miss"
    return response


def not_found(request: Request, lang: str, settings: Settings):
    lang = lang if is_supported(lang) else DEFAULT_LOCALE
    context = {
        "lang": lang,
        "alt_lang": alternate_locale(lang),
        "categories": [],
        "store": None,
        "settings": settings,
        "meta": seo.build_meta(settings, lang, f"/{lang}", title=translate(lang, "not_found_title")),
    }
    return _render(request, "errors/404.html", context, status_code=404)


async def _base_context(lang: str, content: ContentService, settings: Settings) -> Dict[str, Any]:
    categories, store = await asyncio.gather(
        _optional(content.get_all_categories(), [], "categories"),
        _optional(content.get_store_settings(), None, "store settings"),
    )
    phone = (store.phone_main if store and store.phone_main else settings.WHATSAPP_NUMBER)
    return {
        "lang": lang,
        "alt_lang": alternate_locale(lang),
        "categories": categories,
        "store": store,
        "settings": settings,
        "whatsapp_general": whatsapp.whatsapp_url(phone, whatsapp.message("general", lang)),
        "phone": phone,
    }


@router.get("/{lang}", response_class=HTMLResponse)
async def home_page(
    request: Request,
    lang: str,
    content: ContentService = Depends(get_content_service),
    cache: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_settings),
):
    if not is_supported(lang):
        return not_found(request, lang, settings)
    cached = _cached(request, cache)
    if cached:
        return cached

    context, home, entries = await asyncio.gather(
        _base_context(lang, content, settings),
        _optional(content.get_home_page(), None, "home page"),
        _optional(content.get_catalog(), [], "catalog"),
    )
    meta = seo.home_meta(settings, lang, home)
    if context["store"]:
        meta.structured_data.append(seo.store_json_ld(settings, lang, context["store"]))

    context.update({
        "home": home,
        "featured": catalog.sort_entries(entries, SortOption.FEATURED)[:FEATURED_COUNT],
        "meta": meta,
    })
    return _render(request, "home.html", context, cache)


@router.get("/{lang}/about", response_class=HTMLResponse)
async def about_page(
    request: Request,
    lang: str,
    content: ContentService = Depends(get_content_service),
    cache: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_settings),
):
    if not is_supported(lang):
        return not_found(request, lang, settings)
    cached = _cached(request, cache)
    if cached:
        return cached

    try:
        about = await content.get_about_page()
    except ContentStoreError as e:
        logger.warning(f"About page unavailable: {e}")
        return not_found(request, lang, settings)

    context = await _base_context(lang, content, settings)
    context.update({"about": about, "meta": seo.about_meta(settings, lang, about)})
    return _render(request, "about.html", context, cache)


@router.get("/{lang}/contact", response_class=HTMLResponse)
async def contact_page(
    request: Request,
    lang: str,
    content: ContentService = Depends(get_content_service),
    cache: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_settings),
):
    if not is_supported(lang):
        return not_found(request, lang, settings)
    cached = _cached(request, cache)
    if cached:
        return cached

    context = await _base_context(lang, content, settings)
    meta = seo.build_meta(
        settings, lang, f"/{lang}/contact",
        title=f"{translate(lang, 'contact')} - {settings.SITE_NAME}",
    )
    if context["store"]:
        meta.structured_data.append(seo.store_json_ld(settings, lang, context["store"]))
    context.update({
        "meta": meta,
        "quick_messages": whatsapp.quick_messages(context["phone"], lang),
    })
    return _render(request, "contact.html", context, cache)


@router.get("/{lang}/categories", response_class=HTMLResponse)
async def categories_page(
    request: Request,
    lang: str,
    content: ContentService = Depends(get_content_service),
    settings: Settings = Depends(get_settings),
):
    if not is_supported(lang):
        return not_found(request, lang, settings)

    # Shows product counts that no single document change maps to, so never cached
    context = await _base_context(lang, content, settings)
    context["meta"] = seo.build_meta(
        settings, lang, f"/{lang}/categories",
        title=f"{translate(lang, 'categories')} - {settings.SITE_NAME}",
    )
    return _render(request, "categories.html", context)


@router.get("/{lang}/search", response_class=HTMLResponse)
async def search_page(
    request: Request,
    lang: str,
    q: Optional[str] = None,
    sort: Optional[str] = None,
    content: ContentService = Depends(get_content_service),
    settings: Settings = Depends(get_settings),
):
    if not is_supported(lang):
        return not_found(request, lang, settings)

    query = (q or "").strip()
    sort_option = SortOption.parse(sort)
    context, entries = await asyncio.gather(
        _base_context(lang, content, settings),
        _optional(content.get_catalog(), [], "catalog"),
    )
    results = catalog.view(entries, query, lang, sort_option) if query else []

    context.update({
        "query": query,
        "sort": sort_option.value,
        "sort_options": catalog.sort_options(lang),
        "results": results,
        "meta": seo.build_meta(
            settings, lang, f"/{lang}/search",
            title=f"{translate(lang, 'search')} - {settings.SITE_NAME}",
        ),
        "debounce_ms": settings.SEARCH_DEBOUNCE_MS,
    })
    return _render(request, "search.html", context)


async def _product_page(
    request: Request,
    lang: str,
    slug: str,
    category_slug: Optional[str],
    content: ContentService,
    cache: PageCache,
    settings: Settings,
):
    if not is_supported(lang):
        return not_found(request, lang, settings)
    cached = _cached(request, cache)
    if cached:
        return cached

    try:
        product = await content.get_product_by_slug(slug)
    except ContentStoreError as e:
        logger.info(f"Product {slug} unavailable: {e}")
        return not_found(request, lang, settings)

    if category_slug is not None and product.category_slug != category_slug:
        return not_found(request, lang, settings)

    context, entries = await asyncio.gather(
        _base_context(lang, content, settings),
        _optional(content.get_catalog(), [], "catalog"),
    )
    related = [
        entry for entry in entries
        if entry.id != product.id and product.category_slug and entry.category_slug == product.category_slug
    ][:RELATED_COUNT]

    name = product.product_name.get(lang)
    meta = seo.product_meta(settings, lang, product)
    crumbs = [(translate(lang, "home"), f"/{lang}")]
    if product.category and product.category_slug:
        crumbs.append((product.category.category_name.get(lang), f"/{lang}/{product.category_slug}"))
    crumbs.append((name, f"/{lang}/{product.path_segment}/{product.slug.current}"))
    meta.structured_data.append(seo.breadcrumb_json_ld(settings, crumbs))

    context.update({
        "product": product,
        "entry": CatalogEntry.from_product(product),
        "related": related,
        "meta": meta,
        "whatsapp_product": whatsapp.whatsapp_url(context["phone"], whatsapp.message("product", lang, name)),
        "quick_messages": whatsapp.quick_messages(context["phone"], lang, name),
    })
    return _render(request, "product.html", context, cache)


@router.get("/{lang}/products/{slug}", response_class=HTMLResponse)
async def uncategorized_product_page(
    request: Request,
    lang: str,
    slug: str,
    content: ContentService = Depends(get_content_service),
    cache: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_settings),
):
    return await _product_page(request, lang, slug, None, content, cache, settings)


@router.get("/{lang}/{category}", response_class=HTMLResponse)
async def category_page(
    request: Request,
    lang: str,
    category: str,
    q: Optional[str] = None,
    sort: Optional[str] = None,
    content: ContentService = Depends(get_content_service),
    cache: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_settings),
):
    if not is_supported(lang):
        return not_found(request, lang, settings)
    cached = _cached(request, cache)
    if cached:
        return cached

    try:
        category_doc = await content.get_category_by_slug(category)
    except ContentStoreError as e:
        logger.info(f"Category {category} unavailable: {e}")
        return not_found(request, lang, settings)

    context, entries = await asyncio.gather(
        _base_context(lang, content, settings),
        _optional(content.get_catalog(category), [], f"products of {category}"),
    )
    query = (q or "").strip()
    sort_option = SortOption.parse(sort)
    category_name = category_doc.category_name.get(lang)

    meta = seo.category_meta(settings, lang, category_doc)
    meta.structured_data.append(seo.breadcrumb_json_ld(settings, [
        (translate(lang, "home"), f"/{lang}"),
        (category_name, f"/{lang}/{category}"),
    ]))

    context.update({
        "category": category_doc,
        "category_name": category_name,
        "products": catalog.view(entries, query, lang, sort_option),
        "query": query,
        "sort": sort_option.value,
        "sort_options": catalog.sort_options(lang),
        "meta": meta,
        "debounce_ms": settings.SEARCH_DEBOUNCE_MS,
    })
    return _render(request, "category.html", context, cache)


@router.get("/{lang}/{category}/{product}", response_class=HTMLResponse)
async def product_page(
    request: Request,
    lang: str,
    category: str,
    product: str,
    content: ContentService = Depends(get_content_service),
    cache: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_settings),
):
    return await _product_page(request, lang, product, category, content, cache, settings)
