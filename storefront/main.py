# storefront/main.py

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from storefront.core.config import get_settings
from storefront.core.i18n import locale_from_path, negotiate_locale
from storefront.core.logging_config import configure_logging
from storefront.services.content_service import ContentService
from storefront.services.page_cache import PageCache
from storefront.services.sanity.client import SanityClient

from storefront.routes import health, pages, search, seo, webhooks
from storefront.routes import websockets as websocket_router

configure_logging()
logger = logging.getLogger(__name__)

# Paths served without a locale prefix
UNLOCALIZED_PREFIXES = ("/api", "/static", "/ws", "/health", "/studio")
UNLOCALIZED_PATHS = ("/sitemap.xml", "/robots.txt", "/favicon.ico")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if not settings.SANITY_PROJECT_ID:
        logger.warning("SANITY_PROJECT_ID is not set; content requests will fail")
    if not settings.SANITY_REVALIDATE_SECRET:
        logger.warning("SANITY_REVALIDATE_SECRET is not set; the revalidation webhook will reject requests")

    app.state.content_service = ContentService(
        SanityClient.from_settings(settings),
        cache_ttl=settings.CONTENT_CACHE_TTL_SECONDS,
        max_entries=settings.CONTENT_CACHE_MAX_ENTRIES,
    )
    app.state.page_cache = PageCache(ttl=settings.PAGE_CACHE_TTL_SECONDS)
    logger.info(f"Storefront started ({settings.ENVIRONMENT})")
    yield
    app.state.page_cache.clear()


app = FastAPI(
    title="Devanshi Culture Shop",
    lifespan=lifespan
)


def needs_locale_redirect(path: str) -> bool:
    if path.startswith(UNLOCALIZED_PREFIXES) or path in UNLOCALIZED_PATHS:
        return False
    if "." in path:  # Static files
        return False
    if locale_from_path(path):
        return False
    # Unsupported two-letter prefixes fall through to the 404 page
    first_segment = path.strip("/").split("/")[0]
    if len(first_segment) == 2 and first_segment.isalpha():
        return False
    return True


@app.middleware("http")
async def locale_middleware(request: Request, call_next):
    # Railway-style proxies set X-Forwarded-Proto
    if request.headers.get("x-forwarded-proto") == "https":
        request.scope["scheme"] = "https"

    path = request.url.path
    if needs_locale_redirect(path):
        locale = negotiate_locale(request.headers.get("accept-language"))
        target = f"/{locale}" if path == "/" else f"/{locale}{path}"
        if request.url.query:
            target += f"?{request.url.query}"
        return RedirectResponse(url=target, status_code=307)

    response = await call_next(request)
    current_locale = locale_from_path(path)
    if current_locale:
        response.headers["x-locale"] = current_locale
    return response


# Mount static files with proper path resolution
static_dir = Path(__file__).resolve().parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

# API, SEO and health routes come before the catch-all page routes
app.include_router(health.router)
app.include_router(webhooks.router)
app.include_router(search.router)
app.include_router(seo.router)
app.include_router(websocket_router.router)
app.include_router(pages.router)
