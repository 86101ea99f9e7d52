"""
Typed read access to the content store.

Wraps ``SanityClient`` with a short-lived in-process cache of raw query
results. The webhook clears the cache after every accepted notification
so edits show up on the next render.
"""

import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError as SchemaValidationError

from storefront.core.exceptions import ContentNotFoundError, ContentStoreError
from storefront.schemas.catalog import CatalogEntry
from storefront.schemas.content import AboutPage, Category, HomePage, Product, StoreSettings
from storefront.services.sanity import queries
from storefront.services.sanity.client import SanityClient

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)


class ContentService:
    """Service returning typed content store documents"""

    def __init__(
        self,
        client: SanityClient,
        cache_ttl: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 256,
    ):
        self.client = client
        self.cache_ttl = cache_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._cache: Dict[str, Tuple[float, Any]] = {}

    # --- Cache ---

    async def _fetch(self, query: str, params: Optional[Dict[str, Any]] = None) -> Any:
        key = query + json.dumps(params or {}, sort_keys=True)
        now = self._clock()
        cached = self._cache.get(key)
        if cached and cached[0] > now:
            return cached[1]

        result = await self.client.fetch(query, params)
        if self.cache_ttl > 0 and self.max_entries > 0:
            self._store(key, now, result)
        return result

    def _store(self, key: str, now: float, result: Any) -> None:
        self._cache.pop(key, None)
        expired = [k for k, (expires, _) in self._cache.items() if expires <= now]
        for k in expired:
            del self._cache[k]
        # Dicts keep insertion order, so the first key is the oldest
        while len(self._cache) >= self.max_entries:
            del self._cache[next(iter(self._cache))]
        self._cache[key] = (now + self.cache_ttl, result)

    def clear_cache(self) -> None:
        logger.info(f"Clearing content cache ({len(self._cache)} entries)")
        self._cache.clear()

    # --- Parsing ---

    @staticmethod
    def _parse_one(schema: Type[T], data: Any) -> T:
        if not data:
            raise ContentNotFoundError(f"{schema.__name__} not found")
        try:
            return schema.model_validate(data)
        except SchemaValidationError as e:
            raise ContentStoreError(f"Malformed {schema.__name__} document: {e}")

    @staticmethod
    def _parse_many(schema: Type[T], data: Any) -> List[T]:
        """Skip records that do not fit the schema instead of failing the whole list"""
        items = []
        for raw in data or []:
            try:
                items.append(schema.model_validate(raw))
            except SchemaValidationError as e:
                logger.warning(f"Skipping malformed {schema.__name__} {raw.get('_id') if isinstance(raw, dict) else raw!r}: {e.error_count()} errors")
        return items

    # --- Singletons ---

    async def get_home_page(self) -> HomePage:
        return self._parse_one(HomePage, await self._fetch(queries.HOME_PAGE_QUERY))

    async def get_about_page(self) -> AboutPage:
        return self._parse_one(AboutPage, await self._fetch(queries.ABOUT_PAGE_QUERY))

    async def get_store_settings(self) -> StoreSettings:
        return self._parse_one(StoreSettings, await self._fetch(queries.STORE_SETTINGS_QUERY))

    # --- Categories ---

    async def get_all_categories(self) -> List[Category]:
        return self._parse_many(Category, await self._fetch(queries.ALL_CATEGORIES_QUERY))

    async def get_category_by_slug(self, slug: str) -> Category:
        return self._parse_one(Category, await self._fetch(queries.CATEGORY_BY_SLUG_QUERY, {"slug": slug}))

    async def resolve_category_slug(self, ref: str) -> Optional[str]:
        """Look up a category's slug from its document id; bypasses the cache"""
        result = await self.client.fetch(queries.CATEGORY_SLUG_BY_ID_QUERY, {"id": ref})
        return result if isinstance(result, str) and result else None

    # --- Products ---

    async def get_all_products(self) -> List[Product]:
        return self._parse_many(Product, await self._fetch(queries.ALL_PRODUCTS_QUERY))

    async def get_products_by_category(self, category_slug: str) -> List[Product]:
        return self._parse_many(
            Product, await self._fetch(queries.PRODUCTS_BY_CATEGORY_QUERY, {"categorySlug": category_slug})
        )

    async def get_product_by_slug(self, slug: str) -> Product:
        return self._parse_one(Product, await self._fetch(queries.PRODUCT_BY_SLUG_QUERY, {"slug": slug}))

    async def search_products(self, term: str, limit: int) -> Tuple[List[Product], int]:
        """
        Prefix search across both locales; returns the page of matches and the total count.

        Not cached: every distinct term would otherwise add an entry.
        """
        params = {"searchTerm": term}
        products = await self.client.fetch(queries.SEARCH_PRODUCTS_QUERY, {**params, "limit": limit})
        total = await self.client.fetch(queries.SEARCH_COUNT_QUERY, params)
        return self._parse_many(Product, products), int(total or 0)

    async def get_sitemap_params(self) -> Dict[str, List]:
        data = await self._fetch(queries.SITEMAP_QUERY) or {}
        return {
            "categories": [slug for slug in data.get("categories") or [] if slug],
            "products": [p for p in data.get("products") or [] if isinstance(p, dict) and p.get("slug")],
        }

    # --- Catalog ---

    async def get_catalog(self, category_slug: Optional[str] = None) -> List[CatalogEntry]:
        """Listing snapshot for the whole shop or one category"""
        if category_slug:
            products = await self.get_products_by_category(category_slug)
        else:
            products = await self.get_all_products()
        return catalog_entries(products)


def catalog_entries(products: List[Product]) -> List[CatalogEntry]:
    return [CatalogEntry.from_product(product) for product in products]
