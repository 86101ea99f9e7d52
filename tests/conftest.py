# tests/conftest.py
import pytest
from decimal import Decimal
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from storefront.main import app
from storefront.core.config import Settings, get_settings, get_revalidate_secret
from storefront.dependencies import get_content_service, get_page_cache
from storefront.core.exceptions import ContentNotFoundError
from storefront.schemas.catalog import CatalogEntry
from storefront.schemas.content import Category, Product, StoreSettings
from storefront.services.content_service import ContentService
from storefront.services.page_cache import PageCache

from tests.mocks import TEST_SECRET
from tests.mocks.content_documents import category_doc, product_doc, store_settings_doc


@pytest.fixture
def settings():
    """Provide test settings"""
    return Settings(
        SANITY_PROJECT_ID="testproject",
        SANITY_REVALIDATE_SECRET=TEST_SECRET,
        SITE_URL="https://shop.test",
        SITE_NAME="Test Culture Shop",
        WHATSAPP_NUMBER="+31 6 1234 5678",
    )


@pytest.fixture
def make_product():
    def _make(**kwargs) -> Product:
        return Product.model_validate(product_doc(**kwargs))
    return _make


@pytest.fixture
def make_entry():
    def _make(id="e1", name_en="Item", name_nl=None, description_en=None, price=None, sort_key="A1", category_slug=None):
        return CatalogEntry(
            id=id,
            name={"en": name_en, "nl": name_nl if name_nl is not None else name_en},
            description={"en": description_en, "nl": None} if description_en is not None else None,
            price=Decimal(str(price)) if price is not None else None,
            sort_key=sort_key,
            category={"categoryName": {"en": category_slug, "nl": category_slug}, "slug": {"current": category_slug}} if category_slug else None,
            slug=id,
        )
    return _make


@pytest.fixture
def sample_products():
    return [
        Product.model_validate(product_doc()),
        Product.model_validate(product_doc(
            id="prod-2", name_en="Brass Bell", name_nl="Koperen Bel", slug="brass-bell",
            category_slug="decor", item_number="B2", price=None,
            description_en="Temple bell", description_nl="Tempelbel",
        )),
        Product.model_validate(product_doc(
            id="prod-3", name_en="Gold Earrings", name_nl="Gouden Oorbellen", slug="gold-earrings",
            category_slug="jewelry", item_number="A0", price=80,
            description_en="Traditional earrings", description_nl="Traditionele oorbellen",
        )),
    ]


@pytest.fixture
def sample_categories():
    return [
        Category.model_validate(category_doc()),
        Category.model_validate(category_doc(id="cat-2", slug="decor", name_en="Decor", name_nl="Decoratie")),
    ]


@pytest.fixture
def store_settings():
    return StoreSettings.model_validate(store_settings_doc())


@pytest.fixture
def mock_content(sample_products, sample_categories, store_settings):
    """ContentService double; async methods are AsyncMocks"""
    content = MagicMock(spec=ContentService)
    products_by_slug = {p.slug.current: p for p in sample_products}
    categories_by_slug = {c.slug.current: c for c in sample_categories}

    async def product_by_slug(slug):
        if slug not in products_by_slug:
            raise ContentNotFoundError(f"Product {slug} not found")
        return products_by_slug[slug]

    async def category_by_slug(slug):
        if slug not in categories_by_slug:
            raise ContentNotFoundError(f"Category {slug} not found")
        return categories_by_slug[slug]

    async def catalog_for(category_slug=None):
        return [
            CatalogEntry.from_product(p) for p in sample_products
            if category_slug is None or p.category_slug == category_slug
        ]

    content.get_all_categories.return_value = sample_categories
    content.get_store_settings.return_value = store_settings
    content.get_all_products.return_value = sample_products
    content.get_home_page.side_effect = ContentNotFoundError("HomePage not found")
    content.get_about_page.side_effect = ContentNotFoundError("AboutPage not found")
    content.get_product_by_slug.side_effect = product_by_slug
    content.get_category_by_slug.side_effect = category_by_slug
    content.get_catalog.side_effect = catalog_for
    content.search_products.return_value = (sample_products[:1], 1)
    content.get_sitemap_params.return_value = {
        "categories": [c.slug.current for c in sample_categories],
        "products": [{"slug": p.slug.current, "category": p.category_slug} for p in sample_products],
    }
    content.resolve_category_slug.return_value = None
    return content


@pytest.fixture
def page_cache():
    return PageCache(ttl=60)


@pytest.fixture
def test_client(settings, mock_content, page_cache):
    """Provide a test client with overridden settings and services"""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_revalidate_secret] = lambda: settings.SANITY_REVALIDATE_SECRET
    app.dependency_overrides[get_content_service] = lambda: mock_content
    app.dependency_overrides[get_page_cache] = lambda: page_cache
    with TestClient(app) as client:
        # Websocket routes read services from app state
        app.state.content_service = mock_content
        app.state.page_cache = page_cache
        yield client
    app.dependency_overrides.clear()
