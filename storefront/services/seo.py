"""
Page metadata and structured data.

Titles and descriptions come from a document's ``seo`` block when the
editors filled it in, otherwise from its localized name/description,
otherwise from the site defaults.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from storefront.core.enums import SUPPORTED_LOCALES
from storefront.core.i18n import alternate_locale
from storefront.schemas.content import Category, HomePage, AboutPage, Product, Seo, StoreSettings

DEFAULT_DESCRIPTION = {
    "en": "Discover authentic cultural products and heritage items at {site}",
    "nl": "Ontdek authentieke culturele producten en erfgoeditems bij {site}",
}

OG_LOCALES = {"en": "en_US", "nl": "nl_NL"}


class PageMeta(BaseModel):
    title: str
    description: str
    lang: str
    canonical: str
    alternates: Dict[str, str] = Field(default_factory=dict)
    og_type: str = "website"
    og_locale: str = ""
    og_alternate_locale: str = ""
    image: Optional[str] = None
    image_alt: Optional[str] = None
    structured_data: List[Dict[str, Any]] = Field(default_factory=list)


def localized_path(path: str, lang: str) -> str:
    """Swap the locale prefix of ``path`` (``/en/about`` -> ``/nl/about``)"""
    parts = path.split("/", 2)
    if len(parts) > 1 and parts[1] in SUPPORTED_LOCALES:
        rest = f"/{parts[2]}" if len(parts) > 2 and parts[2] else ""
        return f"/{lang}{rest}"
    return path


def _seo_text(seo: Optional[Seo], field: str, lang: str) -> str:
    value = getattr(seo, field, None) if seo else None
    return value.get(lang) if value else ""


def build_meta(
    settings,
    lang: str,
    path: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
    image: Optional[str] = None,
    image_alt: Optional[str] = None,
    og_type: str = "website",
) -> PageMeta:
    base = settings.SITE_URL.rstrip("/")
    return PageMeta(
        title=title or settings.SITE_NAME,
        description=description or DEFAULT_DESCRIPTION[lang].format(site=settings.SITE_NAME),
        lang=lang,
        canonical=f"{base}{path}",
        alternates={locale: f"{base}{localized_path(path, locale)}" for locale in SUPPORTED_LOCALES},
        og_type=og_type,
        og_locale=OG_LOCALES[lang],
        og_alternate_locale=OG_LOCALES[alternate_locale(lang)],
        image=image,
        image_alt=image_alt,
    )


def home_meta(settings, lang: str, home: Optional[HomePage]) -> PageMeta:
    seo = home.seo if home else None
    return build_meta(
        settings, lang, f"/{lang}",
        title=_seo_text(seo, "meta_title", lang),
        description=_seo_text(seo, "meta_description", lang),
    )


def about_meta(settings, lang: str, about: AboutPage) -> PageMeta:
    title = _seo_text(about.seo, "meta_title", lang) or f"{about.heading.get(lang)} - {settings.SITE_NAME}"
    description = _seo_text(about.seo, "meta_description", lang) or about.introduction.get(lang)
    image = about.hero_image.sized(1200, 630) if about.hero_image else None
    return build_meta(settings, lang, f"/{lang}/about", title=title, description=description, image=image)


def category_meta(settings, lang: str, category: Category) -> PageMeta:
    name = category.category_name.get(lang)
    title = _seo_text(category.seo, "meta_title", lang) or f"{name} - {settings.SITE_NAME}"
    description = _seo_text(category.seo, "meta_description", lang) or (
        category.description.get(lang) if category.description else ""
    )
    image = category.category_image.sized(1200, 630) if category.category_image else None
    return build_meta(settings, lang, f"/{lang}/{category.slug.current}", title=title, description=description, image=image)


def product_meta(settings, lang: str, product: Product) -> PageMeta:
    name = product.product_name.get(lang)
    title = _seo_text(product.seo, "meta_title", lang) or f"{name} - {settings.SITE_NAME}"
    description = (
        _seo_text(product.seo, "meta_description", lang)
        or (product.description.get(lang) if product.description else "")
        or (
            f"Discover {name} at {settings.SITE_NAME} - Authentic cultural products" if lang == "en"
            else f"Ontdek {name} bij {settings.SITE_NAME} - Authentieke culturele producten"
        )
    )
    image = product.main_image
    path = f"/{lang}/{product.path_segment}/{product.slug.current}"
    meta = build_meta(
        settings, lang, path,
        title=title,
        description=description,
        image=image.sized(1200, 630) if image else None,
        image_alt=(image.alt if image and image.alt else name),
        og_type="product",
    )
    meta.structured_data = [product_json_ld(settings, lang, product, meta.canonical)]
    return meta


# --- JSON-LD ---

def product_json_ld(settings, lang: str, product: Product, url: str) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "Product",
        "name": product.product_name.get(lang),
        "url": url,
        "sku": product.item_number,
        "brand": {"@type": "Brand", "name": settings.SITE_NAME},
    }
    if product.description:
        data["description"] = product.description.get(lang)
    images = [image.url for image in product.product_images if image.url]
    if images:
        data["image"] = images
    if product.category:
        data["category"] = product.category.category_name.get(lang)
    if product.price is not None:
        data["offers"] = {
            "@type": "Offer",
            "price": f"{product.price:.2f}",
            "priceCurrency": "EUR",
            "availability": "https://schema.org/InStock" if product.is_available else "https://schema.org/OutOfStock",
            "url": url,
        }
    return data


def store_json_ld(settings, lang: str, store: StoreSettings) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "Store",
        "name": settings.SITE_NAME,
        "url": f"{settings.SITE_URL.rstrip('/')}/{lang}",
    }
    address = store.address.get(lang)
    if address:
        data["address"] = address
    if store.phone_main:
        data["telephone"] = store.phone_main
    if store.email:
        data["email"] = store.email
    hours = store.timings.get(lang)
    if hours:
        data["openingHours"] = hours
    if store.store_image and store.store_image.url:
        data["image"] = store.store_image.url
    return data


def breadcrumb_json_ld(settings, crumbs: List[Tuple[str, str]]) -> Dict[str, Any]:
    base = settings.SITE_URL.rstrip("/")
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": position, "name": name, "item": f"{base}{path}"}
            for position, (name, path) in enumerate(crumbs, start=1)
        ],
    }


# --- Sitemap / robots ---

def static_sitemap_entries(settings) -> List[Dict[str, Any]]:
    base = settings.SITE_URL.rstrip("/")
    today = date.today().isoformat()
    entries = []
    for lang in SUPPORTED_LOCALES:
        entries.append({"loc": f"{base}/{lang}", "lastmod": today, "changefreq": "weekly", "priority": "1.0"})
        entries.append({"loc": f"{base}/{lang}/categories", "lastmod": today, "changefreq": "weekly", "priority": "0.8"})
        entries.append({"loc": f"{base}/{lang}/about", "lastmod": today, "changefreq": "monthly", "priority": "0.6"})
        entries.append({"loc": f"{base}/{lang}/contact", "lastmod": today, "changefreq": "monthly", "priority": "0.6"})
        entries.append({"loc": f"{base}/{lang}/search", "lastmod": today, "changefreq": "monthly", "priority": "0.5"})
    return entries


def dynamic_sitemap_entries(settings, params: Dict[str, List]) -> List[Dict[str, Any]]:
    base = settings.SITE_URL.rstrip("/")
    today = date.today().isoformat()
    entries = []
    for slug in params.get("categories", []):
        for lang in SUPPORTED_LOCALES:
            entries.append({"loc": f"{base}/{lang}/{slug}", "lastmod": today, "changefreq": "weekly", "priority": "0.8"})
    for product in params.get("products", []):
        segment = product.get("category") or "products"
        for lang in SUPPORTED_LOCALES:
            entries.append({
                "loc": f"{base}/{lang}/{segment}/{product['slug']}",
                "lastmod": today,
                "changefreq": "monthly",
                "priority": "0.9",
            })
    return entries


def robots_txt(settings) -> str:
    base = settings.SITE_URL.rstrip("/")
    return "\n".join([
        "User-agent: *",
        "Allow: /",
        "Disallow: /studio/",
        "Disallow: /api/",
        "",
        f"Sitemap: {base}/sitemap.xml",
        "",
    ])
