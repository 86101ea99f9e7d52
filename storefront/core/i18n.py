"""
Locale negotiation and the fixed UI strings shown around content store text.
"""

from typing import Optional

from storefront.core.enums import SUPPORTED_LOCALES, DEFAULT_LOCALE


def is_supported(lang: Optional[str]) -> bool:
    return lang in SUPPORTED_LOCALES


def locale_from_path(path: str) -> Optional[str]:
    """Return the locale prefix of a path (``/nl/about`` -> ``nl``), if any"""
    for locale in SUPPORTED_LOCALES:
        if path == f"/{locale}" or path.startswith(f"/{locale}/"):
            return locale
    return None


def negotiate_locale(accept_language: Optional[str]) -> str:
    """
    Pick the best supported locale from an Accept-Language header.

    Entries are tried in descending quality order: exact match, then the
    primary language subtag (``en-US`` -> ``en``), then any Dutch variant.
    """
    if not accept_language:
        return DEFAULT_LOCALE

    candidates = []
    for position, part in enumerate(accept_language.split(",")):
        part = part.strip()
        if not part:
            continue
        tag, _, quality = part.partition(";q=")
        try:
            q = float(quality) if quality else 1.0
        except ValueError:
            q = 0.0
        candidates.append((-q, position, tag.strip().lower()))

    for _, _, tag in sorted(candidates):
        if tag in SUPPORTED_LOCALES:
            return tag
        primary = tag.split("-")[0]
        if primary in SUPPORTED_LOCALES:
            return primary
        if tag.startswith("nl"):
            return "nl"

    return DEFAULT_LOCALE


def alternate_locale(lang: str) -> str:
    return next(locale for locale in SUPPORTED_LOCALES if locale != lang)


UI_STRINGS = {
    "en": {
        "home": "Home",
        "about": "About",
        "contact": "Contact",
        "categories": "Categories",
        "products": "Products",
        "product": "product",
        "products_plural": "products",
        "search": "Search",
        "search_placeholder": "Search products...",
        "search_in": "Search in {name}...",
        "filtered_by": "filtered by",
        "found_matching": "Found {count} products matching \"{query}\"",
        "no_results": "No products found",
        "no_results_hint": "Try a different search term or browse our categories.",
        "price_on_request": "Price on request",
        "available": "Available",
        "unavailable": "Currently unavailable",
        "related_products": "You may also like",
        "ask_whatsapp": "Ask via WhatsApp",
        "back_to": "Back to {name}",
        "item_number": "Item number",
        "sort_by": "Sort by",
        "visit_store": "Visit our store",
        "opening_hours": "Opening hours",
        "address": "Address",
        "phone": "Phone",
        "email": "Email",
        "view_all": "View all",
        "not_found_title": "Page not found",
        "not_found_body": "The page you are looking for does not exist.",
        "sorted_by_relevance": "Sorted by relevance",
    },
    "nl": {
        "home": "Home",
        "about": "Over ons",
        "contact": "Contact",
        "categories": "Categorieën",
        "products": "Producten",
        "product": "product",
        "products_plural": "producten",
        "search": "Zoeken",
        "search_placeholder": "Zoek producten...",
        "search_in": "Zoeken in {name}...",
        "filtered_by": "gefilterd op",
        "found_matching": "{count} producten gevonden voor \"{query}\"",
        "no_results": "Geen producten gevonden",
        "no_results_hint": "Probeer een andere zoekterm of bekijk onze categorieën.",
        "price_on_request": "Prijs op aanvraag",
        "available": "Beschikbaar",
        "unavailable": "Momenteel niet beschikbaar",
        "related_products": "Misschien ook interessant",
        "ask_whatsapp": "Vraag via WhatsApp",
        "back_to": "Terug naar {name}",
        "item_number": "Artikelnummer",
        "sort_by": "Sorteer op",
        "visit_store": "Bezoek onze winkel",
        "opening_hours": "Openingstijden",
        "address": "Adres",
        "phone": "Telefoon",
        "email": "E-mail",
        "view_all": "Bekijk alles",
        "not_found_title": "Pagina niet gevonden",
        "not_found_body": "De pagina die je zoekt bestaat niet.",
        "sorted_by_relevance": "Gesorteerd op relevantie",
    },
}


def translate(lang: str, key: str, **kwargs) -> str:
    strings = UI_STRINGS.get(lang, UI_STRINGS[DEFAULT_LOCALE])
    text = strings.get(key, UI_STRINGS[DEFAULT_LOCALE].get(key, key))
    return text.format(**kwargs) if kwargs else text
