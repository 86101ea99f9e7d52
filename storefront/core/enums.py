"""
Shared enums and constants used across the application.
"""

from enum import Enum


class Locale(str, Enum):
    """Supported languages. Declaration order is the fallback order."""
    EN = "en"
    NL = "nl"


SUPPORTED_LOCALES = [locale.value for locale in Locale]
DEFAULT_LOCALE = Locale.EN.value


class DocumentType(str, Enum):
    """Document type tags sent by the content store"""
    PRODUCT = "product"
    CATEGORY = "category"
    HOME_PAGE = "homePage"
    ABOUT_PAGE = "aboutPage"
    STORE_SETTINGS = "storeSettings"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value) -> "DocumentType":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class SortOption(str, Enum):
    """Sort keys accepted by the catalog listing"""
    FEATURED = "featured"
    NAME_ASC = "name-asc"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"

    @classmethod
    def parse(cls, value) -> "SortOption":
        """Unknown or missing keys fall back to the catalog order"""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.FEATURED
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.FEATURED

    def label(self, locale: str) -> str:
        return SORT_LABELS[self][locale if locale in SUPPORTED_LOCALES else DEFAULT_LOCALE]


SORT_LABELS = {
    SortOption.FEATURED: {"en": "Featured", "nl": "Uitgelicht"},
    SortOption.NAME_ASC: {"en": "Name (A-Z)", "nl": "Naam (A-Z)"},
    SortOption.PRICE_ASC: {"en": "Price (Low to High)", "nl": "Prijs (Laag naar Hoog)"},
    SortOption.PRICE_DESC: {"en": "Price (High to Low)", "nl": "Prijs (Hoog naar Laag)"},
}
