"""
Search / sort pipeline for catalog listings.

Pure functions over an immutable list of ``CatalogEntry``: nothing here
mutates its input or touches the network. Listings always filter first,
then sort.
"""

import unicodedata
from decimal import Decimal
from typing import List, Optional, Sequence, Union

from storefront.core.enums import SortOption
from storefront.schemas.catalog import CatalogEntry

ZERO = Decimal(0)


def _localized_name(entry: CatalogEntry, locale: str) -> str:
    # Entries without a name in the active locale sort as an empty string
    return getattr(entry.name, locale, None) or ""


def _localized_description(entry: CatalogEntry, locale: str) -> str:
    if entry.description is None:
        return ""
    return getattr(entry.description, locale, None) or ""


def collation_key(text: str) -> str:
    """Case- and accent-insensitive key, so ``Éclair`` sorts with ``eclair``"""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def filter_entries(entries: Sequence[CatalogEntry], query: Optional[str], locale: str) -> List[CatalogEntry]:
    """
    Keep entries whose localized name or description contains ``query``.

    Matching is a case-insensitive substring test on the trimmed query; an
    empty query keeps everything. Input order is preserved.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(entries)
    return [
        entry for entry in entries
        if needle in _localized_name(entry, locale).lower()
        or needle in _localized_description(entry, locale).lower()
    ]


def sort_entries(
    entries: Sequence[CatalogEntry],
    sort_key: Union[SortOption, str, None],
    locale: str = "en",
) -> List[CatalogEntry]:
    """
    Return a new list ordered by ``sort_key``. All orders are stable.

    - featured: item number ascending
    - name-asc: localized name ascending
    - price-asc / price-desc: missing prices count as 0
    """
    option = SortOption.parse(sort_key)

    if option == SortOption.NAME_ASC:
        return sorted(entries, key=lambda e: collation_key(_localized_name(e, locale)))
    if option == SortOption.PRICE_ASC:
        return sorted(entries, key=lambda e: e.price if e.price is not None else ZERO)
    if option == SortOption.PRICE_DESC:
        # reverse=True keeps equal prices in input order
        return sorted(entries, key=lambda e: e.price if e.price is not None else ZERO, reverse=True)
    return sorted(entries, key=lambda e: e.sort_key)


def view(
    entries: Sequence[CatalogEntry],
    query: Optional[str],
    locale: str,
    sort_key: Union[SortOption, str, None] = SortOption.FEATURED,
) -> List[CatalogEntry]:
    """Render-ready listing: filter, then sort"""
    return sort_entries(filter_entries(entries, query, locale), sort_key, locale)


def sort_options(locale: str):
    """(value, label) pairs for the sort dropdown"""
    return [(option.value, option.label(locale)) for option in SortOption]
