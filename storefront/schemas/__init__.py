"""
Schema exports for the application.
"""

# Content store documents
from .content import (
    TranslatableText,
    TranslatableRichText,
    Slug,
    SanityImage,
    Seo,
    CategoryRef,
    Category,
    Product,
    HomePage,
    AboutPage,
    StoreSettings,
)

# Catalog listing rows
from .catalog import CatalogEntry

# Webhook payloads
from .webhook import ContentChangeEvent, InvalidationResult, events_from_body
