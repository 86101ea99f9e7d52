"""
Content-change webhook handling.

The content store POSTs a signed JSON body whenever a document changes.
``InvalidationService.handle_notification`` authenticates the body,
works out which rendered pages now show stale content, and purges those
paths from the page cache. A failed purge for one path is reported but
never stops the others.
"""

import asyncio
import hashlib
import hmac
import json
import logging
from typing import Iterable, List, Optional, Protocol, Set, Union

from storefront.core.enums import DocumentType, SUPPORTED_LOCALES
from storefront.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ContentStoreError,
    ValidationError,
)
from storefront.schemas.webhook import ContentChangeEvent, InvalidationResult, events_from_body

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="

# Rendered into the header and footer of every page
SHARED_LAYOUT_TYPES = (DocumentType.CATEGORY, DocumentType.STORE_SETTINGS)


class CachePurger(Protocol):
    async def purge(self, path: str) -> Optional[bool]:
        ...


def sign(raw_body: Union[bytes, str], secret: str) -> str:
    """Signature header value for a body, in ``sha256=<hex>`` form"""
    if isinstance(raw_body, str):
        raw_body = raw_body.encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(raw_body: Union[bytes, str], signature_header: Optional[str], secret: Optional[str]) -> bool:
    """
    Check ``signature_header`` against an HMAC-SHA256 of the exact raw body.

    Returns False for any mismatch, including a missing or malformed header.
    """
    if not secret or not isinstance(signature_header, str):
        return False
    signature_header = signature_header.strip()
    if not signature_header.startswith(SIGNATURE_PREFIX):
        return False
    if not isinstance(raw_body, (bytes, str)):
        return False

    expected = sign(raw_body, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature_header.encode("utf-8"))


def compute_invalidation_paths(event: ContentChangeEvent) -> Set[str]:
    """
    Every page path, in both locales, whose rendered output depends on the
    changed document. Unknown document types yield an empty set.
    """
    paths: Set[str] = set()

    for lang in SUPPORTED_LOCALES:
        if event.document_type == DocumentType.PRODUCT:
            if event.slug and event.category_slug:
                paths.add(f"/{lang}/{event.category_slug}/{event.slug}")
            elif event.slug:
                paths.add(f"/{lang}/products/{event.slug}")
            # category listing shows the product; home shows featured items
            if event.category_slug:
                paths.add(f"/{lang}/{event.category_slug}")
            paths.add(f"/{lang}")

        elif event.document_type == DocumentType.CATEGORY:
            if event.slug:
                paths.add(f"/{lang}/{event.slug}")
            paths.add(f"/{lang}")

        elif event.document_type == DocumentType.HOME_PAGE:
            paths.add(f"/{lang}")

        elif event.document_type == DocumentType.ABOUT_PAGE:
            paths.add(f"/{lang}/about")

        elif event.document_type == DocumentType.STORE_SETTINGS:
            paths.add(f"/{lang}")
            paths.add(f"/{lang}/contact")
            paths.add(f"/{lang}/about")

    if not paths:
        logger.info(f"No paths to invalidate for {event.document_type.value} document {event.document_id}")
    return paths


class InvalidationService:
    """Turns authenticated webhook bodies into page cache purges"""

    def __init__(self, purger: CachePurger, content_service=None):
        """
        Args:
            purger: cache collaborator exposing ``async purge(path)``; raising
                or returning False marks that path as failed
                and optionally ``async purge_all()``, called when a document
                shown in the shared layout changes
            content_service: optional ``ContentService`` used to resolve
                category references and cleared after each notification
        """
        self.purger = purger
        self.content_service = content_service

    def parse_events(self, raw_body: Union[bytes, str]) -> List[ContentChangeEvent]:
        try:
            body = json.loads(raw_body)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Invalid JSON payload: {e}")
        events = events_from_body(body)
        if not events:
            raise ValidationError("No documents in payload")
        return events

    async def resolve_category(self, event: ContentChangeEvent) -> ContentChangeEvent:
        """Fill in the category slug of a product that only references its category"""
        if event.category_slug or not event.category_ref or self.content_service is None:
            return event
        try:
            category_slug = await self.content_service.resolve_category_slug(event.category_ref)
        except ContentStoreError as e:
            logger.warning(f"Could not resolve category {event.category_ref} for {event.document_id}: {e}")
            return event
        return event.with_category_slug(category_slug)

    async def _purge(self, path: str) -> Optional[str]:
        """Purge one path; returns an error message on failure"""
        try:
            outcome = await self.purger.purge(path)
        except Exception as e:
            error = f"Failed to revalidate {path}: {e}"
            logger.error(error)
            return error
        if outcome is False:
            error = f"Failed to revalidate {path}"
            logger.error(error)
            return error
        logger.info(f"Revalidated: {path}")
        return None

    async def purge_paths(self, paths: Iterable[str], result: InvalidationResult) -> InvalidationResult:
        ordered = sorted(set(paths))
        outcomes = await asyncio.gather(*(self._purge(path) for path in ordered))
        for path, error in zip(ordered, outcomes):
            if error is None:
                result.revalidated.append(path)
            else:
                result.errors.append(error)
        return result

    async def purge_shared_layout(self, result: InvalidationResult) -> InvalidationResult:
        purge_all = getattr(self.purger, "purge_all", None)
        if purge_all is None:
            return result
        try:
            await purge_all()
        except Exception as e:
            error = f"Failed to revalidate shared layout: {e}"
            logger.error(error)
            result.errors.append(error)
        return result

    async def handle_notification(
        self,
        raw_body: Union[bytes, str],
        signature_header: Optional[str],
        secret: Optional[str],
    ) -> InvalidationResult:
        """
        Authenticate, parse and apply one webhook notification.

        Raises:
            ConfigurationError: no secret configured
            AuthenticationError: missing or invalid signature
            ValidationError: body is not JSON or lacks ``_id``/``_type``
        """
        if not secret:
            logger.error("SANITY_REVALIDATE_SECRET not configured")
            raise ConfigurationError("Webhook secret not configured")

        if not signature_header:
            logger.error("Missing webhook signature")
            raise AuthenticationError("Missing webhook signature")

        if not verify_signature(raw_body, signature_header, secret):
            logger.error("Invalid webhook signature")
            raise AuthenticationError("Invalid webhook signature")

        events = self.parse_events(raw_body)
        logger.info(f"Webhook received: {[(e.document_type.value, e.document_id) for e in events]}")

        paths: Set[str] = set()
        for event in events:
            event = await self.resolve_category(event)
            paths |= compute_invalidation_paths(event)

        result = InvalidationResult(
            documents=[{"id": e.document_id, "type": e.document_type.value} for e in events]
        )
        await self.purge_paths(paths, result)
        if any(e.document_type in SHARED_LAYOUT_TYPES for e in events):
            await self.purge_shared_layout(result)

        if self.content_service is not None:
            self.content_service.clear_cache()

        logger.info(f"Revalidation completed: {len(result.revalidated)} paths, {len(result.errors)} errors")
        return result
