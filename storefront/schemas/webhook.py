"""
Schemas for content-change webhook payloads.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.enums import DocumentType
from storefront.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Mutation kinds that carry the full document body
DOCUMENT_MUTATIONS = ("create", "createOrReplace", "createIfNotExists")
# Mutation kinds that only carry the document id
ID_MUTATIONS = ("patch", "delete")


def _nested_str(data: Any, *keys: str) -> Optional[str]:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data if isinstance(data, str) and data else None


class ContentChangeEvent(BaseModel):
    """One changed document, reduced to what path computation needs"""
    model_config = ConfigDict(frozen=True)

    document_id: str
    document_type: DocumentType
    slug: Optional[str] = None
    category_slug: Optional[str] = None
    category_ref: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "ContentChangeEvent":
        """Build an event from a document body, rejecting bodies without ``_id``/``_type``"""
        if not isinstance(payload, dict):
            raise ValidationError("Payload must be a JSON object")

        document_id = payload.get("_id")
        raw_type = payload.get("_type")
        if not isinstance(document_id, str) or not document_id:
            raise ValidationError("Missing required field: _id")
        if not isinstance(raw_type, str) or not raw_type:
            raise ValidationError("Missing required field: _type")

        document_type = DocumentType.parse(raw_type)
        slug = _nested_str(payload, "slug", "current")
        category_slug = category_ref = None
        if document_type == DocumentType.PRODUCT:
            category_slug = _nested_str(payload, "category", "slug", "current")
            category_ref = _nested_str(payload, "category", "_ref")

        return cls(
            document_id=document_id,
            document_type=document_type,
            slug=slug,
            category_slug=category_slug,
            category_ref=category_ref,
        )

    def with_category_slug(self, category_slug: Optional[str]) -> "ContentChangeEvent":
        return self.model_copy(update={"category_slug": category_slug})


def _document_from_mutation(mutation: Any) -> Dict[str, Any]:
    if not isinstance(mutation, dict):
        raise ValidationError("Mutation must be a JSON object")
    for kind in DOCUMENT_MUTATIONS:
        if isinstance(mutation.get(kind), dict):
            return mutation[kind]
    for kind in ID_MUTATIONS:
        if isinstance(mutation.get(kind), dict):
            return {"_id": mutation[kind].get("id"), "_type": mutation.get("_type")}
    return {"_id": mutation.get("_id"), "_type": mutation.get("_type")}


def events_from_body(body: Any) -> List[ContentChangeEvent]:
    """
    Accept either a single document body or a ``mutations`` envelope.

    Patch and delete mutations carry no document body, so the resulting
    events only know the document id and type. Mutations that cannot be
    identified are skipped; the envelope is rejected only when none can.
    """
    if not (isinstance(body, dict) and isinstance(body.get("mutations"), list)):
        return [ContentChangeEvent.from_payload(body)]

    events = []
    for index, mutation in enumerate(body["mutations"]):
        try:
            events.append(ContentChangeEvent.from_payload(_document_from_mutation(mutation)))
        except ValidationError as e:
            logger.warning(f"Skipping mutation {index}: {e}")
    if not events:
        raise ValidationError("No identifiable documents in mutations")
    return events


class InvalidationResult(BaseModel):
    """Outcome of one webhook notification"""
    documents: List[Dict[str, str]] = Field(default_factory=list)
    revalidated: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def status_code(self) -> int:
        # 207 = Multi-Status (partial success)
        return 207 if self.errors else 200

    def to_response(self) -> Dict[str, Any]:
        response = {
            "revalidated": self.revalidated,
            "documents": self.documents,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.errors:
            response["errors"] = self.errors
        return response
