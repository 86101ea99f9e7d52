import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from storefront.core.config import get_revalidate_secret
from storefront.core.exceptions import InvalidationError
from storefront.dependencies import get_invalidation_service
from storefront.services.invalidation import InvalidationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["webhooks"])

SIGNATURE_HEADER = "sanity-webhook-signature"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post("/revalidate")
async def revalidate_webhook(
    request: Request,
    service: InvalidationService = Depends(get_invalidation_service),
    secret: str = Depends(get_revalidate_secret),
):
    """Content store webhook: purge cached pages affected by a document change"""
    # The signature covers the exact bytes sent, so read the body before any parsing
    raw_body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    try:
        result = await service.handle_notification(raw_body, signature, secret)
    except InvalidationError as e:
        return JSONResponse(
            {"error": str(e), "timestamp": _timestamp()},
            status_code=e.status_code,
        )
    except Exception:
        logger.exception("Webhook handler error")
        return JSONResponse(
            {"error": "Internal server error", "timestamp": _timestamp()},
            status_code=500,
        )

    return JSONResponse(result.to_response(), status_code=result.status_code)


@router.get("/revalidate")
async def revalidate_status():
    return {
        "message": "Sanity webhook revalidation endpoint is active",
        "timestamp": _timestamp(),
    }
