"""Notification feed, read-state, broadcast and audience preview endpoints."""

from typing import List

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from api.dependencies.accounts import CurrentAccountDep
from api.dependencies.rate_limits import get_limiter
from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    AudienceTarget,
    BroadcastForbiddenError,
    BroadcastRequest,
    BroadcastValidationError,
    RecipientLookupError,
)
from infrastructure.services import BroadcastServiceDep, DeliveryLogDep

logger = get_module_logger()

router = APIRouter(prefix="/notifications", tags=["Notifications"])
limiter = get_limiter()


class AudiencePreviewRequest(BaseModel):
    targets: List[AudienceTarget] = Field(default_factory=list)


@router.get("")
@limiter.limit("60/minute")
def list_notifications(
    request: Request,  # pylint: disable=unused-argument
    account_id: CurrentAccountDep,
    delivery_log: DeliveryLogDep,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    unread: bool = False,
):
    """Paginated internal feed of the caller, newest first, with unread count."""
    feed = delivery_log.list_feed(
        account_id, page=page, page_size=page_size, unread_only=unread
    )
    return feed.to_dict()


@router.patch("/read-all")
@limiter.limit("30/minute")
def mark_all_read(
    request: Request,  # pylint: disable=unused-argument
    account_id: CurrentAccountDep,
    delivery_log: DeliveryLogDep,
):
    """Mark every unread feed entry of the caller as read."""
    updated = delivery_log.mark_all_read(account_id)
    return {"success": True, "updated": updated}


@router.patch("/{entry_id}")
@limiter.limit("60/minute")
def mark_read(
    request: Request,  # pylint: disable=unused-argument
    entry_id: str,
    account_id: CurrentAccountDep,
    delivery_log: DeliveryLogDep,
):
    """Mark one of the caller's feed entries as read."""
    entry = delivery_log.mark_read(entry_id, account_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"data": entry.to_dict()}


@router.post("/send")
@limiter.limit("10/minute")
def send_broadcast(
    request: Request,  # pylint: disable=unused-argument
    body: BroadcastRequest,
    account_id: CurrentAccountDep,
    service: BroadcastServiceDep,
):
    """Broadcast a bilingual message to the resolved audience (administrators only)."""
    try:
        result = service.broadcast(account_id, body)
    except RecipientLookupError:
        raise HTTPException(status_code=404, detail="Profile not found")
    except BroadcastForbiddenError:
        raise HTTPException(status_code=403, detail="Forbidden")
    except BroadcastValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.to_dict()


@router.post("/audience")
@limiter.limit("30/minute")
def preview_audience(
    request: Request,  # pylint: disable=unused-argument
    body: AudiencePreviewRequest,
    account_id: CurrentAccountDep,
    service: BroadcastServiceDep,
):
    """Recipient counts for a set of targets (administrators only)."""
    try:
        return service.preview(account_id, body.targets)
    except RecipientLookupError:
        raise HTTPException(status_code=404, detail="Profile not found")
    except BroadcastForbiddenError:
        raise HTTPException(status_code=403, detail="Forbidden")
