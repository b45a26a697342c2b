from __future__ import annotations

from fastapi import APIRouter, Depends
from instructormatch.api.deps import get_current_account, get_db_session
from instructormatch.api.errors import to_http_exception
from instructormatch.api.schemas.notifications import NotificationResponse
from instructormatch.domain import MarketplaceError
from instructormatch.domain.services.notifications import NotificationService
from instructormatch.infrastructure.db.models import UserModel
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> list[NotificationResponse]:
    """The caller's notifications, newest first."""
    notifications = await NotificationService(session).list_by_user(account.id)
    return [NotificationResponse.model_validate(item) for item in notifications]


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> NotificationResponse:
    service = NotificationService(session)
    try:
        notification = await service.mark_read(
            notification_id=notification_id, user_id=account.id
        )
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return NotificationResponse.model_validate(notification)
