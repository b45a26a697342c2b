"""Append-only notification log.

Notifications are written by the matching engine and the application workflow
and polled by clients. Nothing is delivered; ``type`` is only a label.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from instructormatch.domain.errors import NotFoundError
from instructormatch.infrastructure.db.models import Notification, utcnow
from sqlalchemy import select

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)

DEFAULT_CHANNEL = "email"


class NotificationService:
    """Create and read per-user notifications.

    Writes are only flushed; the caller owns the transaction so fan-out can be
    committed together with the record that triggered it.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_notification(
        self,
        *,
        user_id: str,
        title: str,
        message: str,
        channel: str = DEFAULT_CHANNEL,
        idempotency_key: str | None = None,
    ) -> Notification | None:
        """Append a notification, skipping it when ``idempotency_key`` was already used."""
        if idempotency_key is not None:
            existing = await self.session.scalar(
                select(Notification.id).where(Notification.idempotency_key == idempotency_key)
            )
            if existing is not None:
                logger.info(
                    "notification_duplicate_skipped",
                    user_id=user_id,
                    idempotency_key=idempotency_key,
                )
                return None

        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=channel,
            is_read=False,
            sent_at=utcnow(),
            idempotency_key=idempotency_key,
        )
        self.session.add(notification)
        await self.session.flush()
        return notification

    async def list_by_user(self, user_id: str) -> list[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id)
        )
        return list((await self.session.scalars(stmt)).all())

    async def mark_read(self, *, notification_id: str, user_id: str) -> Notification:
        notification = await self.session.get(Notification, notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundError(f"Notification {notification_id} not found")

        if not notification.is_read:
            notification.is_read = True
            await self.session.commit()
        return notification
