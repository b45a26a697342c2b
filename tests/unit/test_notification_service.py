from __future__ import annotations

import pytest
from instructormatch.domain.errors import NotFoundError
from instructormatch.domain.services.notifications import NotificationService
from instructormatch.infrastructure.db.models import Notification
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tests.utils import seed_instructor


class TestNotificationLog:
    @pytest.mark.asyncio
    async def test_duplicate_idempotency_key_is_skipped(self, db: AsyncSession) -> None:
        await seed_instructor(db, "inst-1")
        service = NotificationService(db)

        first = await service.create_notification(
            user_id="inst-1", title="Hello", message="first", idempotency_key="req-1:inst-1"
        )
        second = await service.create_notification(
            user_id="inst-1", title="Hello", message="again", idempotency_key="req-1:inst-1"
        )
        await db.commit()

        assert first is not None
        assert second is None
        count = await db.scalar(select(func.count()).select_from(Notification))
        assert count == 1

    @pytest.mark.asyncio
    async def test_list_by_user_is_newest_first(self, db: AsyncSession) -> None:
        await seed_instructor(db, "inst-1")
        await seed_instructor(db, "inst-2")
        service = NotificationService(db)
        for index in range(3):
            await service.create_notification(
                user_id="inst-1", title=f"n{index}", message="body", channel="push"
            )
            await db.commit()
        await service.create_notification(user_id="inst-2", title="other", message="body")
        await db.commit()

        notifications = await service.list_by_user("inst-1")

        assert [item.title for item in notifications] == ["n2", "n1", "n0"]
        assert all(item.type == "push" for item in notifications)
        assert all(item.sent_at is not None for item in notifications)

    @pytest.mark.asyncio
    async def test_mark_read_only_for_recipient(self, db: AsyncSession) -> None:
        await seed_instructor(db, "inst-1")
        service = NotificationService(db)
        notification = await service.create_notification(
            user_id="inst-1", title="Hello", message="body"
        )
        await db.commit()
        assert notification is not None

        with pytest.raises(NotFoundError):
            await service.mark_read(notification_id=notification.id, user_id="someone-else")

        updated = await service.mark_read(notification_id=notification.id, user_id="inst-1")
        assert updated.is_read is True

    @pytest.mark.asyncio
    async def test_mark_read_unknown_id(self, db: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await NotificationService(db).mark_read(notification_id="missing", user_id="u")
