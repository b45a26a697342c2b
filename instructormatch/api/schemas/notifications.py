from __future__ import annotations

from datetime import datetime

from instructormatch.api.schemas.common import CamelModel


class NotificationResponse(CamelModel):
    id: str
    user_id: str
    title: str
    message: str
    type: str
    is_read: bool
    sent_at: datetime | None = None
    created_at: datetime
