"""
NotificationService -- in-app notifications for ledger events.

Responsibility:
    Default implementation of the ``Notifier`` collaborator: stores one
    Notification row per message.  Push delivery is outside this package.

    BillingService treats every call as best-effort; this service itself
    raises normally so failures are visible to whoever calls it directly.
"""

from typing import Protocol
from uuid import UUID

from sqlalchemy import select, update

from sis_finance.domain.dtos import NotificationInfo
from sis_finance.logging_config import get_logger
from sis_finance.models.notification import Notification
from sis_finance.services.base import BaseService

logger = get_logger("services.notification")


class Notifier(Protocol):
    """Anything that can deliver a notification to a user."""

    def send_notification(
        self,
        user_id: UUID,
        title: str,
        message: str,
        notification_type: str,
        reference_id: str | None = None,
    ) -> None: ...


class NotificationService(BaseService[Notification]):

    def send_notification(
        self,
        user_id: UUID,
        title: str,
        message: str,
        notification_type: str,
        reference_id: str | None = None,
    ) -> None:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=notification_type,
            reference_id=reference_id,
        )
        self.session.add(notification)
        self.session.flush()

        logger.info(
            "notification_sent",
            extra={
                "user_id": str(user_id),
                "notification_type": notification_type,
                "reference_id": reference_id,
            },
        )

    def get_user_notifications(self, user_id: UUID) -> list[NotificationInfo]:
        """Newest first."""
        rows = self.session.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
        ).scalars().all()
        return [NotificationInfo.from_model(n) for n in rows]

    def mark_as_read(self, notification_id: UUID) -> None:
        with self._persisting("mark_notification_read"):
            self.session.execute(
                update(Notification)
                .where(Notification.id == notification_id)
                .values(is_read=True)
            )
            self.session.flush()
