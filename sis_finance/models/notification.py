"""
Module: sis_finance.models.notification
Responsibility: In-app notifications addressed to a user (new bills, etc.).
"""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sis_finance.db.base import TimestampedBase


class Notification(TimestampedBase):
    __tablename__ = "notifications"

    __table_args__ = (Index("idx_notification_user_read", "user_id", "is_read"),)

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    reference_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
