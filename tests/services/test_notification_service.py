"""Tests for NotificationService."""

from uuid import uuid4

from sis_finance.models import UserRole


class TestNotificationService:

    def test_send_and_list(self, notification_service, user_factory, deterministic_clock):
        user = user_factory(UserRole.STUDENT)
        ref = str(uuid4())

        notification_service.send_notification(user.id, "Tagihan Baru", "pesan", "bill", ref)

        rows = notification_service.get_user_notifications(user.id)
        assert len(rows) == 1
        assert rows[0].title == "Tagihan Baru"
        assert rows[0].type == "bill"
        assert rows[0].reference_id == ref
        assert rows[0].is_read is False

    def test_other_users_not_listed(self, notification_service, user_factory):
        alice = user_factory(UserRole.STUDENT)
        bob = user_factory(UserRole.PARENT)
        notification_service.send_notification(alice.id, "t", "m", "bill")

        assert notification_service.get_user_notifications(bob.id) == []

    def test_mark_as_read(self, session, notification_service, user_factory):
        user = user_factory(UserRole.STUDENT)
        notification_service.send_notification(user.id, "t", "m", "bill")
        notification = notification_service.get_user_notifications(user.id)[0]

        notification_service.mark_as_read(notification.id)
        session.expire_all()

        assert notification_service.get_user_notifications(user.id)[0].is_read is True

    def test_send_logged(self, notification_service, user_factory, captured_logs):
        user = user_factory(UserRole.STUDENT)
        notification_service.send_notification(user.id, "t", "m", "bill", "ref-1")

        records = [r for r in captured_logs() if r["message"] == "notification_sent"]
        assert records[0]["user_id"] == str(user.id)
        assert records[0]["reference_id"] == "ref-1"
