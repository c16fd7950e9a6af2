"""
Notification store.

One instance per logged-in counselor, held by the UI session and handed to
whatever needs to raise an alert (e.g. `sessions_repo.create_session`).
`notifications` is newest first; `unread_count` is a running counter kept
in step with it and never goes below zero. Every mutation writes the whole
state to the backing slot, and a new store restores it verbatim.
"""
import time
import uuid
from typing import Any, Callable, Optional

import structlog

from counselor_dashboard.config import DEFAULT_TIMEZONE, NOTIFICATION_TYPES, TEST_NOTIFICATION_INTERVAL
from counselor_dashboard.models.notification import Notification
from counselor_dashboard.utils.formatters import format_long_datetime

logger = structlog.get_logger(__name__)

TEST_NOTIFICATIONS = [
    {
        "title": "New Session Request",
        "message": "Sarah Johnson requested a counseling session for tomorrow at 2 PM",
        "type": "info",
    },
    {
        "title": "Payment Received",
        "message": "Payment of $120 received from Michael Brown for last week's session",
        "type": "success",
    },
    {
        "title": "Upcoming Session Reminder",
        "message": "You have a session with Emma Thompson in 1 hour",
        "type": "warning",
    },
    {
        "title": "Session Cancelled",
        "message": "David Wilson cancelled their session scheduled for today at 4 PM",
        "type": "error",
    },
    {
        "title": "Profile Update Required",
        "message": "Please update your availability schedule for next week",
        "type": "info",
    },
]


class NotificationStore:
    def __init__(self, slot=None, tz: str = DEFAULT_TIMEZONE):
        self.slot = slot
        self.tz = tz
        self.notifications: list[Notification] = []
        self.unread_count = 0
        self.restored = False
        self._restore()

    # -----------------------------
    # persistence
    # -----------------------------
    def _restore(self) -> None:
        if self.slot is None:
            return
        state = self.slot.load()
        if not state:
            return
        self.notifications = [Notification.from_dict(d) for d in state.get("notifications", [])]
        self.unread_count = int(state.get("unreadCount", 0))
        self.restored = True
        logger.debug("notifications_restored", slot=self.slot.name, count=len(self.notifications))

    def _persist(self) -> None:
        if self.slot is None:
            return
        self.slot.save(
            {
                "notifications": [n.to_dict() for n in self.notifications],
                "unreadCount": self.unread_count,
            }
        )

    def _find(self, notification_id: str) -> Optional[Notification]:
        return next((n for n in self.notifications if n.id == notification_id), None)

    # -----------------------------
    # operations
    # -----------------------------
    def add_notification(self, title: str, message: str, type: str = "info", data: Any = None) -> Notification:
        if type not in NOTIFICATION_TYPES:
            raise ValueError(f"Unknown notification type: {type!r}")

        notification = Notification(
            id=str(uuid.uuid4()),
            title=title,
            message=message,
            type=type,
            read=False,
            created_at=int(time.time() * 1000),
            data=data,
        )
        self.notifications.insert(0, notification)
        self.unread_count += 1
        self._persist()
        logger.info("notification_added", notification_id=notification.id, type=type)
        return notification

    def add_session_booking_notification(self, session) -> Notification:
        when = format_long_datetime(session.session_date, self.tz)
        return self.add_notification(
            title="New Session Booked",
            message=f"{session.user_name} has booked a session for {when}",
            type="success",
            data={"sessionId": session.session_id},
        )

    def mark_as_read(self, notification_id: str) -> None:
        notification = self._find(notification_id)
        if notification is None or notification.read:
            return
        notification.read = True
        self.unread_count = max(0, self.unread_count - 1)
        self._persist()

    def mark_all_as_read(self) -> None:
        for n in self.notifications:
            n.read = True
        self.unread_count = 0
        self._persist()

    def delete_notification(self, notification_id: str) -> None:
        notification = self._find(notification_id)
        if notification is None:
            return
        self.notifications = [n for n in self.notifications if n.id != notification_id]
        if not notification.read:
            self.unread_count = max(0, self.unread_count - 1)
        self._persist()

    def clear_all(self) -> None:
        self.notifications = []
        self.unread_count = 0
        self._persist()

    def initialize_test_notifications(
        self,
        interval: float = TEST_NOTIFICATION_INTERVAL,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        """Demo seeding: the sample alerts arrive `interval` seconds apart."""
        sleep = sleep or time.sleep
        for index, sample in enumerate(TEST_NOTIFICATIONS):
            if index:
                sleep(interval)
            self.add_notification(**sample)
        logger.info("test_notifications_seeded", count=len(TEST_NOTIFICATIONS))
