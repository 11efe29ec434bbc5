import logging
from collections import deque
from datetime import datetime
from pydantic import BaseModel, Field
from constants import NOTIFICATION_MESSAGES
from enums import NotificationEventEnum

logger = logging.getLogger(__name__)


class NotificationEvent(BaseModel):
    kind: NotificationEventEnum
    subject_id: str
    message: str
    timestamp: datetime = Field(default_factory=datetime.now)


def create_notification(kind: NotificationEventEnum, subject_id, message: str | None = None) -> NotificationEvent:
    if not message:
        message = NOTIFICATION_MESSAGES.get(kind, "Project {project_id} has been updated").format(project_id=subject_id)
    return NotificationEvent(kind=kind, subject_id=str(subject_id), message=message)


class LoggingNotificationSink: #fire and forget, stands in for email
    def __init__(self, history_size: int = 200):
        self.events: deque[NotificationEvent] = deque(maxlen=history_size) #recent events, kept for tests and debugging

    def notify(self, kind: NotificationEventEnum, subject_id, message: str | None = None):
        event = create_notification(kind, subject_id, message)
        self.events.append(event)
        logger.info("Notification [%s] %s: %s", event.kind.value, event.subject_id, event.message)
