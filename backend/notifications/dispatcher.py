import logging

from backend.notifications.mailer import EmailSender
from backend.notifications.events import StatusUpdateEvent
from backend.notifications.templates import render_status_update

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Renders status-update emails and hands them to the sender.

    ``dispatch`` never raises: it runs after the HTTP response has been
    produced and a delivery failure must not reach the admin who triggered it.
    """

    def __init__(self, sender: EmailSender):
        self.sender = sender

    async def dispatch(self, event: StatusUpdateEvent) -> bool:
        if not event.student_email:
            logger.warning("Issue %s has no reporter email; notification skipped", event.issue_id)
            return False

        if not self.sender.is_configured:
            logger.warning("[Email] SMTP is not configured; notification for issue %s skipped", event.issue_id)
            return False

        try:
            rendered = render_status_update(event)
            await self.sender.send(event.student_email, rendered.subject, rendered.html, rendered.text)
        except Exception:
            logger.exception("Failed to send status update for issue %s", event.issue_id)
            return False
        return True


_dispatcher: NotificationDispatcher | None = None


def get_notification_dispatcher() -> NotificationDispatcher:
    global _dispatcher

    if _dispatcher is None:
        _dispatcher = NotificationDispatcher(EmailSender.from_config())
    return _dispatcher
