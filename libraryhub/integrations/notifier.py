import asyncio
import smtplib
from datetime import datetime
from decimal import Decimal
from email.message import EmailMessage

import httpx

from libraryhub.core.config import Settings
from libraryhub.core.logging import get_logger

log = get_logger("notifier")

SUBJECT = "Fee Payment Reminder - LibraryHub"


def reminder_body(recipient_name: str, amount: Decimal, due_date: datetime) -> str:
    return (
        f"<h2>Fee Payment Reminder</h2>"
        f"<p>Dear {recipient_name},</p>"
        f"<p>This is a reminder that you have an outstanding fee of <strong>{amount}</strong> "
        f"due on {due_date:%d %b %Y}.</p>"
        f"<p>Please ensure payment is made before the due date to avoid late fees.</p>"
        f"<p>Thank you,<br>LibraryHub Team</p>"
    )


class Notifier:
    """
    Best-effort reminder channel.

    ``send`` never raises: delivery errors are logged and reported as False,
    there is no retry. Subclasses implement ``_deliver``.
    """

    async def send(self, recipient_email: str, recipient_name: str, amount: Decimal, due_date: datetime) -> bool:
        try:
            await self._deliver(recipient_email, recipient_name, amount, due_date)
        except Exception:
            log.exception("failed to send fee reminder to %s", recipient_email)
            return False
        log.info("sent fee reminder to %s", recipient_email)
        return True

    async def _deliver(self, recipient_email: str, recipient_name: str, amount: Decimal, due_date: datetime) -> None:
        raise NotImplementedError


class LogNotifier(Notifier):
    """Used when no mail transport is configured."""

    async def _deliver(self, recipient_email, recipient_name, amount, due_date):
        log.info("reminder (not delivered): %s <%s> owes %s due %s", recipient_name, recipient_email, amount, due_date)


class SmtpNotifier(Notifier):
    def __init__(self, settings: Settings):
        self.settings = settings

    def _send_sync(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=20) as smtp:
            smtp.starttls()
            if self.settings.smtp_user:
                smtp.login(self.settings.smtp_user, self.settings.smtp_password)
            smtp.send_message(msg)

    async def _deliver(self, recipient_email, recipient_name, amount, due_date):
        msg = EmailMessage()
        msg["From"] = self.settings.mail_from
        msg["To"] = recipient_email
        msg["Subject"] = SUBJECT
        msg.set_content(reminder_body(recipient_name, amount, due_date), subtype="html")
        # smtplib blocks; keep it off the event loop
        await asyncio.to_thread(self._send_sync, msg)


class WebhookNotifier(Notifier):
    """Hands the reminder to an HTTP mail relay as JSON."""

    def __init__(self, url: str):
        self.url = url

    async def _deliver(self, recipient_email, recipient_name, amount, due_date):
        payload = {
            "to": recipient_email,
            "name": recipient_name,
            "subject": SUBJECT,
            "html": reminder_body(recipient_name, amount, due_date),
            "amount": str(amount),
            "due_date": due_date.isoformat(),
        }
        async with httpx.AsyncClient(timeout=20) as client:
            r = await client.post(self.url, json=payload)
        r.raise_for_status()


def build_notifier(settings: Settings) -> Notifier:
    if settings.notify_webhook_url:
        return WebhookNotifier(settings.notify_webhook_url)
    if settings.smtp_host:
        return SmtpNotifier(settings)
    return LogNotifier()
