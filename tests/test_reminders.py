# tests/test_reminders.py
import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from factories import NOW, make_fee, make_plan, make_student, make_subscription
from libraryhub.core.config import Settings
from libraryhub.integrations.notifier import LogNotifier, Notifier, build_notifier, reminder_body
from libraryhub.services.reminders import run_reminder_sweep, seconds_until_next_run


class RecordingNotifier(Notifier):
    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.delivered = []

    async def _deliver(self, recipient_email, recipient_name, amount, due_date):
        if recipient_email in self.fail_for:
            raise ConnectionError("mail relay down")
        self.delivered.append((recipient_email, recipient_name, amount))


def test_sweep_keeps_going_after_a_failed_recipient(app, repo, settings):
    broken = make_student(repo, email="broken@example.com")
    fine = make_student(repo, email="fine@example.com", name="Fine")
    make_fee(repo, broken, amount="20.00", due=NOW + timedelta(days=1))
    make_fee(repo, fine, amount="30.00", due=NOW + timedelta(days=2))
    make_fee(repo, fine, amount="99.00", due=NOW + timedelta(days=20))

    notifier = RecordingNotifier(fail_for={"broken@example.com"})
    result = asyncio.run(run_reminder_sweep(app.state.session_factory, notifier, settings, now=NOW))

    assert result.reminders == 2
    assert result.failures == 1
    assert [d[0] for d in notifier.delivered] == ["fine@example.com"]
    assert str(notifier.delivered[0][2]) == "30.00"


def test_sweep_expires_lapsed_subscriptions(app, repo, settings):
    plan = make_plan(repo)
    student = make_student(repo)
    lapsed = make_subscription(repo, student, plan, NOW - timedelta(days=40), NOW - timedelta(days=1))
    current = make_subscription(repo, student, plan, NOW - timedelta(days=5), NOW + timedelta(days=25))

    result = asyncio.run(run_reminder_sweep(app.state.session_factory, LogNotifier(), settings, now=NOW))

    assert result.expired_subscriptions == 1
    repo.db.expire_all()
    statuses = {s.id: s.status for s in repo.list_subscriptions()}
    assert statuses == {lapsed.id: "expired", current.id: "active"}


def test_send_reports_delivery_errors_without_raising():
    notifier = RecordingNotifier(fail_for={"x@example.com"})

    assert asyncio.run(notifier.send("x@example.com", "X", "1.00", NOW)) is False
    assert asyncio.run(notifier.send("y@example.com", "Y", "1.00", NOW)) is True

    assert [d[0] for d in notifier.delivered] == ["y@example.com"]


def test_reminder_hour_must_be_a_clock_hour():
    with pytest.raises(PydanticValidationError):
        Settings(database_url="sqlite://", reminder_hour_utc=24)
    with pytest.raises(PydanticValidationError):
        Settings(database_url="sqlite://", reminder_hour_utc=-1)

    assert Settings(database_url="sqlite://", reminder_hour_utc=0).reminder_hour_utc == 0


def test_seconds_until_next_run():
    morning = datetime(2024, 1, 11, 8, 30, tzinfo=timezone.utc)
    evening = datetime(2024, 1, 11, 18, 0, tzinfo=timezone.utc)

    assert seconds_until_next_run(morning, 9) == 30 * 60
    assert seconds_until_next_run(evening, 9) == 15 * 3600
    assert seconds_until_next_run(datetime(2024, 1, 11, 9, tzinfo=timezone.utc), 9) == 24 * 3600


def test_build_notifier_picks_transport(settings):
    assert isinstance(build_notifier(settings), LogNotifier)

    settings.smtp_host = "smtp.example.com"
    assert type(build_notifier(settings)).__name__ == "SmtpNotifier"

    settings.notify_webhook_url = "https://relay.example.com/send"
    assert type(build_notifier(settings)).__name__ == "WebhookNotifier"


def test_reminder_body_mentions_amount_and_date():
    body = reminder_body("Asha", "120.00", NOW)

    assert "Dear Asha" in body
    assert "120.00" in body
    assert "11 Jan 2024" in body
