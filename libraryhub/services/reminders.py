"""
Daily fee reminder sweep.

The sweep reads due fees in a worker thread with its own session, then hands
each one to the notifier. A failing recipient is logged and skipped; the rest
still get their reminder.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.orm import sessionmaker

from libraryhub.core.config import Settings
from libraryhub.core.logging import get_logger
from libraryhub.db.repository import LibraryRepository
from libraryhub.integrations.notifier import Notifier
from libraryhub.services.renewals import fees_due_for_reminder
from libraryhub.utils.dt import utcnow

log = get_logger("reminders")


@dataclass
class DueReminder:
    email: str
    name: str
    amount: Decimal
    due_date: datetime


@dataclass
class SweepResult:
    expired_subscriptions: int = 0
    reminders: int = 0
    failures: int = 0


def collect_due_reminders(
    session_factory: sessionmaker,
    window_days: int,
    now: datetime,
) -> tuple[int, list[DueReminder]]:
    db = session_factory()
    try:
        repo = LibraryRepository(db)
        with repo.transaction():
            expired = repo.expire_lapsed_subscriptions(now)
        due = [
            DueReminder(email=s.email, name=s.name, amount=f.amount, due_date=f.due_date)
            for f, s in fees_due_for_reminder(repo, window_days, now)
        ]
        return expired, due
    finally:
        db.close()


async def run_reminder_sweep(
    session_factory: sessionmaker,
    notifier: Notifier,
    settings: Settings,
    now: datetime | None = None,
) -> SweepResult:
    now = now or utcnow()
    log.info("running daily fee reminder check")

    expired, due = await asyncio.to_thread(
        collect_due_reminders, session_factory, settings.reminder_window_days, now
    )
    result = SweepResult(expired_subscriptions=expired)

    for item in due:
        result.reminders += 1
        if not await notifier.send(item.email, item.name, item.amount, item.due_date):
            result.failures += 1

    log.info(
        "reminder sweep done: %d reminders, %d failures, %d subscriptions expired",
        result.reminders, result.failures, result.expired_subscriptions,
    )
    return result


def seconds_until_next_run(now: datetime, hour_utc: int) -> float:
    run_at = now.replace(hour=hour_utc, minute=0, second=0, microsecond=0)
    if run_at <= now:
        run_at += timedelta(days=1)
    return (run_at - now).total_seconds()


class ReminderScheduler:
    """Runs the sweep once a day at ``reminder_hour_utc``; owned by the app lifespan."""

    def __init__(self, session_factory: sessionmaker, notifier: Notifier, settings: Settings):
        self.session_factory = session_factory
        self.notifier = notifier
        self.settings = settings
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._loop(), name="fee-reminders")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _loop(self) -> None:
        while True:
            delay = seconds_until_next_run(utcnow(), self.settings.reminder_hour_utc)
            await asyncio.sleep(delay)
            try:
                await run_reminder_sweep(self.session_factory, self.notifier, self.settings)
            except Exception:
                # keep the schedule alive; tomorrow's run starts fresh
                log.exception("reminder sweep failed")
