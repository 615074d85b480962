from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from libraryhub.db.repository import LibraryRepository
from libraryhub.models.fee import Fee
from libraryhub.models.student import Student
from libraryhub.utils.dt import as_utc_aware, ceil_days, utcnow


@dataclass
class RenewalReminder:
    id: str
    student_name: str
    email: str
    plan_name: str
    amount: Decimal
    renewal_date: datetime
    days_until_renewal: int


def renewal_projection(repo: LibraryRepository, now: datetime | None = None) -> list[RenewalReminder]:
    """
    Active subscriptions that still have time left, soonest renewal first.

    Subscriptions ending today or earlier are left out; the sort is stable so
    ties keep storage order.
    """
    now = now or utcnow()
    students = {s.id: s for s in repo.list_students()}
    plans = {p.id: p for p in repo.list_plans()}

    reminders = []
    for sub in repo.list_active_subscriptions():
        end_date = as_utc_aware(sub.end_date)
        days = ceil_days(end_date - now)
        if days <= 0:
            continue

        student = students.get(sub.student_id)
        plan = plans.get(sub.plan_id)
        reminders.append(RenewalReminder(
            id=sub.id,
            student_name=student.name if student else "Unknown",
            email=student.email if student else "N/A",
            plan_name=plan.name if plan else "Unknown",
            amount=sub.amount,
            renewal_date=end_date,
            days_until_renewal=days,
        ))

    reminders.sort(key=lambda r: r.days_until_renewal)
    return reminders


def fees_due_for_reminder(
    repo: LibraryRepository,
    window_days: int,
    now: datetime | None = None,
) -> list[tuple[Fee, Student]]:
    """Pending fees due within ``window_days`` (overdue ones included), paired with their student."""
    now = now or utcnow()
    cutoff = now + timedelta(days=window_days)
    students = {s.id: s for s in repo.list_students()}

    due = []
    for fee in repo.list_fees_due_by(cutoff):
        student = students.get(fee.student_id)
        if student:
            due.append((fee, student))
    return due
