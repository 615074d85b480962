from datetime import datetime, timedelta
from decimal import Decimal

from libraryhub.db.repository import LibraryRepository
from libraryhub.services.billing import OUTSTANDING, pending_total
from libraryhub.utils.dt import as_utc_aware, utcnow

ZERO = Decimal("0.00")


def _latest(items, key):
    return max(items, key=key, default=None)


class DashboardService:
    """Read-only joins for the staff dashboard. Nothing here writes."""

    def __init__(self, repo: LibraryRepository):
        self.repo = repo

    def stats(self, now: datetime | None = None) -> dict:
        now = now or utcnow()
        subscriptions = self.repo.list_subscriptions()
        checkouts = self.repo.list_checkouts()
        active_checkouts = [c for c in checkouts if c.status == "active"]

        return {
            "total_students": len(self.repo.list_students()),
            "active_subscriptions": sum(1 for s in subscriptions if s.status == "active"),
            "total_revenue": sum((s.amount for s in subscriptions), ZERO),
            "total_books": self.repo.count_books(),
            "active_checkouts": len(active_checkouts),
            "overdue_checkouts": sum(1 for c in active_checkouts if as_utc_aware(c.due_date) < now),
            "pending_fees": pending_total(self.repo.list_fees()),
        }

    def payment_stats(self) -> dict:
        payments = self.repo.list_payments()
        received = sum((p.amount for p in payments if p.status == "completed"), ZERO)
        pending = sum((p.amount for p in payments if p.status != "completed"), ZERO)

        return {
            "total_students": len(self.repo.list_students()),
            "pending_payments": pending,
            "paid_payments": received,
            "total_received": received,
        }

    def upcoming_fees(self, window_days: int = 7, limit: int = 5, now: datetime | None = None) -> list[dict]:
        now = now or utcnow()
        cutoff = now + timedelta(days=window_days)
        names = {s.id: s.name for s in self.repo.list_students()}

        rows = []
        for fee in self.repo.list_fees():
            if fee.status not in OUTSTANDING or as_utc_aware(fee.due_date) > cutoff:
                continue
            rows.append({
                "id": fee.id,
                "student_name": names.get(fee.student_id, "Unknown"),
                "amount": fee.amount,
                "due_date": fee.due_date,
                "type": fee.type,
            })
            if len(rows) == limit:
                break
        return rows

    def recent_students(self, limit: int = 5) -> list:
        students = self.repo.list_students()
        students.sort(key=lambda s: as_utc_aware(s.enrollment_date), reverse=True)
        return students[:limit]

    def students_with_fees(self) -> list[dict]:
        """
        One row per student with their plan and whether they have paid.

        When a student has several subscriptions (or completed payments) the
        most recent one by start date (payment date) is shown.
        """
        subscriptions = self.repo.list_subscriptions()
        payments = [p for p in self.repo.list_payments() if p.status == "completed"]
        plans = {p.id: p for p in self.repo.list_plans()}

        rows = []
        for student in self.repo.list_students():
            sub = _latest(
                (s for s in subscriptions if s.student_id == student.id),
                key=lambda s: as_utc_aware(s.start_date),
            )
            payment = _latest(
                (p for p in payments if p.student_id == student.id),
                key=lambda p: as_utc_aware(p.payment_date),
            )
            plan = plans.get(sub.plan_id) if sub else None

            rows.append({
                "id": student.id,
                "name": student.name,
                "email": student.email,
                "phone": student.phone,
                "plan_name": plan.name if plan else "N/A",
                "amount": sub.amount if sub else Decimal("0"),
                "payment_status": "paid" if payment else "pending",
                "payment_date": payment.payment_date if payment else None,
                "enrollment_date": student.enrollment_date,
            })
        return rows
