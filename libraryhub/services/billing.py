from datetime import datetime
from decimal import Decimal

from libraryhub.core.config import Settings
from libraryhub.core.errors import NotFound, ValidationError
from libraryhub.core.logging import get_logger
from libraryhub.db.repository import LibraryRepository
from libraryhub.models.fee import Fee
from libraryhub.models.payment import Payment
from libraryhub.models.subscription import Subscription
from libraryhub.utils.dt import add_months, as_utc_aware, utcnow

log = get_logger("billing")

OUTSTANDING = ("pending", "overdue")


def pending_total(fees: list[Fee]) -> Decimal:
    return sum((f.amount for f in fees if f.status in OUTSTANDING), Decimal("0.00"))


class BillingService:
    """Fees, payments and subscriptions, and the fee <- payment settlement link."""

    def __init__(self, repo: LibraryRepository, settings: Settings):
        self.repo = repo
        self.settings = settings

    # ---------------------------
    # fees
    # ---------------------------

    def create_fee(
        self,
        student_id: str,
        amount: Decimal,
        type: str,
        description: str,
        due_date: datetime,
        status: str = "pending",
    ) -> Fee:
        with self.repo.transaction():
            if not self.repo.get_student(student_id):
                raise ValidationError("Student not found")
            fee = self.repo.create_fee(
                student_id=student_id,
                amount=amount,
                type=type,
                description=description,
                status=status,
                due_date=as_utc_aware(due_date),
            )
        return fee

    # ---------------------------
    # payments
    # ---------------------------

    def should_settle(self, payment_status: str) -> bool:
        if self.settings.settle_fees_on_completed_only:
            return payment_status == "completed"
        # Any payment linked to a fee settles it (long-standing behaviour)
        return True

    def record_payment(
        self,
        student_id: str,
        amount: Decimal,
        payment_method: str,
        fee_id: str | None = None,
        gateway_ref: str | None = None,
        status: str = "completed",
        now: datetime | None = None,
    ) -> Payment:
        now = now or utcnow()
        with self.repo.transaction():
            if not self.repo.get_student(student_id):
                raise ValidationError("Student not found")
            if fee_id and not self.repo.get_fee(fee_id):
                raise ValidationError("Fee not found")

            payment = self.repo.create_payment(
                student_id=student_id,
                fee_id=fee_id,
                amount=amount,
                payment_method=payment_method,
                gateway_ref=gateway_ref,
                status=status,
                payment_date=now,
            )

            settled = bool(fee_id) and self.should_settle(status)
            if settled:
                self.repo.update_fee_status(fee_id, "paid", now)

        if settled:
            log.info("payment %s settled fee %s (payment status=%s)", payment.id, fee_id, status)
        return payment

    def mark_payment_pending(self, payment_id: str) -> Payment:
        with self.repo.transaction():
            payment = self.repo.update_payment_status(payment_id, "pending")
        return payment

    # ---------------------------
    # subscriptions
    # ---------------------------

    def subscribe(
        self,
        student_id: str,
        plan_id: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        amount: Decimal | None = None,
        status: str = "active",
    ) -> Subscription:
        with self.repo.transaction():
            sub = self._create_subscription(student_id, plan_id, start_date, end_date, amount, status)
        return sub

    def enroll(
        self,
        student_id: str,
        plan_id: str,
        payment_method: str,
        gateway_ref: str | None = None,
        now: datetime | None = None,
    ) -> tuple[Subscription, Payment]:
        """Start a subscription on a plan and record its payment in full."""
        now = now or utcnow()
        with self.repo.transaction():
            sub = self._create_subscription(student_id, plan_id, now, None, None, "active", missing=NotFound)
            payment = self.repo.create_payment(
                student_id=student_id,
                amount=sub.amount,
                payment_method=payment_method,
                gateway_ref=gateway_ref,
                status="completed",
                payment_date=now,
            )
        log.info("enrolled student %s on plan %s until %s", student_id, plan_id, sub.end_date)
        return sub, payment

    def _create_subscription(self, student_id, plan_id, start_date, end_date, amount, status, missing=ValidationError):
        student = self.repo.get_student(student_id)
        plan = self.repo.get_plan(plan_id)
        if not student or not plan:
            raise missing("Student or plan not found")

        start = as_utc_aware(start_date) or utcnow()
        end = as_utc_aware(end_date) or add_months(start, plan.duration_months)
        if end <= start:
            raise ValidationError("end_date must be after start_date")

        return self.repo.create_subscription(
            student_id=student_id,
            plan_id=plan_id,
            start_date=start,
            end_date=end,
            status=status,
            # snapshot: later plan price changes leave this subscription alone
            amount=plan.price if amount is None else amount,
        )
