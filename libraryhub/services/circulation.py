from datetime import datetime, timedelta
from decimal import Decimal

from libraryhub.core.config import Settings
from libraryhub.core.errors import BookUnavailable, NotFound, ValidationError
from libraryhub.core.logging import get_logger
from libraryhub.db.repository import LibraryRepository
from libraryhub.models.checkout import Checkout
from libraryhub.models.fee import Fee
from libraryhub.utils.dt import as_utc_aware, ceil_days, utcnow

log = get_logger("circulation")

CENTS = Decimal("0.01")


def late_fee_for(days_late: int, per_day: Decimal) -> Decimal:
    return (Decimal(days_late) * per_day).quantize(CENTS)


class CirculationService:
    """Checkouts and returns, keeping Book.available_copies in step."""

    def __init__(self, repo: LibraryRepository, settings: Settings):
        self.repo = repo
        self.settings = settings

    def checkout(
        self,
        book_id: str,
        student_id: str,
        due_date: datetime,
        now: datetime | None = None,
    ) -> Checkout:
        now = now or utcnow()
        with self.repo.transaction():
            if not self.repo.get_student(student_id):
                raise NotFound("Student not found")

            # conditional decrement: never below zero even with concurrent requests
            if not self.repo.decrement_available(book_id):
                raise BookUnavailable()

            checkout = self.repo.create_checkout(
                book_id=book_id,
                student_id=student_id,
                checkout_date=now,
                due_date=as_utc_aware(due_date),
                status="active",
            )

        log.info("checkout %s: book=%s student=%s due=%s", checkout.id, book_id, student_id, checkout.due_date)
        return checkout

    def return_checkout(self, checkout_id: str, now: datetime | None = None) -> Checkout:
        now = now or utcnow()
        fee: Fee | None = None

        with self.repo.transaction():
            checkout = self.repo.get_checkout(checkout_id)
            if not checkout:
                raise NotFound("Checkout not found")
            if checkout.status == "returned":
                raise ValidationError("Checkout already returned")

            book = self.repo.get_book(checkout.book_id)
            if not book:
                raise NotFound("Book not found")

            # capture before mark_returned touches the row
            due_date = as_utc_aware(checkout.due_date)

            checkout = self.repo.mark_returned(checkout_id, now)
            if not self.repo.increment_available(book.id):
                log.warning("return %s: book %s already has all copies on the shelf", checkout_id, book.id)

            if due_date < now:
                fee = self._assess_late_fee(checkout, due_date, now)

        if fee:
            log.info("return %s: late fee %s assessed for student %s", checkout_id, fee.amount, fee.student_id)
        else:
            log.info("return %s: on time", checkout_id)
        return checkout

    def _assess_late_fee(self, checkout: Checkout, due_date: datetime, now: datetime) -> Fee:
        days_late = ceil_days(now - due_date)
        return self.repo.create_fee(
            student_id=checkout.student_id,
            amount=late_fee_for(days_late, self.settings.late_fee_per_day),
            type="late-fee",
            description=f"Late return fee for {days_late} days",
            status="pending",
            due_date=now + timedelta(days=self.settings.late_fee_due_days),
        )
