"""
Typed CRUD over the LibraryHub tables.

The repository never commits on its own: writes are flushed into the current
session and made durable by ``transaction()``, so a service can group several
writes into one unit and have all of them rolled back together.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from libraryhub.core.errors import NotFound
from libraryhub.models.book import Book
from libraryhub.models.checkout import Checkout
from libraryhub.models.fee import Fee
from libraryhub.models.payment import Payment
from libraryhub.models.plan import SubscriptionPlan
from libraryhub.models.student import Student
from libraryhub.models.subscription import Subscription


class LibraryRepository:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator["LibraryRepository"]:
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _add(self, obj):
        self.db.add(obj)
        self.db.flush()  # assigns defaults without committing
        return obj

    def _synced(self, book_id: str, rowcount: int) -> bool:
        if rowcount != 1:
            return False
        # Bulk UPDATE bypasses the identity map; reload any Book already held
        self.db.get(Book, book_id, populate_existing=True)
        return True

    # ---------------------------
    # students
    # ---------------------------

    def list_students(self) -> list[Student]:
        return list(self.db.scalars(select(Student)))

    def get_student(self, student_id: str) -> Student | None:
        return self.db.get(Student, student_id)

    def get_student_by_email(self, email: str) -> Student | None:
        return self.db.scalars(select(Student).where(Student.email == email)).first()

    def get_student_by_code(self, student_code: str) -> Student | None:
        return self.db.scalars(select(Student).where(Student.student_code == student_code)).first()

    def create_student(self, **values: Any) -> Student:
        return self._add(Student(**values))

    def delete_student(self, student_id: str) -> None:
        # Dependents first: payments reference fees, everything references the student
        student_fees = select(Fee.id).where(Fee.student_id == student_id)
        self.db.execute(
            update(Payment)
            .where(Payment.fee_id.in_(student_fees), Payment.student_id != student_id)
            .values(fee_id=None)
            .execution_options(synchronize_session=False)
        )
        self.db.execute(delete(Payment).where(Payment.student_id == student_id))
        self.db.execute(delete(Fee).where(Fee.student_id == student_id))
        self.db.execute(delete(Checkout).where(Checkout.student_id == student_id))
        self.db.execute(delete(Subscription).where(Subscription.student_id == student_id))
        self.db.execute(delete(Student).where(Student.id == student_id))

    def update_billing_refs(self, student_id: str, customer_ref: str | None, subscription_ref: str | None) -> Student:
        student = self.get_student(student_id)
        if not student:
            raise NotFound("Student not found")
        student.billing_customer_ref = customer_ref
        student.billing_subscription_ref = subscription_ref
        self.db.flush()
        return student

    # ---------------------------
    # books
    # ---------------------------

    def list_books(self) -> list[Book]:
        return list(self.db.scalars(select(Book)))

    def get_book(self, book_id: str) -> Book | None:
        return self.db.get(Book, book_id)

    def get_book_by_isbn(self, isbn: str) -> Book | None:
        return self.db.scalars(select(Book).where(Book.isbn == isbn)).first()

    def create_book(self, **values: Any) -> Book:
        return self._add(Book(**values))

    def count_books(self) -> int:
        return self.db.scalar(select(func.count()).select_from(Book)) or 0

    def update_available_copies(self, book_id: str, available_copies: int) -> Book:
        book = self.get_book(book_id)
        if not book:
            raise NotFound("Book not found")
        book.available_copies = available_copies
        self.db.flush()
        return book

    def decrement_available(self, book_id: str) -> bool:
        """Take one copy off the shelf. False when none is left (or the book is unknown)."""
        result = self.db.execute(
            update(Book)
            .where(Book.id == book_id, Book.available_copies > 0)
            .values(available_copies=Book.available_copies - 1)
            .execution_options(synchronize_session=False)
        )
        return self._synced(book_id, result.rowcount)

    def increment_available(self, book_id: str) -> bool:
        """Put one copy back. False when the shelf is already full."""
        result = self.db.execute(
            update(Book)
            .where(Book.id == book_id, Book.available_copies < Book.total_copies)
            .values(available_copies=Book.available_copies + 1)
            .execution_options(synchronize_session=False)
        )
        return self._synced(book_id, result.rowcount)

    # ---------------------------
    # plans
    # ---------------------------

    def list_plans(self) -> list[SubscriptionPlan]:
        return list(self.db.scalars(select(SubscriptionPlan).order_by(SubscriptionPlan.price)))

    def get_plan(self, plan_id: str) -> SubscriptionPlan | None:
        return self.db.get(SubscriptionPlan, plan_id)

    def create_plan(self, **values: Any) -> SubscriptionPlan:
        return self._add(SubscriptionPlan(**values))

    def count_plans(self) -> int:
        return self.db.scalar(select(func.count()).select_from(SubscriptionPlan)) or 0

    # ---------------------------
    # subscriptions
    # ---------------------------

    def list_subscriptions(self) -> list[Subscription]:
        return list(self.db.scalars(select(Subscription)))

    def list_active_subscriptions(self) -> list[Subscription]:
        return list(self.db.scalars(select(Subscription).where(Subscription.status == "active")))

    def get_active_subscription_by_student(self, student_id: str) -> Subscription | None:
        return self.db.scalars(
            select(Subscription)
            .where(Subscription.student_id == student_id, Subscription.status == "active")
            .order_by(Subscription.start_date.desc())
        ).first()

    def create_subscription(self, **values: Any) -> Subscription:
        return self._add(Subscription(**values))

    def expire_lapsed_subscriptions(self, now: datetime) -> int:
        result = self.db.execute(
            update(Subscription)
            .where(Subscription.status == "active", Subscription.end_date < now)
            .values(status="expired")
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # ---------------------------
    # checkouts
    # ---------------------------

    def list_checkouts(self) -> list[Checkout]:
        return list(self.db.scalars(select(Checkout)))

    def get_checkout(self, checkout_id: str) -> Checkout | None:
        return self.db.get(Checkout, checkout_id)

    def create_checkout(self, **values: Any) -> Checkout:
        return self._add(Checkout(**values))

    def mark_returned(self, checkout_id: str, return_date: datetime) -> Checkout:
        checkout = self.get_checkout(checkout_id)
        if not checkout:
            raise NotFound("Checkout not found")
        checkout.return_date = return_date
        checkout.status = "returned"
        self.db.flush()
        return checkout

    # ---------------------------
    # fees
    # ---------------------------

    def list_fees(self) -> list[Fee]:
        return list(self.db.scalars(select(Fee)))

    def list_fees_by_student(self, student_id: str) -> list[Fee]:
        return list(self.db.scalars(select(Fee).where(Fee.student_id == student_id)))

    def list_fees_due_by(self, cutoff: datetime, statuses: tuple[str, ...] = ("pending",)) -> list[Fee]:
        return list(self.db.scalars(
            select(Fee).where(Fee.status.in_(statuses), Fee.due_date <= cutoff)
        ))

    def get_fee(self, fee_id: str) -> Fee | None:
        return self.db.get(Fee, fee_id)

    def create_fee(self, **values: Any) -> Fee:
        values.pop("paid_date", None)
        return self._add(Fee(**values))

    def update_fee_status(self, fee_id: str, status: str, paid_date: datetime | None = None) -> Fee:
        fee = self.get_fee(fee_id)
        if not fee:
            raise NotFound("Fee not found")
        fee.status = status
        fee.paid_date = paid_date
        self.db.flush()
        return fee

    # ---------------------------
    # payments
    # ---------------------------

    def list_payments(self) -> list[Payment]:
        return list(self.db.scalars(select(Payment)))

    def get_payment(self, payment_id: str) -> Payment | None:
        return self.db.get(Payment, payment_id)

    def create_payment(self, **values: Any) -> Payment:
        return self._add(Payment(**values))

    def update_payment_status(self, payment_id: str, status: str) -> Payment:
        payment = self.get_payment(payment_id)
        if not payment:
            raise NotFound("Payment not found")
        payment.status = status
        self.db.flush()
        return payment
