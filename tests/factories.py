# tests/factories.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import count

from libraryhub.db.repository import LibraryRepository

NOW = datetime(2024, 1, 11, tzinfo=timezone.utc)

_seq = count(1)


def make_student(repo: LibraryRepository, **overrides):
    n = next(_seq)
    values = {
        "name": f"Student {n}",
        "email": f"student{n}@example.com",
        "phone": "9999999999",
        "student_code": f"LIB-{n:04d}",
        "enrollment_date": NOW - timedelta(days=30),
    }
    values.update(overrides)
    with repo.transaction():
        return repo.create_student(**values)


def make_book(repo: LibraryRepository, total: int = 5, available: int | None = None, **overrides):
    n = next(_seq)
    values = {
        "title": f"Book {n}",
        "author": "Some Author",
        "isbn": f"978-0-{n:06d}",
        "category": "Fiction",
        "total_copies": total,
        "available_copies": total if available is None else available,
    }
    values.update(overrides)
    with repo.transaction():
        return repo.create_book(**values)


def make_plan(repo: LibraryRepository, price: str = "499.00", months: int = 1, **overrides):
    values = {
        "name": f"Plan {next(_seq)}",
        "price": Decimal(price),
        "duration_months": months,
        "features": ["Borrow up to 3 books"],
    }
    values.update(overrides)
    with repo.transaction():
        return repo.create_plan(**values)


def make_subscription(repo: LibraryRepository, student, plan, start: datetime, end: datetime, status: str = "active"):
    with repo.transaction():
        return repo.create_subscription(
            student_id=student.id,
            plan_id=plan.id,
            start_date=start,
            end_date=end,
            status=status,
            amount=plan.price,
        )


def make_fee(repo: LibraryRepository, student, amount: str = "50.00", due: datetime = NOW, status: str = "pending"):
    with repo.transaction():
        return repo.create_fee(
            student_id=student.id,
            amount=Decimal(amount),
            type="membership",
            description="Monthly fee",
            status=status,
            due_date=due,
        )
