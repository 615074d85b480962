# tests/test_circulation.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from factories import NOW, make_book, make_student
from libraryhub.core.errors import BookUnavailable, NotFound, ValidationError
from libraryhub.services.circulation import CirculationService, late_fee_for
from libraryhub.utils.dt import as_utc_aware


@pytest.fixture
def circulation(repo, settings):
    return CirculationService(repo, settings)


def test_checkout_return_late_fee_scenario(repo, circulation):
    student = make_student(repo)
    book = make_book(repo, total=5, available=1)
    due = datetime(2024, 1, 1, tzinfo=timezone.utc)

    first = circulation.checkout(book.id, student.id, due, now=due - timedelta(days=14))
    assert first.status == "active"
    assert repo.get_book(book.id).available_copies == 0

    with pytest.raises(BookUnavailable):
        circulation.checkout(book.id, student.id, due, now=due - timedelta(days=13))
    assert len(repo.list_checkouts()) == 1

    returned = circulation.return_checkout(first.id, now=NOW)
    assert returned.status == "returned"
    assert as_utc_aware(returned.return_date) == NOW
    assert repo.get_book(book.id).available_copies == 1

    fees = repo.list_fees_by_student(student.id)
    assert len(fees) == 1
    fee = fees[0]
    assert fee.amount == Decimal("10.00")
    assert fee.type == "late-fee"
    assert fee.status == "pending"
    assert fee.paid_date is None
    assert fee.description == "Late return fee for 10 days"
    assert as_utc_aware(fee.due_date) == NOW + timedelta(days=7)


def test_return_on_due_date_creates_no_fee(repo, circulation):
    student = make_student(repo)
    book = make_book(repo, total=2)

    checkout = circulation.checkout(book.id, student.id, NOW, now=NOW - timedelta(days=7))
    circulation.return_checkout(checkout.id, now=NOW)

    assert repo.list_fees_by_student(student.id) == []
    assert repo.get_book(book.id).available_copies == 2


def test_partial_day_late_rounds_up(repo, circulation):
    student = make_student(repo)
    book = make_book(repo)

    checkout = circulation.checkout(book.id, student.id, NOW, now=NOW - timedelta(days=14))
    circulation.return_checkout(checkout.id, now=NOW + timedelta(days=2, hours=1))

    [fee] = repo.list_fees_by_student(student.id)
    assert fee.amount == Decimal("3.00")
    assert fee.description == "Late return fee for 3 days"


def test_late_fee_rate_follows_settings(repo, settings):
    settings.late_fee_per_day = Decimal("2.50")
    circulation = CirculationService(repo, settings)
    student = make_student(repo)
    book = make_book(repo)

    checkout = circulation.checkout(book.id, student.id, NOW - timedelta(days=2), now=NOW - timedelta(days=10))
    circulation.return_checkout(checkout.id, now=NOW)

    [fee] = repo.list_fees_by_student(student.id)
    assert fee.amount == Decimal("5.00")


def test_checkout_unknown_book_is_unavailable(repo, circulation):
    student = make_student(repo)

    with pytest.raises(BookUnavailable):
        circulation.checkout("missing", student.id, NOW)
    assert repo.list_checkouts() == []


def test_checkout_unknown_student_leaves_copies_alone(repo, circulation):
    book = make_book(repo, total=3)

    with pytest.raises(NotFound):
        circulation.checkout(book.id, "missing", NOW)
    assert repo.get_book(book.id).available_copies == 3


def test_return_unknown_checkout(circulation):
    with pytest.raises(NotFound, match="Checkout not found"):
        circulation.return_checkout("missing", now=NOW)


def test_return_when_book_is_gone(repo, circulation):
    student = make_student(repo)
    with repo.transaction():
        checkout = repo.create_checkout(book_id="gone", student_id=student.id, due_date=NOW)

    with pytest.raises(NotFound, match="Book not found"):
        circulation.return_checkout(checkout.id, now=NOW)
    assert repo.get_checkout(checkout.id).status == "active"


def test_second_return_is_rejected(repo, circulation):
    student = make_student(repo)
    book = make_book(repo, total=1)

    checkout = circulation.checkout(book.id, student.id, NOW, now=NOW - timedelta(days=1))
    circulation.return_checkout(checkout.id, now=NOW + timedelta(days=1))

    with pytest.raises(ValidationError):
        circulation.return_checkout(checkout.id, now=NOW + timedelta(days=2))

    assert repo.get_book(book.id).available_copies == 1
    assert len(repo.list_fees_by_student(student.id)) == 1


def test_copies_stay_in_range_over_many_cycles(repo, circulation):
    student = make_student(repo)
    book = make_book(repo, total=3)
    open_checkouts = []

    for i in range(10):
        if i % 3 == 2 and open_checkouts:
            circulation.return_checkout(open_checkouts.pop(), now=NOW)
        else:
            try:
                open_checkouts.append(circulation.checkout(book.id, student.id, NOW + timedelta(days=7), now=NOW).id)
            except BookUnavailable:
                pass

        current = repo.get_book(book.id)
        assert 0 <= current.available_copies <= current.total_copies
        assert current.available_copies == current.total_copies - len(open_checkouts)


def test_late_fee_for_formats_two_places():
    assert str(late_fee_for(4, Decimal("1.00"))) == "4.00"
    assert str(late_fee_for(3, Decimal("0.333"))) == "1.00"


def test_update_available_copies_sets_the_shelf_count(repo):
    book = make_book(repo, total=3, available=3)

    with repo.transaction():
        repo.update_available_copies(book.id, 1)
    assert repo.get_book(book.id).available_copies == 1

    with pytest.raises(IntegrityError):
        with repo.transaction():
            repo.update_available_copies(book.id, 4)
    assert repo.get_book(book.id).available_copies == 1

    with pytest.raises(NotFound):
        repo.update_available_copies("missing", 1)
