from decimal import Decimal

from sqlalchemy.orm import Session

from libraryhub.core.config import settings
from libraryhub.core.logging import get_logger, setup_logging
from libraryhub.db.repository import LibraryRepository
from libraryhub.db.session import build_engine, build_session_factory, init_db

log = get_logger("seed")

PLANS = [
    {"name": "Basic", "price": Decimal("499.00"), "duration_months": 1,
     "features": [
         "Borrow up to 3 books",
         "14-day checkout period",
         "Email support",
         "Access to digital catalog",
     ]},

    {"name": "Premium", "price": Decimal("999.00"), "duration_months": 1,
     "features": [
         "Borrow up to 10 books",
         "30-day checkout period",
         "Priority support",
         "Early access to new releases",
         "Hold up to 5 books",
     ]},

    {"name": "Annual", "price": Decimal("9999.00"), "duration_months": 12,
     "features": [
         "Unlimited book borrowing",
         "60-day checkout period",
         "24/7 priority support",
         "Exclusive events access",
         "Free late fee waivers (2x/year)",
     ]},
]

BOOKS = [
    {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "isbn": "978-0-7432-7356-5",
     "category": "Fiction", "total_copies": 5, "available_copies": 3, "published_year": 1925},
    {"title": "To Kill a Mockingbird", "author": "Harper Lee", "isbn": "978-0-06-112008-4",
     "category": "Fiction", "total_copies": 4, "available_copies": 2, "published_year": 1960},
    {"title": "1984", "author": "George Orwell", "isbn": "978-0-452-28423-4",
     "category": "Fiction", "total_copies": 6, "available_copies": 4, "published_year": 1949},
    {"title": "Sapiens", "author": "Yuval Noah Harari", "isbn": "978-0-06-231609-7",
     "category": "Non-Fiction", "total_copies": 3, "available_copies": 1, "published_year": 2011},
    {"title": "The Pragmatic Programmer", "author": "Andrew Hunt", "isbn": "978-0-13-595705-9",
     "category": "Technology", "total_copies": 4, "available_copies": 4, "published_year": 1999},
]

def seed_defaults(db: Session) -> dict[str, int]:
    """Insert default plans and books, each only if its table is empty."""
    repo = LibraryRepository(db)
    seeded = {"plans": 0, "books": 0}
    with repo.transaction():
        if repo.count_plans() == 0:
            for data in PLANS:
                repo.create_plan(**data)
            seeded["plans"] = len(PLANS)
        if repo.count_books() == 0:
            for data in BOOKS:
                repo.create_book(**data)
            seeded["books"] = len(BOOKS)
    return seeded

def main():
    setup_logging()
    engine = build_engine(settings.database_url, echo=settings.db_echo)
    init_db(engine)
    db = build_session_factory(engine)()
    try:
        seeded = seed_defaults(db)
        log.info("Seeded %d plans, %d books", seeded["plans"], seeded["books"])
    finally:
        db.close()

if __name__ == "__main__":
    main()
