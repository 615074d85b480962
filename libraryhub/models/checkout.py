from datetime import datetime
from sqlalchemy import ForeignKey, Enum, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from libraryhub.db.base import Base, new_id
from libraryhub.utils.dt import utcnow

class Checkout(Base):
    __tablename__ = "checkouts"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    book_id: Mapped[str] = mapped_column(ForeignKey("books.id"), index=True)
    student_id: Mapped[str] = mapped_column(ForeignKey("students.id"), index=True)

    checkout_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Set iff status == "returned"
    return_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    status: Mapped[str] = mapped_column(
        Enum("active", "returned", name="checkout_status"),
        default="active",
        index=True
    )
