from datetime import datetime
from decimal import Decimal
from sqlalchemy import ForeignKey, Enum, DateTime, String, Numeric, Index
from sqlalchemy.orm import Mapped, mapped_column
from libraryhub.db.base import Base, new_id

class Fee(Base):
    __tablename__ = "fees"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    student_id: Mapped[str] = mapped_column(ForeignKey("students.id"), index=True)

    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    # Free-form: "late-fee", "membership", ...
    type: Mapped[str] = mapped_column(String(64))
    description: Mapped[str] = mapped_column(String(255))

    status: Mapped[str] = mapped_column(
        Enum("pending", "overdue", "paid", name="fee_status"),
        default="pending",
        index=True
    )

    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Set iff status == "paid"
    paid_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_fees_status_due", "status", "due_date"),
    )
