from datetime import datetime
from decimal import Decimal
from sqlalchemy import ForeignKey, DateTime, String, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from libraryhub.db.base import Base, new_id
from libraryhub.utils.dt import utcnow

class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    student_id: Mapped[str] = mapped_column(ForeignKey("students.id"), index=True)

    # Not every payment settles a tracked fee
    fee_id: Mapped[str | None] = mapped_column(ForeignKey("fees.id"), nullable=True, index=True)

    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    payment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # cash / upi / card
    payment_method: Mapped[str] = mapped_column(String(32))

    # Gateway payment reference, when paid online
    gateway_ref: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # "completed" is the only status that counts as received
    status: Mapped[str] = mapped_column(String(32), default="completed", index=True)
