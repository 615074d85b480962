from datetime import datetime
from decimal import Decimal
from sqlalchemy import ForeignKey, Enum, DateTime, String, Numeric, Index
from sqlalchemy.orm import Mapped, mapped_column
from libraryhub.db.base import Base, new_id
from libraryhub.utils.dt import utcnow

class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    student_id: Mapped[str] = mapped_column(ForeignKey("students.id"), index=True)
    plan_id: Mapped[str] = mapped_column(ForeignKey("subscription_plans.id"), index=True)

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    status: Mapped[str] = mapped_column(
        Enum("active", "expired", name="subscription_status"),
        default="active",
        index=True
    )

    # Snapshot of the plan price when the subscription was taken out
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    __table_args__ = (
        Index("ix_subscriptions_student_status", "student_id", "status"),
    )
