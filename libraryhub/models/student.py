from datetime import datetime
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from libraryhub.db.base import Base, new_id
from libraryhub.utils.dt import utcnow

class Student(Base):
    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(32))

    # 12-digit national id (Aadhaar), optional
    national_id: Mapped[str | None] = mapped_column(String(12), nullable=True)

    # The code printed on the library card, distinct from our primary key
    student_code: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    seat_number: Mapped[str | None] = mapped_column(String(32), nullable=True)

    enrollment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # External billing references (nullable because not all students use the gateway)
    billing_customer_ref: Mapped[str | None] = mapped_column(String(64), nullable=True)
    billing_subscription_ref: Mapped[str | None] = mapped_column(String(64), nullable=True)
