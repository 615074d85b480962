from decimal import Decimal
from sqlalchemy import String, Integer, Numeric, JSON
from sqlalchemy.orm import Mapped, mapped_column
from libraryhub.db.base import Base, new_id

class SubscriptionPlan(Base):
    __tablename__ = "subscription_plans"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    name: Mapped[str] = mapped_column(String(120))

    # Money (use Numeric for currency)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    # Length of one billing period
    duration_months: Mapped[int] = mapped_column(Integer)

    # Ordered list of feature blurbs shown on the plans page
    features: Mapped[list[str]] = mapped_column(JSON, default=list)

    billing_price_ref: Mapped[str | None] = mapped_column(String(64), nullable=True)
