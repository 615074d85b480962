from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

class PlanIn(BaseModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    duration_months: int = Field(ge=1)
    features: list[str] = Field(default_factory=list)
    billing_price_ref: str | None = None

class PlanOut(BaseModel):
    id: str
    name: str
    price: Decimal
    duration_months: int
    features: list[str]
    billing_price_ref: str | None

    class Config:
        from_attributes = True

class SubscriptionIn(BaseModel):
    student_id: str
    plan_id: str
    start_date: datetime | None = None
    # Both default from the plan when omitted
    end_date: datetime | None = None
    amount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    status: Literal["active", "expired"] = "active"

class SubscriptionOut(BaseModel):
    id: str
    student_id: str
    plan_id: str
    start_date: datetime
    end_date: datetime
    status: str
    amount: Decimal

    class Config:
        from_attributes = True

class SubscriptionDetailOut(BaseModel):
    id: str
    student_name: str
    plan_name: str
    start_date: datetime
    end_date: datetime
    status: str
    amount: Decimal

class EnrollIn(BaseModel):
    student_id: str
    plan_id: str
    payment_method: str = Field(min_length=1)
    gateway_ref: str | None = None

class EnrollOut(BaseModel):
    success: bool
    subscription: SubscriptionOut
    payment_id: str
