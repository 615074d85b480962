from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field


class FeeIn(BaseModel):
    student_id: str
    amount: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    type: str = Field(min_length=1)
    description: str = ""
    status: Literal["pending", "overdue"] = "pending"
    due_date: datetime

class FeeOut(BaseModel):
    id: str
    student_id: str
    amount: Decimal
    type: str
    description: str
    status: str
    due_date: datetime
    paid_date: datetime | None

    class Config:
        from_attributes = True

class FeeDetailOut(FeeOut):
    student_name: str

class PaymentIn(BaseModel):
    student_id: str
    fee_id: str | None = None
    amount: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    payment_method: str = Field(min_length=1)
    gateway_ref: str | None = None
    status: str = "completed"

class PaymentOut(BaseModel):
    id: str
    student_id: str
    fee_id: str | None
    amount: Decimal
    payment_date: datetime
    payment_method: str
    gateway_ref: str | None
    status: str

    class Config:
        from_attributes = True

class PaymentDetailOut(BaseModel):
    id: str
    student_name: str
    amount: Decimal
    payment_date: datetime
    payment_method: str
    status: str
