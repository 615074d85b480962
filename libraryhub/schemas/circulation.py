from datetime import datetime
from typing import Literal

from pydantic import BaseModel

class CheckoutIn(BaseModel):
    book_id: str
    student_id: str
    due_date: datetime
    status: Literal["active"] = "active"

class CheckoutOut(BaseModel):
    id: str
    book_id: str
    student_id: str
    checkout_date: datetime
    due_date: datetime
    return_date: datetime | None
    status: str

    class Config:
        from_attributes = True

class CheckoutDetailOut(BaseModel):
    id: str
    book_title: str
    student_name: str
    checkout_date: datetime
    due_date: datetime
    return_date: datetime | None
    status: str
