import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

_NATIONAL_ID = re.compile(r"^\d{12}$")

class StudentIn(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    national_id: str | None = None
    student_code: str = Field(min_length=1)
    seat_number: str | None = None

    @field_validator("national_id")
    @classmethod
    def national_id_has_12_digits(cls, v: str | None) -> str | None:
        if not v:
            return None
        digits = re.sub(r"\s", "", v)
        if not _NATIONAL_ID.match(digits):
            raise ValueError("National id must be 12 digits")
        return digits

class StudentOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    national_id: str | None
    student_code: str
    seat_number: str | None
    enrollment_date: datetime
    billing_customer_ref: str | None
    billing_subscription_ref: str | None

    class Config:
        from_attributes = True

class StudentRefOut(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True

class BillingRefsIn(BaseModel):
    billing_customer_ref: str | None = None
    billing_subscription_ref: str | None = None

class MessageOut(BaseModel):
    message: str
