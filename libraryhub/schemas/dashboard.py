from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

class DashboardStatsOut(BaseModel):
    total_students: int
    active_subscriptions: int
    total_revenue: Decimal
    total_books: int
    active_checkouts: int
    overdue_checkouts: int
    pending_fees: Decimal

class PaymentStatsOut(BaseModel):
    total_students: int
    pending_payments: Decimal
    paid_payments: Decimal
    total_received: Decimal

class UpcomingFeeOut(BaseModel):
    id: str
    student_name: str
    amount: Decimal
    due_date: datetime
    type: str

class StudentFeeRowOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    plan_name: str
    amount: Decimal
    payment_status: str
    payment_date: datetime | None
    enrollment_date: datetime

class RenewalReminderOut(BaseModel):
    id: str
    student_name: str
    email: str
    plan_name: str
    amount: Decimal
    renewal_date: datetime
    days_until_renewal: int
