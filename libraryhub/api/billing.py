from fastapi import APIRouter, Depends

from libraryhub.api.deps import get_billing, get_repository
from libraryhub.db.repository import LibraryRepository
from libraryhub.schemas.billing import FeeDetailOut, FeeIn, FeeOut, PaymentDetailOut, PaymentIn, PaymentOut
from libraryhub.services.billing import BillingService

router = APIRouter(prefix="/api", tags=["billing"])

@router.get("/fees", response_model=list[FeeDetailOut])
def list_fees(repo: LibraryRepository = Depends(get_repository)):
    names = {s.id: s.name for s in repo.list_students()}

    return [
        FeeDetailOut(
            id=fee.id,
            student_id=fee.student_id,
            student_name=names.get(fee.student_id, "Unknown"),
            amount=fee.amount,
            type=fee.type,
            description=fee.description,
            status=fee.status,
            due_date=fee.due_date,
            paid_date=fee.paid_date,
        )
        for fee in repo.list_fees()
    ]

@router.post("/fees", response_model=FeeOut)
def create_fee(payload: FeeIn, billing: BillingService = Depends(get_billing)):
    return billing.create_fee(**payload.model_dump())

@router.get("/payments", response_model=list[PaymentDetailOut])
def list_payments(repo: LibraryRepository = Depends(get_repository)):
    names = {s.id: s.name for s in repo.list_students()}

    return [
        PaymentDetailOut(
            id=p.id,
            student_name=names.get(p.student_id, "Unknown"),
            amount=p.amount,
            payment_date=p.payment_date,
            payment_method=p.payment_method,
            status=p.status,
        )
        for p in repo.list_payments()
    ]

# A payment that names a fee settles it
@router.post("/payments", response_model=PaymentOut)
def create_payment(payload: PaymentIn, billing: BillingService = Depends(get_billing)):
    return billing.record_payment(**payload.model_dump())

@router.patch("/payments/{payment_id}/mark-pending", response_model=PaymentOut)
def mark_payment_pending(payment_id: str, billing: BillingService = Depends(get_billing)):
    return billing.mark_payment_pending(payment_id)
