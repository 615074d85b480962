from fastapi import APIRouter, Depends

from libraryhub.api.deps import get_billing, get_repository
from libraryhub.db.repository import LibraryRepository
from libraryhub.schemas.subscriptions import (
    EnrollIn,
    EnrollOut,
    PlanIn,
    PlanOut,
    SubscriptionDetailOut,
    SubscriptionIn,
    SubscriptionOut,
)
from libraryhub.services.billing import BillingService

router = APIRouter(prefix="/api", tags=["subscriptions"])

# Display available subscription plans
@router.get("/subscription-plans", response_model=list[PlanOut])
def list_plans(repo: LibraryRepository = Depends(get_repository)):
    return repo.list_plans()

@router.post("/subscription-plans", response_model=PlanOut)
def create_plan(payload: PlanIn, repo: LibraryRepository = Depends(get_repository)):
    with repo.transaction():
        plan = repo.create_plan(**payload.model_dump())
    return plan

@router.get("/subscriptions", response_model=list[SubscriptionDetailOut])
def list_subscriptions(repo: LibraryRepository = Depends(get_repository)):
    students = {s.id: s.name for s in repo.list_students()}
    plans = {p.id: p.name for p in repo.list_plans()}

    return [
        SubscriptionDetailOut(
            id=sub.id,
            student_name=students.get(sub.student_id, "Unknown"),
            plan_name=plans.get(sub.plan_id, "Unknown"),
            start_date=sub.start_date,
            end_date=sub.end_date,
            status=sub.status,
            amount=sub.amount,
        )
        for sub in repo.list_subscriptions()
    ]

@router.post("/subscriptions", response_model=SubscriptionOut)
def create_subscription(payload: SubscriptionIn, billing: BillingService = Depends(get_billing)):
    return billing.subscribe(**payload.model_dump())

# Subscribe a student to a plan and record the payment in one go
@router.post("/enroll-student", response_model=EnrollOut)
def enroll_student(payload: EnrollIn, billing: BillingService = Depends(get_billing)):
    sub, payment = billing.enroll(**payload.model_dump())
    return EnrollOut(success=True, subscription=SubscriptionOut.model_validate(sub), payment_id=payment.id)
