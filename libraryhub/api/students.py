from fastapi import APIRouter, HTTPException, Depends

from libraryhub.api.deps import get_repository
from libraryhub.core.logging import get_logger
from libraryhub.db.repository import LibraryRepository
from libraryhub.schemas.students import BillingRefsIn, MessageOut, StudentIn, StudentOut, StudentRefOut

router = APIRouter(prefix="/api", tags=["students"])

log = get_logger("api.students")

@router.get("/students", response_model=list[StudentOut])
def list_students(repo: LibraryRepository = Depends(get_repository)):
    return repo.list_students()

# Lightweight list for pickers
@router.get("/students/list", response_model=list[StudentRefOut])
def list_student_refs(repo: LibraryRepository = Depends(get_repository)):
    return repo.list_students()

@router.post("/students", response_model=StudentOut)
def create_student(payload: StudentIn, repo: LibraryRepository = Depends(get_repository)):
    if repo.get_student_by_email(payload.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    if repo.get_student_by_code(payload.student_code):
        raise HTTPException(status_code=400, detail="Student code already in use")

    with repo.transaction():
        student = repo.create_student(**payload.model_dump())
    return student

@router.patch("/students/{student_id}/billing", response_model=StudentOut)
def update_billing_refs(
    student_id: str,
    payload: BillingRefsIn,
    repo: LibraryRepository = Depends(get_repository),
):
    with repo.transaction():
        student = repo.update_billing_refs(
            student_id, payload.billing_customer_ref, payload.billing_subscription_ref
        )
    return student

@router.delete("/students/{student_id}", response_model=MessageOut)
def delete_student(student_id: str, repo: LibraryRepository = Depends(get_repository)):
    if not repo.get_student(student_id):
        raise HTTPException(status_code=404, detail="Student not found")

    # fees, payments, checkouts and subscriptions go with the student, all or nothing
    with repo.transaction():
        repo.delete_student(student_id)

    log.info("deleted student %s and dependent records", student_id)
    return MessageOut(message="Student deleted successfully")
