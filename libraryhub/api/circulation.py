from fastapi import APIRouter, Depends

from libraryhub.api.deps import get_circulation, get_repository
from libraryhub.db.repository import LibraryRepository
from libraryhub.schemas.circulation import CheckoutDetailOut, CheckoutIn, CheckoutOut
from libraryhub.services.circulation import CirculationService

router = APIRouter(prefix="/api", tags=["circulation"])

@router.get("/checkouts", response_model=list[CheckoutDetailOut])
def list_checkouts(repo: LibraryRepository = Depends(get_repository)):
    books = {b.id: b.title for b in repo.list_books()}
    students = {s.id: s.name for s in repo.list_students()}

    return [
        CheckoutDetailOut(
            id=c.id,
            book_title=books.get(c.book_id, "Unknown"),
            student_name=students.get(c.student_id, "Unknown"),
            checkout_date=c.checkout_date,
            due_date=c.due_date,
            return_date=c.return_date,
            status=c.status,
        )
        for c in repo.list_checkouts()
    ]

@router.post("/checkouts", response_model=CheckoutOut)
def create_checkout(payload: CheckoutIn, circulation: CirculationService = Depends(get_circulation)):
    return circulation.checkout(payload.book_id, payload.student_id, payload.due_date)

@router.patch("/checkouts/{checkout_id}/return", response_model=CheckoutOut)
def return_checkout(checkout_id: str, circulation: CirculationService = Depends(get_circulation)):
    return circulation.return_checkout(checkout_id)
