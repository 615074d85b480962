from fastapi import APIRouter, HTTPException, Depends

from libraryhub.api.deps import get_repository
from libraryhub.db.repository import LibraryRepository
from libraryhub.schemas.books import BookAvailabilityOut, BookIn, BookOut

router = APIRouter(prefix="/api", tags=["books"])

@router.get("/books", response_model=list[BookOut])
def list_books(repo: LibraryRepository = Depends(get_repository)):
    return repo.list_books()

@router.get("/books/available", response_model=list[BookAvailabilityOut])
def list_book_availability(repo: LibraryRepository = Depends(get_repository)):
    return repo.list_books()

@router.post("/books", response_model=BookOut)
def create_book(payload: BookIn, repo: LibraryRepository = Depends(get_repository)):
    if repo.get_book_by_isbn(payload.isbn):
        raise HTTPException(status_code=400, detail="ISBN already registered")

    with repo.transaction():
        book = repo.create_book(**payload.model_dump())
    return book
