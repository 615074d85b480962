from pydantic import BaseModel, Field, model_validator

class BookIn(BaseModel):
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    isbn: str = Field(min_length=1)
    category: str = Field(min_length=1)
    total_copies: int = Field(ge=0)
    available_copies: int | None = Field(default=None, ge=0)
    published_year: int | None = None

    @model_validator(mode="after")
    def copies_in_range(self):
        # A new book starts fully on the shelf unless told otherwise
        if self.available_copies is None:
            self.available_copies = self.total_copies
        if self.available_copies > self.total_copies:
            raise ValueError("available_copies cannot exceed total_copies")
        return self

class BookOut(BaseModel):
    id: str
    title: str
    author: str
    isbn: str
    category: str
    total_copies: int
    available_copies: int
    published_year: int | None

    class Config:
        from_attributes = True

class BookAvailabilityOut(BaseModel):
    id: str
    title: str
    available_copies: int

    class Config:
        from_attributes = True
