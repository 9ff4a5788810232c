# api/schemas/library.py
from typing import Optional, List
from pydantic import BaseModel

from .book import BookSchema


class LibraryBook(BookSchema):
    status: str
    current_page: int


class LibraryList(BaseModel):
    books: List[LibraryBook]


class LibraryAddRequest(BaseModel):
    status: Optional[str] = None
    current_page: Optional[int] = None


class LibraryUpdateRequest(BaseModel):
    status: Optional[str] = None
    current_page: Optional[int] = None


class LibraryEntryResponse(BaseModel):
    message: str
    bookId: str
    status: str
    current_page: int


class LibraryRemoveResponse(BaseModel):
    message: str
    bookId: str
