# api/schemas/book.py
from typing import Optional, List
from pydantic import BaseModel, ConfigDict


class ImageLinks(BaseModel):
    smallThumbnail: Optional[str] = None
    thumbnail: Optional[str] = None
    small: Optional[str] = None
    medium: Optional[str] = None
    large: Optional[str] = None
    extraLarge: Optional[str] = None


class BookSchema(BaseModel):
    id: str
    title: str
    authors: List[str] = []
    publisher: Optional[str] = None
    published_date: Optional[str] = None
    description: Optional[str] = None
    isbn13: Optional[str] = None
    page_count: int = 0
    categories: List[str] = []
    language: Optional[str] = None
    images: ImageLinks = ImageLinks()

    model_config = ConfigDict(from_attributes=True)


class BookList(BaseModel):
    books: List[BookSchema]


class BookResponse(BaseModel):
    book: BookSchema
