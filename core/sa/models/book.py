# core/sa/models/book.py
from typing import Any, Dict
from sqlalchemy import String, Integer, Text, JSON, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, LastSyncedMixin

IMAGE_VARIANTS = ('smallThumbnail', 'thumbnail', 'small', 'medium', 'large', 'extraLarge')

# Columns overwritten on every refresh from the catalog
BOOK_FIELDS = (
    'title', 'authors', 'publisher', 'published_date', 'description',
    'isbn13', 'page_count', 'categories', 'language', 'images',
)


class Book(Base, TimestampMixin, LastSyncedMixin):
    __tablename__ = 'books'

    # Catalog volume id, never generated locally
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    authors: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    published_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    isbn13: Mapped[str | None] = mapped_column(String(32), nullable=True)
    page_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    categories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    language: Mapped[str | None] = mapped_column(String(16), nullable=True)
    images: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    # Relationships
    library_entries = relationship('LibraryEntry', back_populates='book')

    __table_args__ = (
        Index('idx_books_title', 'title'),
    )

    def to_dict(self) -> Dict[str, Any]:
        data = {'id': self.id}
        for name in BOOK_FIELDS:
            data[name] = getattr(self, name)
        return data
