# core/sa/models/library.py
from enum import Enum
from sqlalchemy import Integer, String, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin


class LibraryStatus(str, Enum):
    WISHLIST = "WISHLIST"
    POSSESSION = "POSSESSION"


class LibraryEntry(Base, TimestampMixin):
    """Reading state of one book for one user"""
    __tablename__ = 'users_books'

    # Composite primary key doubles as the (user, book) uniqueness constraint
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id'), primary_key=True)
    book_id: Mapped[str] = mapped_column(String(64), ForeignKey('books.id'), primary_key=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    current_page: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    user = relationship('User', back_populates='library_entries')
    book = relationship('Book', back_populates='library_entries')

    __table_args__ = (
        Index('idx_users_books_user_id', 'user_id'),
    )
