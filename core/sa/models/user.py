# core/sa/models/user.py
from datetime import datetime
from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, SafeDateTime


class User(Base, TimestampMixin):
    __tablename__ = 'users'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    nickname: Mapped[str] = mapped_column(String(50), nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default='')
    profile_picture: Mapped[str | None] = mapped_column(String(255), nullable=True)
    login_attempt: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_login_attempt: Mapped[datetime | None] = mapped_column(SafeDateTime, nullable=True)

    # Relationships
    library_entries = relationship('LibraryEntry', back_populates='user', cascade='all, delete-orphan')
    books = relationship('Book', secondary='users_books', viewonly=True)
