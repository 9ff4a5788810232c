# core/sa/models/base.py
from datetime import datetime, UTC
from sqlalchemy.orm import DeclarativeBase, mapped_column, Mapped
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator


class SafeDateTime(TypeDecorator):
    """DateTime that treats empty strings as None and always reads back UTC-aware values"""
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value == '':
            return None
        return value

    def process_result_value(self, value, dialect):
        if value == '' or value is None:
            return None
        # SQLite drops tzinfo on the way in
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class Base(DeclarativeBase):
    """Base class for all models"""
    pass


class TimestampMixin:
    """Mixin to add created_at and updated_at columns"""
    created_at: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False, default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))


class LastSyncedMixin:
    """Mixin to track when a row was last refreshed from an external source"""
    last_synced_at: Mapped[datetime | None] = mapped_column(SafeDateTime, nullable=True)
