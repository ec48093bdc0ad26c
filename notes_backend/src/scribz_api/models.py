import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, String, Text, ForeignKey, DateTime, Index
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.types import TypeDecorator

Base = declarative_base()

DEFAULT_NOTE_TITLE = "Untitled"
DEFAULT_NOTE_COLOR = "#ffffff"


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timestamp stored as UTC and always returned timezone-aware, including on
    backends such as SQLite that drop the offset.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class User(Base):
    """
    User entity with unique email and hashed password.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(UTCDateTime(), default=_utcnow, nullable=False)

    notes = relationship("Note", back_populates="owner", cascade="all, delete-orphan")


class Note(Base):
    """
    Note owned by a user. ``is_trashed`` is the soft-delete flag: a trashed note
    still exists and is still owned, it is only hidden from the default view.
    """
    __tablename__ = "notes"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False, default=DEFAULT_NOTE_TITLE)
    content = Column(Text, default="", nullable=False)
    color = Column(String(32), default=DEFAULT_NOTE_COLOR, nullable=False)
    is_favorite = Column(Boolean, default=False, nullable=False)
    is_trashed = Column(Boolean, default=False, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(UTCDateTime(), default=_utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=_utcnow, onupdate=_utcnow, nullable=False)

    owner = relationship("User", back_populates="notes")

    __table_args__ = (
        Index("ix_notes_user_title", "user_id", "title"),
        Index("ix_notes_user_trashed", "user_id", "is_trashed"),
        Index("ix_notes_user_favorite", "user_id", "is_favorite"),
    )
