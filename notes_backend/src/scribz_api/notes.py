"""Owner-scoped note storage and the favorite/trash lifecycle.

Every lookup filters on ``(id, user_id)`` together, so a note owned by someone
else is indistinguishable from one that does not exist.
"""
import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy.orm import Session

from scribz_api.errors import NoteNotFound, ValidationFailure
from scribz_api.models import Note, DEFAULT_NOTE_COLOR, DEFAULT_NOTE_TITLE
from scribz_api.schemas import NoteFilter

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "content", "color", "is_favorite")


def _normalize_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    return title or DEFAULT_NOTE_TITLE


def _owned(db: Session, owner_id: str, note_id: str) -> Note:
    note = db.query(Note).filter(Note.id == note_id, Note.user_id == owner_id).first()
    if note is None:
        raise NoteNotFound()
    return note


def _save(db: Session, note: Note) -> Note:
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


# PUBLIC_INTERFACE
def list_notes(
    db: Session,
    owner_id: str,
    filter: NoteFilter = NoteFilter.all,
    search: Optional[str] = None,
) -> List[Note]:
    """
    Return the owner's notes in one visibility class, most recently updated first.

    all: not trashed. favorites: favorite and not trashed. trash: trashed.
    A non-blank search restricts to titles containing it verbatim, ignoring case.
    """
    try:
        filter = NoteFilter(filter)
    except ValueError as exc:
        raise ValidationFailure(f"Unknown note filter: {filter!r}") from exc

    query = db.query(Note).filter(Note.user_id == owner_id)
    if filter is NoteFilter.favorites:
        query = query.filter(Note.is_favorite.is_(True), Note.is_trashed.is_(False))
    elif filter is NoteFilter.trash:
        query = query.filter(Note.is_trashed.is_(True))
    else:
        query = query.filter(Note.is_trashed.is_(False))

    # Blankness is judged on the trimmed text, matching uses it as given
    if search and search.strip():
        query = query.filter(Note.title.icontains(search, autoescape=True))

    return query.order_by(Note.updated_at.desc(), Note.created_at.desc()).all()


# PUBLIC_INTERFACE
def create_note(
    db: Session,
    owner_id: str,
    title: Optional[str] = None,
    content: Optional[str] = None,
    color: Optional[str] = None,
) -> Note:
    """Create an active, non-favorite note, defaulting any missing field."""
    note = Note(
        title=_normalize_title(title),
        content=content or "",
        color=color or DEFAULT_NOTE_COLOR,
        is_favorite=False,
        is_trashed=False,
        user_id=owner_id,
    )
    note = _save(db, note)
    logger.info("Created note %s for user %s", note.id, owner_id)
    return note


# PUBLIC_INTERFACE
def get_note(db: Session, owner_id: str, note_id: str) -> Note:
    """Fetch one note; raises NoteNotFound when missing or not owned."""
    return _owned(db, owner_id, note_id)


# PUBLIC_INTERFACE
def update_note(db: Session, owner_id: str, note_id: str, changes: Mapping[str, Any]) -> Note:
    """
    Apply a partial update. Only title, content, color and is_favorite are
    accepted; None values and any other key are ignored.
    """
    note = _owned(db, owner_id, note_id)
    for field in UPDATABLE_FIELDS:
        value = changes.get(field)
        if value is None:
            continue
        if field == "title":
            value = _normalize_title(value)
        setattr(note, field, value)
    note = _save(db, note)
    logger.debug("Updated note %s", note.id)
    return note


# PUBLIC_INTERFACE
def toggle_favorite(db: Session, owner_id: str, note_id: str) -> Note:
    """Flip the favorite flag. The trashed flag is untouched."""
    note = _owned(db, owner_id, note_id)
    note.is_favorite = not note.is_favorite
    return _save(db, note)


# PUBLIC_INTERFACE
def toggle_trash(db: Session, owner_id: str, note_id: str) -> Note:
    """Move an active note to the trash, or restore a trashed one."""
    note = _owned(db, owner_id, note_id)
    note.is_trashed = not note.is_trashed
    note = _save(db, note)
    logger.info("Note %s %s", note.id, "trashed" if note.is_trashed else "restored")
    return note


# PUBLIC_INTERFACE
def delete_note(db: Session, owner_id: str, note_id: str) -> None:
    """Permanently remove a note, whether or not it is in the trash."""
    note = _owned(db, owner_id, note_id)
    db.delete(note)
    db.commit()
    logger.info("Permanently deleted note %s", note_id)
