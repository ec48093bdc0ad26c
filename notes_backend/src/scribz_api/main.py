import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Depends, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from scribz_api import notes as store
from scribz_api.auth import (
    authenticate_user,
    get_current_user,
    get_password_hash,
    register_user,
)
from scribz_api.config import get_settings
from scribz_api.database import SessionLocal, engine, get_db
from scribz_api.errors import (
    AuthenticationError,
    DomainError,
    NoteNotFound,
)
from scribz_api.models import Base, User
from scribz_api.schemas import (
    AuthResponse,
    MessageResponse,
    NoteCreateRequest,
    NoteFilter,
    NoteResponse,
    NoteUpdateRequest,
    UserCredentialsRequest,
    UserResponse,
    UserSummary,
)

logger = logging.getLogger(__name__)

settings = get_settings()

DEMO_EMAIL = "demo@scribz.app"
DEMO_PASSWORD = "password123"


def configure_logging() -> None:
    """Apply LOG_LEVEL to the root logger once per process."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Seed logic for dev convenience
def seed_demo_user(db: Session):
    """Create a demo user if none exist (dev only)."""
    if settings.ENV == "dev" and settings.SEED_DEMO_USER:
        has_user = db.query(User).first()
        if not has_user:
            user = User(email=DEMO_EMAIL, password_hash=get_password_hash(DEMO_PASSWORD))
            db.add(user)
            db.commit()
            logger.info("Seeded demo user: %s", DEMO_EMAIL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Initialize database tables
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed_demo_user(db)
    yield


app = FastAPI(
    title="Scribz Notes API",
    description="Personal notes backend with JWT auth, favorites, trash and search.",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Health", "description": "Service health and status."},
        {"name": "Auth", "description": "User registration and authentication."},
        {"name": "Notes", "description": "Note lifecycle: CRUD, favorites, trash."},
    ],
)

# CORS setup - allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------- Error mapping --------

@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    if isinstance(exc, AuthenticationError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": exc.detail},
            headers={"WWW-Authenticate": "Bearer"},
        )
    # Ownership mismatches surface as 404 too, never 403
    code = status.HTTP_404_NOT_FOUND if isinstance(exc, NoteNotFound) else status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# PUBLIC_INTERFACE
@app.get("/", tags=["Health"], summary="Health Check")
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON object indicating service status.
    """
    return {"message": "Healthy"}


# -------- Auth Routes --------

def _auth_response(token: str, user: User) -> AuthResponse:
    return AuthResponse(token=token, user=UserSummary(id=user.id, email=user.email))


# PUBLIC_INTERFACE
@app.post(
    "/auth/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Auth"],
    summary="Register a new user",
)
def signup(payload: UserCredentialsRequest, db: Session = Depends(get_db)):
    """
    Register a new user and log them in.

    Body:
        email: valid email address
        password: plaintext password

    Returns:
        AuthResponse with a bearer token and the user summary.

    Raises:
        400 if email already in use.
    """
    token, user = register_user(db, payload.email, payload.password)
    return _auth_response(token, user)


# PUBLIC_INTERFACE
@app.post(
    "/auth/login",
    response_model=AuthResponse,
    tags=["Auth"],
    summary="Login and obtain JWT access token",
)
def login(payload: UserCredentialsRequest, db: Session = Depends(get_db)):
    """
    Exchange email and password for a bearer token.

    Raises:
        401 on invalid credentials, whether the email or the password is wrong.
    """
    token, user = authenticate_user(db, payload.email, payload.password)
    return _auth_response(token, user)


# PUBLIC_INTERFACE
@app.get("/auth/me", response_model=UserResponse, tags=["Auth"], summary="Current user")
def me(current_user: User = Depends(get_current_user)):
    """Return the user the presented token belongs to."""
    return current_user


# -------- Notes Routes --------

# PUBLIC_INTERFACE
@app.get(
    "/notes",
    response_model=List[NoteResponse],
    tags=["Notes"],
    summary="List notes with filter and search",
)
def list_notes(
    filter: NoteFilter = Query(NoteFilter.all, description="all, favorites or trash"),
    search: Optional[str] = Query(None, description="Case-insensitive title search"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List notes belonging to the current user, most recently updated first.

    Query params:
        filter: visibility class, defaults to all (non-trashed) notes
        search: optional text to match in the title
    """
    return store.list_notes(db, current_user.id, filter, search)


# PUBLIC_INTERFACE
@app.post(
    "/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Notes"],
    summary="Create a new note",
)
def create_note(
    payload: NoteCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a new note for the authenticated user.

    Body:
        title: note title, "Untitled" when empty
        content: rich-text markup
        color: display color tag
    """
    return store.create_note(
        db, current_user.id, title=payload.title, content=payload.content, color=payload.color
    )


# PUBLIC_INTERFACE
@app.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    tags=["Notes"],
    summary="Get a note by ID",
)
def get_note(
    note_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Retrieve a single note by ID. Only the owner can access it.
    """
    return store.get_note(db, current_user.id, note_id)


# PUBLIC_INTERFACE
@app.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    tags=["Notes"],
    summary="Update a note by ID",
)
def update_note(
    note_id: str,
    payload: NoteUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update a note. Only the owner can modify it.
    """
    return store.update_note(db, current_user.id, note_id, payload.model_dump(exclude_unset=True))


# PUBLIC_INTERFACE
@app.patch(
    "/notes/{note_id}/favorite",
    response_model=NoteResponse,
    tags=["Notes"],
    summary="Toggle favorite",
)
def toggle_favorite(
    note_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Flip the favorite flag of a note."""
    return store.toggle_favorite(db, current_user.id, note_id)


# PUBLIC_INTERFACE
@app.patch(
    "/notes/{note_id}/trash",
    response_model=NoteResponse,
    tags=["Notes"],
    summary="Move to trash or restore",
)
def toggle_trash(
    note_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Flip the trashed flag: trashes an active note, restores a trashed one."""
    return store.toggle_trash(db, current_user.id, note_id)


# PUBLIC_INTERFACE
@app.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    tags=["Notes"],
    summary="Delete a note permanently",
)
def delete_note(
    note_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Permanently delete a note. Only the owner can delete it.
    """
    store.delete_note(db, current_user.id, note_id)
    return MessageResponse(message="Note deleted")
