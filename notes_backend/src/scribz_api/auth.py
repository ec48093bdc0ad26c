import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from scribz_api.config import get_settings
from scribz_api.database import get_db
from scribz_api.errors import (
    DuplicateAccount,
    InvalidCredentials,
    InvalidToken,
    MissingToken,
    UnknownUser,
)
from scribz_api.models import User

logger = logging.getLogger(__name__)

settings = get_settings()

# Setup password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

# Bearer scheme; missing header is reported by us, not by FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a plaintext password."""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token."""
    to_encode = data.copy()
    now = datetime.now(tz=timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"iat": now, "exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    Verify signature and expiry of a token and return its subject.

    Raises:
        InvalidToken if the token is malformed, signed with another key,
        expired, or carries no subject.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise InvalidToken() from exc
    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        raise InvalidToken()
    return subject


def _issue_token(user: User) -> str:
    return create_access_token({"sub": user.id})


# PUBLIC_INTERFACE
def register_user(db: Session, email: str, password: str) -> Tuple[str, User]:
    """
    Create an account and return a fresh session token for it.

    Raises:
        DuplicateAccount if the email is already registered.
    """
    if db.query(User).filter(User.email == email).first():
        logger.info("Signup rejected, email already registered")
        raise DuplicateAccount()
    user = User(email=email, password_hash=get_password_hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race against a concurrent signup for the same email
        db.rollback()
        raise DuplicateAccount() from exc
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return _issue_token(user), user


# PUBLIC_INTERFACE
def authenticate_user(db: Session, email: str, password: str) -> Tuple[str, User]:
    """
    Check an email/password pair and return a session token.

    Raises:
        InvalidCredentials for an unknown email or a wrong password alike.
    """
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise InvalidCredentials()
    return _issue_token(user), user


# PUBLIC_INTERFACE
def resolve_token(db: Session, token: Optional[str]) -> User:
    """
    Resolve a bearer token to the user it was issued for.

    Raises:
        MissingToken if no token was presented.
        InvalidToken if it fails verification.
        UnknownUser if the encoded user no longer exists.
    """
    if not token:
        raise MissingToken()
    user_id = decode_access_token(token)
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.warning("Token subject %s does not resolve to a user", user_id)
        raise UnknownUser()
    return user


# PUBLIC_INTERFACE
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency that returns the currently authenticated user based on the
    `Authorization: Bearer <token>` header.
    """
    token = credentials.credentials if credentials else None
    return resolve_token(db, token)
