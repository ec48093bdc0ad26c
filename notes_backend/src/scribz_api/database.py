from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from scribz_api.config import get_settings

# Use SQLite file by default; can be overridden by DATABASE_URL env
DATABASE_URL = get_settings().DATABASE_URL

engine_kwargs = {"future": True}
if DATABASE_URL.startswith("sqlite"):
    # SQLite needs check_same_thread=False for multithreading in FastAPI
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every thread sees its own empty database
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(DATABASE_URL, **engine_kwargs)

if DATABASE_URL.startswith("sqlite"):
    @event.listens_for(engine, "connect")
    def _register_unicode_lower(dbapi_conn, connection_record):
        # SQLite's built-in lower() only folds ASCII; case-insensitive title search relies on it
        dbapi_conn.create_function("lower", 1, lambda s: s.lower() if s is not None else None)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency that provides a database session and ensures proper cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
