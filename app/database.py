from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()

# Engine tuning per backend:
#   Postgres (Supabase pooler): TLS required, one pooled connection,
#     pre-ping so a connection dropped by the pooler is replaced.
#   SQLite (local runs, tests): check_same_thread=False so sessions can
#     be used from FastAPI's threadpool.


def _build_engine(url: str):
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    if "sslmode=" not in url:
        url += ("&" if "?" in url else "?") + "sslmode=require"

    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


engine = _build_engine(settings.DATABASE_URL)


def create_db_and_tables() -> None:
    """
    Create missing tables for every imported table model.

    Runs at startup and from seed.py; existing tables are left untouched.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    Request-scoped Session dependency.

    Services decide when to commit; anything left uncommitted when the
    request ends is rolled back as the session closes.
    """
    with Session(engine) as session:
        yield session
