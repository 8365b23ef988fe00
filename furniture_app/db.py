from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .config import settings
from .models.base import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # sqlite ignores FOREIGN KEY constraints unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **kwargs) -> Engine:
    if url.startswith("sqlite"):
        # check_same_thread=False: the same connection is shared by request threads
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(url, pool_pre_ping=True, **kwargs)


# ---------- Engine / Session ----------
DATABASE_URL = settings.DATABASE_URL

engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


def init_db(bind: Engine | None = None) -> None:
    # register every table before create_all
    from .models import ad, attachment, static_data, user  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


# ---------- Dependency ----------
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
