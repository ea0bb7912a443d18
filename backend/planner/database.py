# backend/planner/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DATABASE_URL


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def make_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    """
    Create an engine for the given URL.
    SQLite needs check_same_thread off (FastAPI runs sync routes in a threadpool)
    and foreign keys switched on per connection, otherwise ON DELETE SET NULL is ignored.
    SQLite's built-in lower() only folds ASCII; it is replaced with Python's so
    case-insensitive search matches str.lower() for every script.
    """
    connect_args = kwargs.pop("connect_args", {})
    if url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
    eng = create_engine(url, connect_args=connect_args, **kwargs)

    if eng.dialect.name == "sqlite":
        @event.listens_for(eng, "connect")
        def _configure_sqlite(dbapi_conn, _record):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()
            dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)

    return eng


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def init_db(bind: Engine = engine) -> None:
    # imported for the side effect of registering tables on Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=bind)
