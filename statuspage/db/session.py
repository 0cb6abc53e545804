"""Engine and session factory construction.

The engine is built once by the application factory and kept on
``app.state``; nothing in this module holds a process-wide connection.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from statuspage.core.config import Settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings, **kwargs) -> Engine:
    """Create the SQLAlchemy engine for DATABASE_URL."""
    connect_args = kwargs.pop("connect_args", {})
    url = make_url(settings.DATABASE_URL)
    backend = url.get_backend_name()
    if backend.startswith("postgresql"):
        connect_args.setdefault("options", "-c timezone=utc")
    elif backend == "sqlite":
        connect_args.setdefault("check_same_thread", False)
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise each checkout sees an empty database
            kwargs.setdefault("poolclass", StaticPool)

    engine = create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        connect_args=connect_args,
        **kwargs,
    )
    if backend == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless asked per connection
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the engine."""
    return sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )
