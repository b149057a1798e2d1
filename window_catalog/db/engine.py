import logging
from typing import Iterator, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from window_catalog.core.config import settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES ... ON DELETE CASCADE unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for ``url``, wiring SQLite connections for FK enforcement."""
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory databases only live as long as their single connection
            engine = create_engine(url, echo=echo, connect_args=connect_args, poolclass=StaticPool)
        else:
            engine = create_engine(url, echo=echo, connect_args=connect_args)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(url, echo=echo, pool_pre_ping=True)


class Store:
    """Owns the database engine for the lifetime of the application.

    Opened once at startup and closed at shutdown. Request handlers never
    touch the engine directly; they receive a ``Session`` from :meth:`session`.
    """

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or settings.database_url
        self.echo = settings.DATABASE_ECHO if echo is None else echo
        self._engine: Optional[Engine] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Store is not open")
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> "Store":
        if self._engine is None:
            if self.url == f"sqlite:///{settings.database_path}":
                settings.ensure_dirs()
            self._engine = build_engine(self.url, echo=self.echo)
            logger.info("Opened catalog store", extra={"url": self._engine.url.render_as_string(hide_password=True)})
        return self

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Closed catalog store")

    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session
