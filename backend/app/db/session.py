"""Database engine lifecycle and request-scoped sessions.

The connection settings live in an explicit ``DatabaseConfig`` handed to
``Database`` at startup. Switching databases at runtime goes through
``Database.reconfigure`` and never touches the process environment.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from backend.app.core.errors import ConfigError
from backend.app.core.settings import get_settings

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("sqlite", "postgresql")


@dataclass(frozen=True)
class DatabaseConfig:
    url: str
    echo: bool = False

    @classmethod
    def from_settings(cls, settings) -> "DatabaseConfig":
        return cls(url=settings.database_url)

    @property
    def backend(self) -> str:
        return make_url(self.url).get_backend_name()


@dataclass(frozen=True)
class DatabaseStatus:
    connected: bool
    has_url: bool
    provider: str | None


def _build_engine(config: DatabaseConfig) -> Engine:
    try:
        url = make_url(config.url)
    except ArgumentError as exc:
        raise ConfigError("Invalid connection string format") from exc
    backend = url.get_backend_name()
    if backend not in SUPPORTED_BACKENDS:
        raise ConfigError(f"Unsupported database backend: {backend}")
    connect_args = {"check_same_thread": False} if backend == "sqlite" else {}
    try:
        return create_engine(url, echo=config.echo, pool_pre_ping=True, connect_args=connect_args)
    except (ArgumentError, ImportError) as exc:
        raise ConfigError(f"No driver installed for {backend}") from exc


class Database:
    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.engine = _build_engine(config)
        self._session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def session(self) -> Session:
        return self._session_factory()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except OperationalError:
            logger.warning("Database ping failed for backend %s", self.config.backend)
            return False
        return True

    def status(self) -> DatabaseStatus:
        return DatabaseStatus(connected=self.ping(), has_url=bool(self.config.url), provider=self.config.backend)

    def reconfigure(self, config: DatabaseConfig) -> DatabaseStatus:
        """Connect to a new database; keep the current one if the new one is unreachable."""
        engine = _build_engine(config)
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except OperationalError as exc:
            engine.dispose()
            raise ConfigError("Could not connect to the database") from exc

        previous = self.engine
        self.config = config
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
        previous.dispose()
        logger.info("Database reconfigured to backend %s", config.backend)
        return DatabaseStatus(connected=True, has_url=True, provider=config.backend)


database = Database(DatabaseConfig.from_settings(get_settings()))


def get_db() -> Iterator[Session]:
    db = database.session()
    try:
        yield db
    finally:
        db.close()
