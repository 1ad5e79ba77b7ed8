import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from errors import ConfigError

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Engine and session factory, built once at startup.

    An instance created without a URL stays unconfigured and raises
    ConfigError when a session is requested.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url
        self.engine = None
        self.SessionLocal = None
        if url:
            self._connect(url)

    def _connect(self, url: str):
        # Hosted Postgres hands out postgres:// but SQLAlchemy needs postgresql://
        db_url = url.replace("postgres://", "postgresql://", 1)
        kwargs = {}
        if db_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in db_url or db_url == "sqlite://":
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(db_url, **kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @property
    def configured(self) -> bool:
        return self.SessionLocal is not None

    def create_all(self):
        if not self.configured:
            logger.warning("DATABASE_URL not set - running without database storage")
            return False
        # registers every table on Base.metadata
        import models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database initialized successfully")
        return True

    def session(self) -> Session:
        if not self.configured:
            raise ConfigError("Database not configured")
        return self.SessionLocal()

    def dispose(self):
        if self.engine is not None:
            self.engine.dispose()
