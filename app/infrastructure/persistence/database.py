"""SQLAlchemy engine and session management."""

from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from infrastructure.logging import get_module_logger
from infrastructure.persistence.models import Base

logger = get_module_logger()


class Database:
    """Owns the engine and session factory for one database URL.

    Every unit of work runs inside ``session_scope()``: the session commits when
    the block exits normally and rolls back when it raises.

    Example:
        db = Database("sqlite+pysqlite:///./ekklesia.db")
        db.create_all()

        with db.session_scope() as session:
            session.add(Organization(name="Grace Church"))
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any):
        if url.startswith("sqlite"):
            # Sessions are opened from FastAPI's worker threads.
            connect_args = engine_kwargs.setdefault("connect_args", {})
            connect_args.setdefault("check_same_thread", False)
        else:
            engine_kwargs.setdefault("pool_pre_ping", True)

        self.engine = create_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            class_=Session,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session; commit on success, rollback on error."""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("database_tables_ensured", tables=len(Base.metadata.tables))

    def ping(self) -> bool:
        """True when a trivial query round-trips."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("database_ping_failed", error=str(e))
            return False
        return True

    def dispose(self) -> None:
        self.engine.dispose()
