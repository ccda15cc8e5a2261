# supportdesk/core/database.py
import logging

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


class Database:
    """Store handle owned by the application.

    Created once per app, connected on startup and disconnected on
    shutdown. Request handlers get sessions through ``get_db``.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine: Engine | None = None
        self._sessionmaker: sessionmaker | None = None

    def connect(self) -> None:
        if self.engine is not None:
            return
        kwargs = {}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_sqlite(self.url):
                # every session must see the same in-memory database
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(self.url, **kwargs)
        self._sessionmaker = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        # Import models so their tables are registered on Base.metadata
        from supportdesk.ticket import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database connected: %s", self.engine.url.render_as_string(hide_password=True))

    def disconnect(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._sessionmaker = None
        logger.info("Database disconnected")

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not connected")
        return self._sessionmaker()


# Common DB dependency
def get_db(request: Request):
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
