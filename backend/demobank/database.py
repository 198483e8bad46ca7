import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from demobank.config import Settings, settings as default_settings
from demobank.models import Base
from demobank.utils import utcnow

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or url.startswith("sqlite:///:memory:?")


class Store:
    """Users, tokens, accounts, transactions and transfers behind one engine.

    Build one per process (or per test) and hand it to whatever needs it.
    The default URL is an in-memory SQLite database, so state vanishes with
    the process; any SQLAlchemy URL works for a persistent backing store.
    """

    def __init__(self, url: str = "sqlite://", clock: Callable[[], datetime] = utcnow):
        self.url = url
        if url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}
            # One shared connection, otherwise every checkout gets an empty database
            poolclass = StaticPool if _is_memory_sqlite(url) else None
        else:
            connect_args = {}
            poolclass = None
        engine_kwargs = {"connect_args": connect_args, "echo": False}
        if poolclass is not None:
            engine_kwargs["poolclass"] = poolclass
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        # Single writer for ledger mutation
        self.lock = threading.RLock()
        self.clock = clock
        Base.metadata.create_all(self.engine)

    def now(self) -> datetime:
        return self.clock()

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def create_store(settings: Optional[Settings] = None, seed: Optional[bool] = None) -> Store:
    settings = settings or default_settings
    store = Store(settings.database_url)
    should_seed = settings.seed_demo_data if seed is None else seed
    if should_seed:
        from demobank.seed import seed_database
        with store.session() as db:
            seed_database(db, now=store.now())
    logger.info(f"Store ready on {store.engine.url.render_as_string(hide_password=True)} (seeded: {should_seed})")
    return store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# Database dependency
async def get_db(request: Request):
    store: Store = request.app.state.store
    with store.session() as db:
        yield db
