from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config import DB_URL


def make_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url)
    opts = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty database
        opts["poolclass"] = StaticPool
    return create_engine(url, **opts)


engine       = make_engine(DB_URL)
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
Base         = declarative_base()


def init_db(bind: Engine = engine) -> None:
    import models  # noqa: F401  registers the tables on Base

    Base.metadata.create_all(bind=bind)
