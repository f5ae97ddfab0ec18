"""
Single entry-point that wires SQLAlchemy into mintpool.
Call once, e.g. in FastAPI startup or a worker's main().
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from .persistence.models import Base
from .persistence.store import PremintStore


def make_engine(database_url: str) -> Engine:
    """Engine for ``database_url``; SQLite connections may cross threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url, pool_pre_ping=True, future=True, connect_args=connect_args
    )


def init_mintpool(engine: Engine) -> PremintStore:
    """
    Create the ``premints`` table if it is absent and return a store on it.
    Safe to call on every start-up.
    """
    Base.metadata.create_all(engine)  # checkfirst: CREATE TABLE only when missing
    return PremintStore(engine)
