"""
mintpool.runtime  ──  A thin façade so services can run premint writes as
DBOS transactions without importing dbos.DBOS directly.

Usage pattern in user code
--------------------------
    from mintpool.runtime import Mintpool, insert_premint

    app = Mintpool.create_app("mintpool", db_url="postgresql://...")

    # ingestion pipeline
    insert_premint(record)

    # chain observer
    resolve_inclusion_claim(claim)
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from dbos import DBOS  # the only direct dbos import
from fastapi import FastAPI
from sqlalchemy.engine import Engine

from .api import create_api
from .bootstrap import init_mintpool, make_engine
from .core.claims import InclusionClaim
from .core.premint import PremintRecord
from .events import emit_inserted, emit_seen_on_chain
from .persistence.store import PremintStore


class Mintpool(DBOS):  # inherit all decorators & queue API
    """
    Drop-in replacement for DBOS in downstream code. Keeps a private
    singleton plus the engine and store so callers don't juggle them.
    """

    _singleton: ClassVar[Optional["Mintpool"]] = None
    _engine: ClassVar[Optional[Engine]] = None
    _store: ClassVar[Optional[PremintStore]] = None

    # ---------- one-shot initialiser ----------
    @classmethod
    def init(
        cls,
        *,
        name: str,
        database_url: str,
        fastapi: Optional[FastAPI] = None,
        **extra_cfg: Any,
    ) -> "Mintpool":
        if cls._singleton is None:
            cfg = {"name": name, "application_database_url": database_url, **extra_cfg}
            cls._singleton = cls(config=cfg, fastapi=fastapi)
            cls._engine = make_engine(database_url)
            cls._store = init_mintpool(cls._engine)
        return cls._singleton

    # ---------- convenience helpers ----------
    @classmethod
    def instance(cls) -> "Mintpool":
        if cls._singleton is None:
            raise RuntimeError("Mintpool.init() has not been called")
        return cls._singleton

    @classmethod
    def store(cls) -> PremintStore:
        if cls._store is None:
            raise RuntimeError("Mintpool.init() has not been called")
        return cls._store

    @classmethod
    def shutdown(cls) -> None:
        """Stop DBOS and forget the engine, so `init` can run again."""
        if cls._singleton is not None:
            DBOS.destroy(destroy_registry=False)  # keep the module-level transactions
        if cls._engine is not None:
            cls._engine.dispose()
        cls._singleton = cls._engine = cls._store = None

    @classmethod
    def create_app(
        cls,
        name: str,
        *,
        db_url: str,
        **fastapi_kwargs: Any,
    ) -> FastAPI:
        """
        One-liner for web apps:
            app = Mintpool.create_app("svc-name", db_url=URL)
        """
        app = FastAPI(**fastapi_kwargs)
        cls.init(name=name, database_url=db_url, fastapi=app)
        # Passing fastapi=app means DBOS will call .launch() automatically
        # during the ASGI "startup" event.
        return create_api(cls.store(), app)


# ---- DBOS transactions ------------------------------------------------
# The store runs on the ambient DBOS.sql_session, so DBOS owns
# commit/rollback and records the outcome for workflow recovery.
@DBOS.transaction()
def _insert_premint_tx(record: PremintRecord) -> PremintRecord:
    return Mintpool.store().insert(record, session=DBOS.sql_session)


@DBOS.transaction()
def _mark_seen_tx(kind: str, premint_id: str) -> bool:
    return Mintpool.store().mark_seen_on_chain(kind, premint_id, session=DBOS.sql_session)


def insert_premint(record: PremintRecord) -> PremintRecord:
    """Insert as a DBOS transaction; lifecycle handlers run after commit."""
    stored = _insert_premint_tx(PremintRecord.parse(record))
    emit_inserted(stored)
    return stored


def mark_premint_seen(kind: str, premint_id: str) -> bool:
    changed = _mark_seen_tx(kind, premint_id)
    if changed:
        emit_seen_on_chain(Mintpool.store().get(kind, premint_id))
    return changed


def resolve_inclusion_claim(claim: InclusionClaim) -> bool:
    """Entry point for chain observers: mark the claimed premint as minted."""
    return mark_premint_seen(claim.kind, claim.premint_id)
