"""
Thin data-access layer around the `premints` table.

Every public method is one transaction. Pass ``session=`` to run inside a
transaction the caller owns (e.g. ``DBOS.sql_session`` in a DBOS
transaction); otherwise the store opens a short-lived session and commits.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import exists, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.claims import InclusionClaim
from ..core.premint import PremintRecord
from ..errors import ConflictError, NotFoundError, StorageError, ValidationError
from ..events import emit_inserted, emit_seen_on_chain
from .models import PremintRow

logger = logging.getLogger(__name__)


def _require_key(kind: str, id: str) -> None:
    if not kind or not id:
        raise ValidationError(f"both kind and id are required, got {kind!r}/{id!r}")


class PremintStore:
    """Thin data‑access layer around the `premints` table."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def _new_session(self) -> Session:  # separate to keep pylint happy
        return Session(bind=self.engine, future=True)

    @contextmanager
    def _transaction(self, session: Optional[Session]) -> Iterator[Session]:
        """Yield ``session`` untouched, or a fresh one committed on success."""
        if session is not None:
            yield session
            return
        with self._new_session() as s, s.begin():
            yield s

    # ---- writes ---------------------------------------------------------
    def insert(self, record: PremintRecord, *, session: Optional[Session] = None) -> PremintRecord:
        """
        Insert a premint **exactly once**.

        • ``(kind, id)`` already present → :class:`ConflictError`
        • ``created_at`` unset           → server clock
        • ``seen_on_chain`` set          → :class:`ValidationError`
        Returns the stored record, ``created_at`` filled in.
        """
        record = PremintRecord.parse(record)
        if record.seen_on_chain:
            # the flag only ever flips through mark_seen_on_chain
            raise ValidationError(
                f"premint {record.kind}/{record.id} must be stored with seen_on_chain=false"
            )
        try:
            with self._transaction(session) as s:
                s.execute(insert(PremintRow).values(**record.to_row_values()))
                stored = self._fetch(s, record.kind, record.id)
        except IntegrityError as exc:
            logger.debug("Rejected duplicate premint %s/%s", record.kind, record.id)
            raise ConflictError(record.kind, record.id) from exc
        except SQLAlchemyError as exc:
            raise StorageError(f"insert of {record.kind}/{record.id} failed: {exc}") from exc

        logger.info("Stored premint %s/%s (signer=%s)", stored.kind, stored.id, stored.signer)
        if session is None:
            emit_inserted(stored)
        return stored

    def mark_seen_on_chain(self, kind: str, id: str, *, session: Optional[Session] = None) -> bool:
        """
        Flip ``seen_on_chain`` to true.

        Returns ``True`` when the flag changed, ``False`` when it was already
        set. Never sets it back to false.
        """
        _require_key(kind, id)
        try:
            with self._transaction(session) as s:
                result = s.execute(
                    update(PremintRow)
                    .where(
                        PremintRow.kind == kind,
                        PremintRow.id == id,
                        PremintRow.seen_on_chain.is_(False),
                    )
                    .values(seen_on_chain=True)
                    .execution_options(synchronize_session=False)
                )
                changed = result.rowcount == 1
                if not changed and not s.scalar(
                    select(exists().where(PremintRow.kind == kind, PremintRow.id == id))
                ):
                    raise NotFoundError(kind, id)
                stored = self._fetch(s, kind, id) if changed else None
        except SQLAlchemyError as exc:
            raise StorageError(f"marking {kind}/{id} seen on chain failed: {exc}") from exc

        if stored is None:
            logger.debug("Premint %s/%s already seen on chain", kind, id)
            return False

        logger.info("Marked premint %s/%s as seen on chain", kind, id)
        if session is None:
            emit_seen_on_chain(stored)
        return True

    def resolve_claim(self, claim: InclusionClaim, *, session: Optional[Session] = None) -> bool:
        """Mark the premint an inclusion claim points at as seen on chain."""
        return self.mark_seen_on_chain(claim.kind, claim.premint_id, session=session)

    # ---- reads ---------------------------------------------------------
    def get(self, kind: str, id: str, *, session: Optional[Session] = None) -> PremintRecord:
        """Return the premint stored under ``(kind, id)`` or raise :class:`NotFoundError`."""
        _require_key(kind, id)
        try:
            with self._transaction(session) as s:
                return self._fetch(s, kind, id)
        except SQLAlchemyError as exc:
            raise StorageError(f"reading {kind}/{id} failed: {exc}") from exc

    def list_all(self) -> Iterator[PremintRecord]:
        """Yield every premint, ordered by ``(kind, id)``."""
        yield from self._stream(select(PremintRow))

    def list_by_kind(self, kind: str) -> Iterator[PremintRecord]:
        yield from self._stream(select(PremintRow).where(PremintRow.kind == kind))

    def list_by_signer(self, signer: str) -> Iterator[PremintRecord]:
        yield from self._stream(select(PremintRow).where(PremintRow.signer == signer))

    # ---- internals -----------------------------------------------------
    @staticmethod
    def _fetch(s: Session, kind: str, id: str) -> PremintRecord:
        row = s.execute(
            select(PremintRow).where(PremintRow.kind == kind, PremintRow.id == id)
        ).scalar_one_or_none()
        if row is None:
            logger.debug("Premint %s/%s not found", kind, id)
            raise NotFoundError(kind, id)
        return PremintRecord.from_row(row)

    def _stream(self, q) -> Iterator[PremintRecord]:
        """Run ``q`` in its own session; each call starts the sequence over."""
        q = q.order_by(PremintRow.kind, PremintRow.id)
        try:
            with self._new_session() as s:
                yield from (PremintRecord.from_row(row) for row in s.scalars(q))
        except SQLAlchemyError as exc:
            raise StorageError(f"listing premints failed: {exc}") from exc
