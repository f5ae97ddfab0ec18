"""
HTTP surface over a :class:`PremintStore`.

Store errors map onto status codes: not found → 404, duplicate → 409,
invalid input → 422, engine failure → 503.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse

from .core.premint import PremintRecord
from .errors import (
    ConflictError,
    NotFoundError,
    PremintStoreError,
    StorageError,
    ValidationError,
)
from .persistence.store import PremintStore

logger = logging.getLogger(__name__)

STATUS_CODES = {
    NotFoundError: 404,
    ConflictError: 409,
    ValidationError: 422,
    StorageError: 503,
}


def _error_response(request: Request, exc: PremintStoreError) -> JSONResponse:
    status = next(
        (code for cls, code in STATUS_CODES.items() if isinstance(exc, cls)), 500
    )
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    body: Dict[str, Any] = {"status": "error", "message": str(exc)}
    if isinstance(exc, ValidationError) and exc.errors:
        body["errors"] = exc.errors
    return JSONResponse(status_code=status, content=body)


def _dump(premint: PremintRecord) -> Dict[str, Any]:
    return premint.model_dump(mode="json", by_alias=True)


def create_api(store: PremintStore, app: Optional[FastAPI] = None) -> FastAPI:
    """Attach the premint routes to ``app`` (a new one if not given)."""
    app = app or FastAPI(title="mintpool")
    app.state.premint_store = store
    app.add_exception_handler(PremintStoreError, _error_response)

    @app.get("/")
    def health() -> dict[str, str]:
        return {"status": "running"}

    @app.post("/premints", status_code=201)
    def insert_premint(body: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
        """Store a fully populated premint (document under ``json``)."""
        return _dump(store.insert(PremintRecord.parse(body)))

    @app.post("/premints/{kind}/submit", status_code=201)
    def submit_premint(kind: str, document: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
        """Store a premint from its raw document; columns derived from it."""
        return _dump(store.insert(PremintRecord.from_document(kind, document)))

    @app.get("/premints")
    def list_premints(
        kind: Optional[str] = None, signer: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        if kind is not None and signer is not None:
            raise ValidationError("filter by kind or by signer, not both")
        if kind is not None:
            premints = store.list_by_kind(kind)
        elif signer is not None:
            premints = store.list_by_signer(signer)
        else:
            premints = store.list_all()
        return [_dump(p) for p in premints]

    @app.get("/premints/{kind}/{premint_id}")
    def get_premint(kind: str, premint_id: str) -> Dict[str, Any]:
        return _dump(store.get(kind, premint_id))

    @app.post("/premints/{kind}/{premint_id}/seen-on-chain")
    def mark_seen_on_chain(kind: str, premint_id: str) -> Dict[str, Any]:
        changed = store.mark_seen_on_chain(kind, premint_id)
        return {"changed": changed, "premint": _dump(store.get(kind, premint_id))}

    return app
