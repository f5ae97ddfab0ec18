"""
PremintRecord kernel – *pure Pydantic* (no SQLAlchemy session or DBOS imports).

* ``json`` (exposed as ``payload``) is the canonical document.
* The flattened columns are projections of it; ``from_document`` regenerates
  them through the kind registry.
* ``token_id`` is a decimal string so u256 values never lose precision.
"""

from __future__ import annotations

import datetime as dt
import json
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

import pydantic
from pydantic import BaseModel, Field, field_validator

from ..errors import ValidationError
from .kinds import get_kind

T_Premint = TypeVar("T_Premint", bound="PremintRecord")

# column ranges: version is INTEGER, chain_id is BIGINT on PostgreSQL
MAX_VERSION = 2**31 - 1
MAX_CHAIN_ID = 2**63 - 1

COLUMNS = (
    "id",
    "kind",
    "version",
    "signer",
    "chain_id",
    "collection_address",
    "token_id",
    "token_uri",
)


def _invalid(exc: pydantic.ValidationError, what: str = "premint") -> ValidationError:
    return ValidationError(
        f"invalid {what}: {exc.error_count()} error(s): "
        + "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        ),
        errors=exc.errors(include_url=False, include_context=False),
    )


class PremintRecord(BaseModel):
    """One row of the ``premints`` table."""

    id: str = Field(min_length=1)
    kind: str = Field(min_length=1)
    version: int = Field(ge=0, le=MAX_VERSION)
    signer: str = Field(min_length=1)
    chain_id: int = Field(ge=0, le=MAX_CHAIN_ID)
    collection_address: Optional[str] = None
    token_id: Optional[str] = None
    token_uri: Optional[str] = None
    payload: Dict[str, Any] = Field(alias="json")
    seen_on_chain: bool = False
    created_at: Optional[dt.datetime] = None

    model_config = {"frozen": True, "populate_by_name": True, "extra": "forbid"}

    # ------------------------------------------------------------------ #
    # field normalisation
    # ------------------------------------------------------------------ #
    @field_validator("payload", mode="before")
    @classmethod
    def _decode_document(cls, value: Any) -> Any:
        if isinstance(value, (str, bytes)):
            try:
                return json.loads(value)
            except ValueError as exc:
                raise ValueError(f"malformed json document: {exc}") from exc
        return value

    @field_validator("token_id", mode="before")
    @classmethod
    def _token_id_as_text(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("token_id must be a decimal integer")
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("token_id")
    @classmethod
    def _token_id_is_decimal(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not (value.isascii() and value.isdigit()):
            raise ValueError("token_id must be a non-negative decimal string")
        return value

    @field_validator("created_at")
    @classmethod
    def _naive_utc(cls, value: Optional[dt.datetime]) -> Optional[dt.datetime]:
        # the column is a plain TIMESTAMP holding UTC
        if value is not None and value.tzinfo is not None:
            return value.astimezone(dt.timezone.utc).replace(tzinfo=None)
        return value

    # ------------------------------------------------------------------ #
    # constructors
    # ------------------------------------------------------------------ #
    @classmethod
    def parse(cls: Type[T_Premint], data: Any) -> T_Premint:
        """Validate raw input, raising :class:`mintpool.errors.ValidationError`."""
        if isinstance(data, cls):
            return data
        try:
            return cls.model_validate(data)
        except pydantic.ValidationError as exc:
            raise _invalid(exc) from exc

    @classmethod
    def from_document(cls: Type[T_Premint], kind: str, document: Dict[str, Any]) -> T_Premint:
        """Build a record whose flattened columns are derived from ``document``."""
        meta = get_kind(kind).metadata(document)
        return cls.parse({**meta.model_dump(), "json": document})

    @classmethod
    def from_row(cls: Type[T_Premint], row: Any) -> T_Premint:
        data = {name: getattr(row, name) for name in COLUMNS}
        data.update(json=row.json, seen_on_chain=row.seen_on_chain, created_at=row.created_at)
        return cls.parse(data)

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #
    @property
    def key(self) -> Tuple[str, str]:
        return (self.kind, self.id)

    def to_row_values(self) -> Dict[str, Any]:
        """Column values for an INSERT; ``created_at`` left to the server if unset."""
        values = {name: getattr(self, name) for name in COLUMNS}
        values["json"] = self.payload
        values["seen_on_chain"] = False
        if self.created_at is not None:
            values["created_at"] = self.created_at
        return values
