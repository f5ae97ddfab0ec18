"""
Public surface for mintpool.
Importing this module does **not** touch the database or DBOS; call
`mintpool.init_mintpool(engine)` (or `Mintpool.init(...)`) during start-up.
"""

from .bootstrap import init_mintpool, make_engine
from .core.claims import InclusionClaim
from .core.kinds import PremintKind, PremintMetadata, register_kind
from .core.premint import PremintRecord
from .errors import (
    ConflictError,
    NotFoundError,
    PremintStoreError,
    StorageError,
    ValidationError,
)
from .events import on
from .persistence.store import PremintStore

__all__ = [
    "ConflictError",
    "InclusionClaim",
    "NotFoundError",
    "PremintKind",
    "PremintMetadata",
    "PremintRecord",
    "PremintStore",
    "PremintStoreError",
    "StorageError",
    "ValidationError",
    "init_mintpool",
    "make_engine",
    "on",
    "register_kind",
]
