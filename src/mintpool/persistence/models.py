"""
Single-table schema: every premint lives in ``premints``, keyed by (kind, id).
"""

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Integer,
    PrimaryKeyConstraint,
    Text,
    false,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql.expression import FunctionElement

Base = declarative_base()

# JSONB where the engine has it, plain JSON (text) elsewhere
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class utcnow(FunctionElement):
    """Current UTC time as a naive timestamp, whatever the session time zone."""

    type = DateTime()
    inherit_cache = True


@compiles(utcnow)
def _utcnow_default(element, compiler, **kw):
    return "CURRENT_TIMESTAMP"  # UTC on SQLite


@compiles(utcnow, "postgresql")
def _utcnow_postgresql(element, compiler, **kw):
    return "(now() at time zone 'utc')"


class PremintRow(Base):
    """One premint. ``json`` is canonical, the other columns are projections of it."""

    __tablename__ = "premints"
    __table_args__ = (PrimaryKeyConstraint("kind", "id"),)

    id = Column(Text, nullable=False)
    kind = Column(Text, nullable=False)
    version = Column(Integer, nullable=False)
    signer = Column(Text, nullable=False)
    chain_id = Column(Integer().with_variant(BigInteger(), "postgresql"), nullable=False)
    collection_address = Column(Text, nullable=True)
    token_id = Column(Text, nullable=True)  # decimal string, may be u256
    token_uri = Column(Text, nullable=True)
    json = Column(JSONDocument, nullable=False)
    seen_on_chain = Column(Boolean, nullable=False, server_default=false())
    created_at = Column(DateTime, nullable=True, server_default=utcnow())
