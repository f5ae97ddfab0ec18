"""
Inclusion claims: evidence that a premint was brought on chain.
"""

from pydantic import BaseModel, Field


class InclusionClaim(BaseModel):
    """Points at the log that minted ``(kind, premint_id)`` on ``chain_id``."""

    premint_id: str = Field(min_length=1)
    kind: str = Field(min_length=1)
    chain_id: int
    tx_hash: str
    log_index: int = Field(ge=0)

    model_config = {"frozen": True}
