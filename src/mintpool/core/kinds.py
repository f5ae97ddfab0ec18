"""
Premint kinds.

Each kind knows the shape of its JSON document and how to project it onto
the flattened ``premints`` columns. Registering a kind makes
``PremintRecord.from_document`` able to build records of that kind from the
document alone.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Optional, Type

import pydantic
from pydantic import BaseModel, Field

from ..errors import ValidationError
from .claims import InclusionClaim


class PremintMetadata(BaseModel):
    """The flattened columns, as derived from a document."""

    id: str
    kind: str
    version: int
    signer: str
    chain_id: int
    collection_address: Optional[str] = None
    token_id: Optional[str] = None
    token_uri: Optional[str] = None


class PremintKind(ABC):
    """Base class for a premint protocol variant."""

    name: ClassVar[str] = ""

    @abstractmethod
    def metadata(self, document: Dict[str, Any]) -> PremintMetadata:
        """Project ``document`` onto the flattened columns."""


_KINDS: Dict[str, PremintKind] = {}


def register_kind(cls: Type[PremintKind]) -> Type[PremintKind]:
    """Class decorator: make a kind available under ``cls.name``."""
    if not cls.name:
        raise ValueError(f"{cls.__name__} has no name")
    _KINDS[cls.name] = cls()
    return cls


def get_kind(name: str) -> PremintKind:
    try:
        return _KINDS[name]
    except KeyError:
        raise ValidationError(f"unknown premint kind {name!r}") from None


def known_kinds() -> List[str]:
    return sorted(_KINDS)


# ------------------------------------------------------------------ #
# zora premint v2
# ------------------------------------------------------------------ #
class ZoraContractCreationConfig(BaseModel):
    contract_admin: str = Field(alias="contractAdmin", min_length=1)
    contract_uri: str = Field("", alias="contractURI")
    contract_name: str = Field("", alias="contractName")

    model_config = {"extra": "allow", "populate_by_name": True}


class ZoraTokenCreationConfig(BaseModel):
    token_uri: str = Field(alias="tokenURI")

    model_config = {"extra": "allow", "populate_by_name": True}


class ZoraCreatorAttribution(BaseModel):
    token_config: ZoraTokenCreationConfig = Field(alias="tokenConfig")
    uid: int = Field(ge=0)
    version: int = Field(ge=0)
    deleted: bool = False

    model_config = {"extra": "allow", "populate_by_name": True}


class ZoraPremintV2Document(BaseModel):
    """The premint request document as submitted by zora clients."""

    collection: ZoraContractCreationConfig
    premint: ZoraCreatorAttribution
    collection_address: str = Field(alias="collectionAddress", min_length=1)
    chain_id: int = Field(alias="chainId")
    signature: str

    model_config = {"extra": "allow", "populate_by_name": True}


@register_kind
class ZoraPremintV2(PremintKind):
    name = "zora_premint_v2"

    @staticmethod
    def guid(chain_id: int, collection_address: str, uid: int) -> str:
        """Deterministic premint id; the same for the document and its mint event."""
        return f"{chain_id}:{collection_address.lower()}:{uid}"

    def parse(self, document: Dict[str, Any]) -> ZoraPremintV2Document:
        try:
            return ZoraPremintV2Document.model_validate(document)
        except pydantic.ValidationError as exc:
            raise ValidationError(
                f"invalid {self.name} document: {exc.error_count()} error(s)",
                errors=exc.errors(include_url=False, include_context=False),
            ) from exc

    def metadata(self, document: Dict[str, Any]) -> PremintMetadata:
        doc = self.parse(document)
        return PremintMetadata(
            id=self.guid(doc.chain_id, doc.collection_address, doc.premint.uid),
            kind=self.name,
            version=doc.premint.version,
            signer=doc.collection.contract_admin,
            chain_id=doc.chain_id,
            collection_address=doc.collection_address,
            token_id=str(doc.premint.uid),
            token_uri=doc.premint.token_config.token_uri,
        )

    def claim_for_event(
        self,
        chain_id: int,
        contract_address: str,
        uid: int,
        tx_hash: str,
        log_index: int,
    ) -> InclusionClaim:
        """Build the claim for a ``PremintedV2`` log seen by a chain observer."""
        return InclusionClaim(
            premint_id=self.guid(chain_id, contract_address, uid),
            kind=self.name,
            chain_id=chain_id,
            tx_hash=tx_hash,
            log_index=log_index,
        )
