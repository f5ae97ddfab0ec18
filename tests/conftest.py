"""
Pytest configuration and shared fixtures for the premint store tests.
"""

import copy

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from mintpool.bootstrap import init_mintpool, make_engine
from mintpool.core.premint import PremintRecord
from mintpool.events import clear_handlers

ZORA_DOCUMENT = {
    "collection": {
        "contractAdmin": "0xa771209423284bace9a24a06a166a11ba0a7a1fb",
        "contractURI": "ipfs://bafkreicuxlqqgoo6fxlmijqebdgbzyrizj5w6nuxhm2p6hyi2bxbxyjeqm",
        "contractName": "Testing Contract",
    },
    "premint": {
        "tokenConfig": {
            "tokenURI": "ipfs://bafkreice23maski3x52tsfqgxstx3kbiifnt5jotg3a5ynvve53c4soi2u",
            "maxSupply": "18446744073709551615",
            "maxTokensPerAddress": 0,
            "pricePerToken": 0,
            "mintStart": 1708100240,
            "mintDuration": 2592000,
            "royaltyBPS": 500,
            "payoutRecipient": "0xa771209423284bace9a24a06a166a11ba0a7a1fb",
            "fixedPriceMinter": "0x04e2516a2c207e84a1839755675dfd8ef6302f0a",
            "createReferral": "0x0000000000000000000000000000000000000000",
        },
        "uid": 2,
        "version": 1,
        "deleted": False,
    },
    "collectionAddress": "0x0cfbce0e2ea475d6413e2f038b2b62e64106ad1f",
    "chainId": 7777777,
    "signature": "0x2eb4d27a5b04fd41bdd33f66a18a4993c0116724c5fc5ac4e3ab6b5b9d0c2b6f",
}


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every session in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return init_mintpool(engine)


@pytest.fixture
def file_store(tmp_path):
    """Store on a file-backed SQLite database, for tests that use threads."""
    engine = make_engine(f"sqlite:///{tmp_path / 'premints.db'}")
    yield init_mintpool(engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def _no_leftover_handlers():
    clear_handlers()
    yield
    clear_handlers()


@pytest.fixture
def zora_document():
    return copy.deepcopy(ZORA_DOCUMENT)


@pytest.fixture
def make_record():
    """Factory for valid records; keyword arguments override fields."""

    def _make(**overrides) -> PremintRecord:
        data = {
            "kind": "zora-v1",
            "id": "abc",
            "version": 1,
            "signer": "0xAA00000000000000000000000000000000000001",
            "chain_id": 7777777,
            "collection_address": "0x0cfbce0e2ea475d6413e2f038b2b62e64106ad1f",
            "token_id": "123456789012345678901234567890",
            "token_uri": "ipfs://token",
            "json": {"uid": 1, "tokenConfig": {"tokenURI": "ipfs://token"}},
        }
        data.update(overrides)
        return PremintRecord.parse(data)

    return _make
