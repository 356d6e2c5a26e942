from __future__ import annotations

import logging
from pathlib import Path

import pytest

from blueprint.config import BlueprintConfig
from blueprint.models import ModuleAbi
from tests._fixtures.abi_builder import (
    COIN_ADDRESS,
    COIN_SOURCE,
    StaticChainClient,
    coin_module_payload,
    package_registry,
)


@pytest.fixture
def coin_module() -> ModuleAbi:
    """The sample `coin` module covering the common parameter shapes."""
    return ModuleAbi.from_dict(coin_module_payload())


@pytest.fixture
def coin_source() -> str:
    return COIN_SOURCE


@pytest.fixture
def chain_client() -> StaticChainClient:
    return StaticChainClient(
        {COIN_ADDRESS: [coin_module_payload()]},
        {COIN_ADDRESS: package_registry("CoinPackage", {"coin": COIN_SOURCE})},
    )


@pytest.fixture
def config(tmp_path: Path) -> BlueprintConfig:
    return BlueprintConfig(root=tmp_path, output_path=tmp_path / "generated")


@pytest.fixture(autouse=True)
def _restore_blueprint_logger():
    """Undo `configure_logging` so caplog keeps seeing blueprint records."""
    yield
    logger = logging.getLogger("blueprint")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
