"""Tests for blueprint.orchestrator."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

from blueprint.config import BlueprintConfig
from blueprint.models import ModuleAbi
from blueprint.orchestrator import Orchestrator
from blueprint.typetags.tags import canonical_address
from tests._fixtures.abi_builder import (
    COIN_ADDRESS,
    COIN_SOURCE,
    StaticChainClient,
    coin_module_payload,
    function_abi,
    module_abi,
    package_registry,
)

CAFE = canonical_address(COIN_ADDRESS)


def test_generate_returns_units_by_address_and_module(
    config: BlueprintConfig, chain_client: StaticChainClient
) -> None:
    results = Orchestrator(config, client=chain_client).generate([COIN_ADDRESS])

    assert list(results) == [CAFE]
    unit = results[CAFE]["coin"]
    assert unit.functions == ["transfer", "mint", "create", "burn", "get_balance"]
    assert unit.skipped == ["foo"]
    assert unit.failed == []
    assert "helper" not in unit.code
    assert "export namespace EntryFuncs {" in unit.code
    assert "export namespace ViewFuncs {" in unit.code
    assert "    to: AccountAddressInput, // address" in unit.code


def test_generate_uses_recovered_parameter_names(
    config: BlueprintConfig, chain_client: StaticChainClient
) -> None:
    unit = Orchestrator(config, client=chain_client).generate([COIN_ADDRESS])[CAFE]["coin"]

    assert "metadata: MoveVector.U8(metadata)" in unit.code
    assert "also_fake" not in unit.code
    assert "create<T0: key>(" in unit.code


def test_generate_module_without_source_uses_placeholders(config: BlueprintConfig) -> None:
    orchestrator = Orchestrator(config, client=StaticChainClient({}))
    unit = orchestrator.generate_module(ModuleAbi.from_dict(coin_module_payload()))

    assert unit is not None
    assert "arg_1: AccountAddressInput" in unit.code
    assert "amount" not in unit.code


def test_generate_module_with_nothing_to_emit(config: BlueprintConfig) -> None:
    module = ModuleAbi.from_dict(
        module_abi("util", [function_abi("helper", ["u64"], is_entry=False, returns=["u64"])])
    )
    assert Orchestrator(config, client=StaticChainClient({})).generate_module(module) is None


def test_unsupported_parameter_fails_only_that_function(config: BlueprintConfig, caplog) -> None:
    payload = module_abi(
        "pool",
        [
            function_abi("stake", ["&signer", "u64", "0xcafe::pool::Pool"]),
            function_abi("ping", ["&signer"]),
        ],
    )
    orchestrator = Orchestrator(config, client=StaticChainClient({}))

    with caplog.at_level(logging.INFO, logger="blueprint"):
        unit = orchestrator.generate_module(ModuleAbi.from_dict(payload))

    assert unit is not None
    assert unit.functions == ["ping"]
    assert unit.failed == ["stake"]
    assert f"{CAFE}::pool::stake: Failed to generate (parameter {CAFE}::pool::Pool)" in caplog.text
    assert "Parameter 2:" in caplog.text


def test_parameter_name_mismatch_fails_the_function(config: BlueprintConfig, caplog) -> None:
    payload = module_abi("coin", [function_abi("transfer", ["&signer", "address"])])
    orchestrator = Orchestrator(config, client=StaticChainClient({}))

    with caplog.at_level(logging.INFO, logger="blueprint"):
        unit = orchestrator.generate_module(ModuleAbi.from_dict(payload), COIN_SOURCE)

    assert unit is None
    assert "3 parameter names for 2 parameters" in caplog.text


def test_deprecated_reference_is_logged_as_skip(config: BlueprintConfig, caplog) -> None:
    payload = module_abi("coin", [function_abi("foo", ["&0xdead::m::T"]), function_abi("ping", ["&signer"])])
    orchestrator = Orchestrator(config, client=StaticChainClient({}))

    with caplog.at_level(logging.INFO, logger="blueprint"):
        unit = orchestrator.generate_module(ModuleAbi.from_dict(payload))

    assert unit is not None and unit.skipped == ["foo"]
    assert "Ignoring deprecated parameter &0xdead::m::T" in caplog.text
    assert not [record for record in caplog.records if record.levelno >= logging.ERROR]


def test_namespaces_can_be_disabled(config: BlueprintConfig, chain_client: StaticChainClient) -> None:
    config = dataclasses.replace(config, separate_view_and_entry_functions_by_namespace=False)
    unit = Orchestrator(config, client=chain_client).generate([COIN_ADDRESS])[CAFE]["coin"]

    assert "namespace" not in unit.code
    assert unit.code.startswith("export type TransferPayloadMoveArguments")


def test_run_writes_modules_and_indexes(config: BlueprintConfig, chain_client: StaticChainClient) -> None:
    report = Orchestrator(config, client=chain_client).run([COIN_ADDRESS])

    output = config.output_path
    module_file = output / CAFE / "coin.ts"
    assert module_file in report.written
    assert (output / "payloadBuilders.ts").exists()
    assert (output / "types.ts").exists()
    assert "export namespace EntryFuncs" in module_file.read_text(encoding="utf-8")
    assert 'export * as Coin from "./coin.js";' in (output / CAFE / "index.ts").read_text(encoding="utf-8")
    assert report.modules_emitted == 1
    assert report.functions_emitted == 5
    assert report.functions_skipped == 1
    assert report.functions_failed == 0
    assert report.failed_addresses == []


def test_run_uses_named_address_directories(config: BlueprintConfig, chain_client: StaticChainClient) -> None:
    config = dataclasses.replace(config, named_addresses={CAFE: "my_app"})

    Orchestrator(config, client=chain_client).run([COIN_ADDRESS])
    Orchestrator(config, client=chain_client).run([COIN_ADDRESS])

    output = config.output_path
    assert (output / "my_app" / "coin.ts").exists()
    top_level = (output / "index.ts").read_text(encoding="utf-8")
    assert top_level.count('export * as MyApp from "./my_app/index.js";') == 1


def test_run_across_addresses_records_failures(tmp_path: Path) -> None:
    config = BlueprintConfig(root=tmp_path, output_path=tmp_path / "out", named_addresses={"0x1": "aptos_framework"})
    framework = module_abi("aptos_account", [function_abi("transfer", ["&signer", "address", "u64"])], address="0x1")
    client = StaticChainClient(
        {"0x1": [framework], COIN_ADDRESS: [coin_module_payload()]},
        {COIN_ADDRESS: package_registry("CoinPackage", {"coin": COIN_SOURCE})},
        failing=["0xbad"],
    )

    report = Orchestrator(config, client=client).run(["0x1", COIN_ADDRESS, "0xbad", "0x01"])

    assert report.failed_addresses == [canonical_address("0xbad")]
    assert report.modules_emitted == 2
    assert sorted(client.calls) == sorted(["0x1", CAFE, canonical_address("0xbad")])
    top_level = (tmp_path / "out" / "index.ts").read_text(encoding="utf-8")
    assert "AptosFramework" in top_level
    assert "Module_0x000000" in top_level


def test_generate_leaves_out_unreachable_addresses(config: BlueprintConfig) -> None:
    client = StaticChainClient({COIN_ADDRESS: [coin_module_payload()]}, failing=["0xbad"])

    results = Orchestrator(config, client=client).generate([COIN_ADDRESS, "0xbad"])

    assert list(results) == [CAFE]


def test_malformed_module_payload_fails_only_its_address(tmp_path: Path) -> None:
    config = BlueprintConfig(root=tmp_path, output_path=tmp_path / "out")
    client = StaticChainClient(
        {
            COIN_ADDRESS: [coin_module_payload()],
            "0xbad": [module_abi("broken", [function_abi("ping", ["&signer"])], address="not-an-address")],
        },
        {COIN_ADDRESS: package_registry("CoinPackage", {"coin": COIN_SOURCE})},
    )

    report = Orchestrator(config, client=client).run(["0xbad", COIN_ADDRESS])

    assert report.failed_addresses == [canonical_address("0xbad")]
    assert report.modules_emitted == 1
    assert (tmp_path / "out" / CAFE / "coin.ts").exists()
