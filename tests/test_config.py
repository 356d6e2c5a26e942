"""Tests for blueprint.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from blueprint.config import BlueprintConfig, load_config
from blueprint.errors import ConfigError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, BlueprintConfig)
    assert config.root == tmp_path.resolve()
    assert config.named_addresses == {}
    assert config.function_comments is True
    assert config.include_account_params is True
    assert config.entry_namespace == "EntryFuncs"
    assert config.view_namespace == "ViewFuncs"
    assert config.sdk_path == "@aptos-labs/ts-sdk"
    assert config.network == "devnet"
    assert config.templates_dir is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / "blueprint.yaml"
    config_file.write_text(
        """
named_addresses:
  0x1: aptos_framework
  "0xCAFE": my_app
named_type_tags:
  "0x1::fungible_asset::Metadata": Metadata
output_path: src/generated
function_comments: false
expanded_structs: yes
entry_functions_namespace: Entry
view_functions_namespace: View
sdk_path: "../sdk"
network: Mainnet
request_timeout: 12
max_workers: 2
templates_dir: templates
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.root == tmp_path.resolve()
    assert config.named_addresses == {"0x1": "aptos_framework", "0x" + "cafe".zfill(64): "my_app"}
    assert config.named_type_tags == {"0x1::fungible_asset::Metadata": "Metadata"}
    assert config.output_path == tmp_path.resolve() / "src" / "generated"
    assert config.function_comments is False
    assert config.expanded_structs is True
    assert config.entry_namespace == "Entry"
    assert config.view_namespace == "View"
    assert config.sdk_path == "../sdk"
    assert config.network == "mainnet"
    assert config.request_timeout == 12.0
    assert config.max_workers == 2
    assert config.templates_dir == tmp_path.resolve() / "templates"


def test_load_config_accepts_camel_case_keys(tmp_path: Path) -> None:
    config_file = tmp_path / "settings.yaml"
    config_file.write_text(
        """
namedAddresses:
  "0x4": aptos_token_objects
includeAccountParams: false
separateViewAndEntryFunctionsByNamespace: false
nodeUrl: http://127.0.0.1:8080/v1
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.named_address_for("0x04") == "aptos_token_objects"
    assert config.include_account_params is False
    assert config.entry_namespace is None
    assert config.view_namespace is None
    assert config.node_url == "http://127.0.0.1:8080/v1"


def test_named_address_for_falls_back_to_address(tmp_path: Path) -> None:
    config = BlueprintConfig(root=tmp_path)
    assert config.named_address_for("0xCAFE") == "0x" + "cafe".zfill(64)


def test_load_config_missing_explicit_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml")


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / "blueprint.yaml").write_text("named_addresses: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / "blueprint.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_bad_named_address(tmp_path: Path) -> None:
    (tmp_path / "blueprint.yaml").write_text("named_addresses:\n  not_an_address: x\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="not_an_address"):
        load_config(tmp_path)


def test_empty_config_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / "blueprint.yaml").write_text("\n", encoding="utf-8")
    config = load_config(tmp_path)
    assert config.output_path == tmp_path.resolve() / "generated"
