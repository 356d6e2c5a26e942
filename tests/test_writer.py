"""Tests for the output writer."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from blueprint.models import GeneratedUnit
from blueprint.writer import OutputWriter


def _unit(name: str) -> GeneratedUnit:
    return GeneratedUnit(address="0x1", module_name=name, code=f"export class {name.title()} {{}}\n", functions=["f"])


def test_write_address_lays_out_modules_and_indexes(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path / "out")

    written = writer.write_address("0x1", "aptos_framework", {"coin": _unit("coin"), "account": _unit("account")})

    directory = tmp_path / "out" / "aptos_framework"
    assert written == [directory / "account.ts", directory / "coin.ts"]
    assert "export class Coin {}" in (directory / "coin.ts").read_text(encoding="utf-8")
    index = (directory / "index.ts").read_text(encoding="utf-8")
    assert 'export * as Account from "./account.js";' in index
    assert 'AccountAddress.fromRelaxed("0x1")' in index
    top_level = (tmp_path / "out" / "index.ts").read_text(encoding="utf-8")
    assert 'export * as AptosFramework from "./aptos_framework/index.js";' in top_level


def test_unnamed_address_gets_truncated_alias(tmp_path: Path) -> None:
    address = "0x" + "cafe".zfill(64)
    writer = OutputWriter(tmp_path)

    writer.write_address(address, address, {"coin": _unit("coin")})

    top_level = (tmp_path / "index.ts").read_text(encoding="utf-8")
    assert f'export * as Module_0x000000 from "./{address}/index.js";' in top_level


def test_write_address_without_units_writes_nothing(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path / "out")

    assert writer.write_address("0x1", "aptos_framework", {}) == []
    assert not (tmp_path / "out").exists()


def test_index_export_is_written_once(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path)

    assert writer.append_index_export("Coin", "coin") is True
    assert writer.append_index_export("Coin", "coin") is False

    contents = (tmp_path / "index.ts").read_text(encoding="utf-8")
    assert contents.count("export * as Coin") == 1


def test_concurrent_index_exports_are_all_kept(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path)
    aliases = [f"Pkg{index}" for index in range(20)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda alias: writer.append_index_export(alias, alias.lower()), aliases * 2))

    contents = (tmp_path / "index.ts").read_text(encoding="utf-8")
    for alias in aliases:
        assert contents.count(f"export * as {alias} from") == 1


def test_support_files_are_written(tmp_path: Path) -> None:
    written = OutputWriter(tmp_path).write_support_files()
    assert sorted(path.name for path in written) == ["payloadBuilders.ts", "types.ts"]
