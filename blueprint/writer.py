"""Writes generated units to the output directory."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import List, Mapping

from .codegen.constants import INDEX_FILE_NAME
from .codegen.conversions import to_pascal_case, truncate_address_for_file_name
from .codegen.renderer import SUPPORT_FILES, CodeRenderer
from .logging import get_logger
from .models import GeneratedUnit


class OutputWriter:
    """Lays out one file per module, one index per address and a top-level index."""

    def __init__(self, output_path: Path, renderer: CodeRenderer | None = None) -> None:
        self.output_path = Path(output_path)
        self.renderer = renderer or CodeRenderer()
        self.logger = get_logger("writer")
        self._index_lock = threading.Lock()

    def write_address(
        self, address: str, named_address: str, units: Mapping[str, GeneratedUnit]
    ) -> List[Path]:
        """Write every unit for `address` under `<output>/<named_address>/`.

        Returns the written module paths; nothing is written when `units`
        is empty.
        """
        written: List[Path] = []
        if not units:
            self.logger.info("No modules with functions at %s; nothing written", address)
            return written
        directory = self.output_path / named_address
        directory.mkdir(parents=True, exist_ok=True)

        module_names = sorted(units)
        for name in module_names:
            path = directory / f"{name}.ts"
            path.write_text(self.renderer.render_module_file(units[name].code), encoding="utf-8")
            written.append(path)
            self.logger.debug("Wrote %s", path)

        index_path = directory / INDEX_FILE_NAME
        index_path.write_text(self.renderer.render_address_index(address, module_names), encoding="utf-8")
        self.append_index_export(self._index_alias(address, named_address), named_address)
        return written

    def write_support_files(self) -> List[Path]:
        self.output_path.mkdir(parents=True, exist_ok=True)
        written = []
        for name in SUPPORT_FILES:
            path = self.output_path / f"{name}.ts"
            path.write_text(self.renderer.render_support_file(name), encoding="utf-8")
            written.append(path)
        return written

    def append_index_export(self, alias: str, directory: str) -> bool:
        """Add an export line to the top-level index unless it is already there."""
        line = self.renderer.render_index_export(alias, directory)
        index_path = self.output_path / INDEX_FILE_NAME
        with self._index_lock:
            self.output_path.mkdir(parents=True, exist_ok=True)
            if index_path.exists():
                contents = index_path.read_text(encoding="utf-8")
                if line in contents:
                    return False
            else:
                contents = self.renderer.render_index_header()
            index_path.write_text(contents + line, encoding="utf-8")
        return True

    @staticmethod
    def _index_alias(address: str, named_address: str) -> str:
        if named_address.startswith("0x"):
            return truncate_address_for_file_name(address)
        return to_pascal_case(named_address)


__all__ = ["OutputWriter"]
