"""Decoding of the gzip+hex module sources stored in package metadata."""

from __future__ import annotations

import binascii
import gzip
import zlib
from typing import Any, Dict, Iterable, Mapping

from ..errors import ChainClientError
from ..logging import get_logger
from ..models import ModuleSource

logger = get_logger("chain.source")


def decode_source(hex_text: str) -> str:
    """Gunzip a `0x`-prefixed hex string into source text; empty input yields ""."""
    text = hex_text[2:] if hex_text.startswith("0x") else hex_text
    if not text:
        return ""
    try:
        return gzip.decompress(bytes.fromhex(text)).decode("utf-8")
    except (ValueError, OSError, EOFError, zlib.error, binascii.Error) as exc:
        raise ChainClientError(f"Module source is not valid gzip+hex data: {exc}") from exc


def module_sources(packages: Iterable[Mapping[str, Any]]) -> Iterable[ModuleSource]:
    for package in packages:
        package_name = str(package.get("name", ""))
        for module in package.get("modules") or []:
            if not isinstance(module, Mapping):
                continue
            name = str(module.get("name", ""))
            try:
                source = decode_source(str(module.get("source") or ""))
            except ChainClientError as exc:
                logger.warning("Skipping source for %s::%s: %s", package_name, name, exc)
                continue
            if name and source:
                yield ModuleSource(package=package_name, name=name, source=source)


def source_map_for(packages: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    """Map module name to decoded source across all packages of an account.

    Modules published without source are absent from the map.
    """
    return {module.name: module.source for module in module_sources(packages)}


__all__ = ["decode_source", "module_sources", "source_map_for"]
