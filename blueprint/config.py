"""Configuration loading for blueprint (blueprint.yaml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .codegen.constants import DEFAULT_SDK_PATH
from .errors import ConfigError, DescriptorError
from .typetags.tags import canonical_address

CONFIG_FILE_NAME = "blueprint.yaml"

# Keys accepted in the camelCase spelling used by the TypeScript tooling.
_ALIASES: Dict[str, str] = {
    "namedAddresses": "named_addresses",
    "namedTypeTags": "named_type_tags",
    "outputPath": "output_path",
    "functionComments": "function_comments",
    "expandedStructs": "expanded_structs",
    "includeAccountParams": "include_account_params",
    "entryFunctionsNamespace": "entry_functions_namespace",
    "viewFunctionsNamespace": "view_functions_namespace",
    "separateViewAndEntryFunctionsByNamespace": "separate_view_and_entry_functions_by_namespace",
    "sdkPath": "sdk_path",
    "nodeUrl": "node_url",
    "requestTimeout": "request_timeout",
    "maxWorkers": "max_workers",
}


@dataclass
class BlueprintConfig:
    """Settings that shape generated code and how ABIs are fetched."""

    root: Path
    named_addresses: Dict[str, str] = field(default_factory=dict)
    named_type_tags: Dict[str, str] = field(default_factory=dict)
    output_path: Path = Path("./generated/")
    function_comments: bool = True
    expanded_structs: bool = False
    include_account_params: bool = True
    entry_functions_namespace: str = "EntryFuncs"
    view_functions_namespace: str = "ViewFuncs"
    separate_view_and_entry_functions_by_namespace: bool = True
    sdk_path: str = DEFAULT_SDK_PATH
    network: str = "devnet"
    node_url: Optional[str] = None
    request_timeout: float = 30.0
    max_workers: int = 4
    templates_dir: Optional[Path] = None

    @property
    def entry_namespace(self) -> Optional[str]:
        if self.separate_view_and_entry_functions_by_namespace:
            return self.entry_functions_namespace
        return None

    @property
    def view_namespace(self) -> Optional[str]:
        if self.separate_view_and_entry_functions_by_namespace:
            return self.view_functions_namespace
        return None

    def named_address_for(self, address: str) -> str:
        """Alias for `address`, or the address itself when none is configured."""
        return self.named_addresses.get(canonical_address(address), canonical_address(address))


def load_config(config_path: Path | None = None) -> BlueprintConfig:
    """Load configuration from disk.

    A directory is searched for `blueprint.yaml` and yields defaults when
    there is none; an explicit file path must exist.
    """
    config_path = (config_path or Path(".")).expanduser()
    if config_path.is_dir():
        config_file = (config_path / CONFIG_FILE_NAME).resolve()
        if not config_file.exists():
            return BlueprintConfig(root=config_path.resolve())
    else:
        config_file = config_path.resolve()
        if not config_file.exists():
            raise ConfigError(f"Config file not found at {config_path}")
    root = config_file.parent

    data = _normalise_keys(_read_config(config_file))
    defaults = BlueprintConfig(root=root)

    output_path = _as_str(data.get("output_path"))
    templates_dir = _as_str(data.get("templates_dir"))
    return BlueprintConfig(
        root=root,
        named_addresses=_named_addresses(_as_dict(data.get("named_addresses"))),
        named_type_tags={str(key): str(value) for key, value in _as_dict(data.get("named_type_tags")).items()},
        output_path=(root / output_path) if output_path else root / defaults.output_path,
        function_comments=_bool_or(data.get("function_comments"), defaults.function_comments),
        expanded_structs=_bool_or(data.get("expanded_structs"), defaults.expanded_structs),
        include_account_params=_bool_or(
            data.get("include_account_params"), defaults.include_account_params
        ),
        entry_functions_namespace=_as_str(data.get("entry_functions_namespace"))
        or defaults.entry_functions_namespace,
        view_functions_namespace=_as_str(data.get("view_functions_namespace"))
        or defaults.view_functions_namespace,
        separate_view_and_entry_functions_by_namespace=_bool_or(
            data.get("separate_view_and_entry_functions_by_namespace"),
            defaults.separate_view_and_entry_functions_by_namespace,
        ),
        sdk_path=_as_str(data.get("sdk_path")) or defaults.sdk_path,
        network=(_as_str(data.get("network")) or defaults.network).lower(),
        node_url=_as_str(data.get("node_url")),
        request_timeout=_as_float(data.get("request_timeout")) or defaults.request_timeout,
        max_workers=_as_int(data.get("max_workers")) or defaults.max_workers,
        templates_dir=(root / templates_dir) if templates_dir else None,
    )


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _normalise_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    normalised: Dict[str, Any] = {}
    for key, value in data.items():
        normalised[_ALIASES.get(str(key), str(key))] = value
    return normalised


def _named_addresses(data: Mapping[Any, Any]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for address, name in data.items():
        # YAML reads unquoted hex keys such as 0x1 as integers.
        text = hex(address) if isinstance(address, int) and not isinstance(address, bool) else str(address)
        try:
            result[canonical_address(text)] = str(name)
        except DescriptorError as exc:
            raise ConfigError(f"Invalid named address {text!r}: {exc}") from exc
    return result


def _as_dict(value: Any) -> Dict[Any, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _bool_or(value: Any, default: bool) -> bool:
    parsed = _as_bool(value)
    return default if parsed is None else parsed


__all__ = ["BlueprintConfig", "CONFIG_FILE_NAME", "load_config"]
