"""Core data models shared across blueprint components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .typetags.tags import TypeTag, canonical_address


@dataclass(frozen=True)
class GenericTypeParam:
    """Ability constraints declared on one generic type parameter."""

    constraints: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FunctionAbi:
    """One exposed function from a module ABI."""

    name: str
    visibility: str
    is_entry: bool
    is_view: bool
    params: List[str]
    generic_type_params: List[GenericTypeParam] = field(default_factory=list)
    returns: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FunctionAbi":
        generics = [
            GenericTypeParam(constraints=[str(item) for item in _as_list(param.get("constraints"))])
            for param in _as_list(payload.get("generic_type_params"))
            if isinstance(param, Mapping)
        ]
        return cls(
            name=str(payload.get("name", "")),
            visibility=str(payload.get("visibility", "public")),
            is_entry=bool(payload.get("is_entry", False)),
            is_view=bool(payload.get("is_view", False)),
            params=[str(param) for param in _as_list(payload.get("params"))],
            generic_type_params=generics,
            returns=[str(item) for item in _as_list(payload.get("return"))],
        )


@dataclass(frozen=True)
class ModuleAbi:
    """A module's name, address and exposed functions."""

    address: str
    name: str
    exposed_functions: List[FunctionAbi] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ModuleAbi":
        functions = [
            FunctionAbi.from_dict(item)
            for item in _as_list(payload.get("exposed_functions"))
            if isinstance(item, Mapping)
        ]
        return cls(
            address=canonical_address(str(payload.get("address", "0x0"))),
            name=str(payload.get("name", "")),
            exposed_functions=functions,
        )

    @property
    def public_entry_functions(self) -> List[FunctionAbi]:
        return [func for func in self.exposed_functions if func.is_entry and func.visibility != "private"]

    @property
    def private_entry_functions(self) -> List[FunctionAbi]:
        return [func for func in self.exposed_functions if func.is_entry and func.visibility == "private"]

    @property
    def view_functions(self) -> List[FunctionAbi]:
        return [func for func in self.exposed_functions if func.is_view]


@dataclass(frozen=True)
class ModuleSource:
    """Decoded Move source text for one module of a published package."""

    package: str
    name: str
    source: str


@dataclass
class AnnotatedArgument:
    """A classified function parameter ready for emission.

    `chain` is the flattened chain after substitutions and drives
    serialization; `input_chain` keeps optional values intact for the
    caller-facing input type; `annotation` is the true on-chain type text.
    """

    position: int
    chain: List[TypeTag]
    input_chain: List[TypeTag]
    class_name: str
    annotation: str


@dataclass
class ClassifiedFunction:
    """Parameters of one function split into signer and regular buckets."""

    signer_arguments: List[AnnotatedArgument] = field(default_factory=list)
    function_arguments: List[AnnotatedArgument] = field(default_factory=list)
    generic_slots: List[str] = field(default_factory=list)


@dataclass
class GeneratedUnit:
    """Rendered code for one module."""

    address: str
    module_name: str
    code: str
    functions: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return []


def modules_from_payload(payload: Any) -> List[ModuleAbi]:
    """Extract module ABIs from the node's `/accounts/{address}/modules` response."""
    modules: List[ModuleAbi] = []
    for entry in _as_list(payload):
        if not isinstance(entry, Mapping):
            continue
        abi: Optional[Dict[str, Any]] = entry.get("abi") if "abi" in entry else dict(entry)
        if isinstance(abi, Mapping) and abi.get("name"):
            modules.append(ModuleAbi.from_dict(abi))
    return modules


__all__ = [
    "AnnotatedArgument",
    "ClassifiedFunction",
    "FunctionAbi",
    "GeneratedUnit",
    "GenericTypeParam",
    "ModuleAbi",
    "ModuleSource",
    "modules_from_payload",
]
