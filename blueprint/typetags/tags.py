"""Canonical type-tag model for Move values and predicates over it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..errors import DescriptorError

CORE_ADDRESS = "0x1"
ZERO_ADDRESS = "0x0"


class TypeKind(str, Enum):
    """Variant tag of a `TypeTag`."""

    BOOL = "Bool"
    U8 = "U8"
    U16 = "U16"
    U32 = "U32"
    U64 = "U64"
    U128 = "U128"
    U256 = "U256"
    ADDRESS = "AccountAddress"
    STRING = "String"
    VECTOR = "Vector"
    OPTION = "Option"
    OBJECT = "Object"
    STRUCT = "Struct"
    SIGNER = "Signer"
    GENERIC = "Generic"
    REFERENCE = "Reference"


PRIMITIVE_NAMES: dict[str, TypeKind] = {
    "bool": TypeKind.BOOL,
    "u8": TypeKind.U8,
    "u16": TypeKind.U16,
    "u32": TypeKind.U32,
    "u64": TypeKind.U64,
    "u128": TypeKind.U128,
    "u256": TypeKind.U256,
    "address": TypeKind.ADDRESS,
    "signer": TypeKind.SIGNER,
}

_PRIMITIVE_TEXT = {kind: name for name, kind in PRIMITIVE_NAMES.items()}

# (module, name) of the framework structs with first-class treatment.
BUILTIN_STRUCTS: dict[tuple[str, str], TypeKind] = {
    ("string", "String"): TypeKind.STRING,
    ("option", "Option"): TypeKind.OPTION,
    ("object", "Object"): TypeKind.OBJECT,
}

WIDE_INTEGER_KINDS = frozenset({TypeKind.U64, TypeKind.U128, TypeKind.U256})


@dataclass(frozen=True)
class TypeTag:
    """Immutable descriptor of one Move type.

    Struct-backed kinds (`STRING`, `OPTION`, `OBJECT`, `STRUCT`) keep their
    address, module and name so the canonical text can be reproduced.
    `REFERENCE` wraps exactly one referenced type; `GENERIC` carries its index.
    """

    kind: TypeKind
    type_args: Tuple["TypeTag", ...] = ()
    address: Optional[str] = None
    module: Optional[str] = None
    name: Optional[str] = None
    index: Optional[int] = None
    mutable: bool = False

    @property
    def value(self) -> "TypeTag":
        """The single structural child of a vector, option, object or reference."""
        if not self.type_args:
            raise DescriptorError(f"{self} has no inner type", signature=str(self))
        return self.type_args[0]

    def __str__(self) -> str:
        kind = self.kind
        if kind in _PRIMITIVE_TEXT:
            return _PRIMITIVE_TEXT[kind]
        if kind is TypeKind.VECTOR:
            return f"vector<{self.value}>"
        if kind is TypeKind.GENERIC:
            return f"T{self.index}"
        if kind is TypeKind.REFERENCE:
            prefix = "&mut " if self.mutable else "&"
            return f"{prefix}{self.value}"
        base = f"{self.address}::{self.module}::{self.name}"
        if self.type_args:
            return f"{base}<{', '.join(str(arg) for arg in self.type_args)}>"
        return base


def primitive(kind: TypeKind) -> TypeTag:
    if kind not in _PRIMITIVE_TEXT:
        raise ValueError(f"{kind.value} is not a primitive kind")
    return TypeTag(kind)


def address_tag() -> TypeTag:
    return TypeTag(TypeKind.ADDRESS)


def signer_tag() -> TypeTag:
    return TypeTag(TypeKind.SIGNER)


def vector_of(inner: TypeTag) -> TypeTag:
    return TypeTag(TypeKind.VECTOR, (inner,))


def generic(index: int) -> TypeTag:
    return TypeTag(TypeKind.GENERIC, index=index)


def reference_to(inner: TypeTag, *, mutable: bool = False) -> TypeTag:
    return TypeTag(TypeKind.REFERENCE, (inner,), mutable=mutable)


def string_tag() -> TypeTag:
    return TypeTag(TypeKind.STRING, address=CORE_ADDRESS, module="string", name="String")


def option_of(inner: TypeTag) -> TypeTag:
    return TypeTag(TypeKind.OPTION, (inner,), address=CORE_ADDRESS, module="option", name="Option")


def object_of(inner: TypeTag) -> TypeTag:
    return TypeTag(TypeKind.OBJECT, (inner,), address=CORE_ADDRESS, module="object", name="Object")


def struct_tag(address: str, module: str, name: str, type_args: Sequence[TypeTag] = ()) -> TypeTag:
    """Build a struct tag, promoting the framework string/option/object structs."""
    canonical = canonical_address(address)
    kind = TypeKind.STRUCT
    if canonical == CORE_ADDRESS:
        kind = BUILTIN_STRUCTS.get((module, name), TypeKind.STRUCT)
    return TypeTag(kind, tuple(type_args), address=canonical, module=module, name=name)


def canonical_address(value: str) -> str:
    """Normalise an account address the way the Aptos SDK prints it.

    Special addresses (0x0 through 0xf) keep their short form; every other
    address is zero-padded to 64 hex digits.
    """
    text = value.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if not text or len(text) > 64 or any(char not in "0123456789abcdef" for char in text):
        raise DescriptorError(f"Invalid account address: {value!r}", signature=value)
    number = int(text, 16)
    if number < 16:
        return f"0x{number:x}"
    return "0x" + text.zfill(64)


def kind_of(tag: TypeTag) -> TypeKind:
    return tag.kind


def is_vector(tag: TypeTag) -> bool:
    return tag.kind is TypeKind.VECTOR


def is_option(tag: TypeTag) -> bool:
    return tag.kind is TypeKind.OPTION


def is_object(tag: TypeTag) -> bool:
    return tag.kind is TypeKind.OBJECT


def is_string(tag: TypeTag) -> bool:
    return tag.kind is TypeKind.STRING


def is_generic(tag: TypeTag) -> bool:
    return tag.kind is TypeKind.GENERIC


def is_signer(tag: TypeTag) -> bool:
    return tag.kind is TypeKind.SIGNER


def is_reference(tag: TypeTag) -> bool:
    return tag.kind is TypeKind.REFERENCE


def is_signer_reference(tag: TypeTag) -> bool:
    return is_reference(tag) and is_signer(tag.value)


def is_u8(tag: TypeTag) -> bool:
    return tag.kind is TypeKind.U8


def is_byte_vector(chain: Sequence[TypeTag]) -> bool:
    """True when a flattened chain is exactly `vector<u8>` at its head."""
    return len(chain) >= 2 and is_vector(chain[0]) and is_u8(chain[1])


__all__ = [
    "BUILTIN_STRUCTS",
    "CORE_ADDRESS",
    "PRIMITIVE_NAMES",
    "TypeKind",
    "TypeTag",
    "WIDE_INTEGER_KINDS",
    "ZERO_ADDRESS",
    "address_tag",
    "canonical_address",
    "generic",
    "is_byte_vector",
    "is_generic",
    "is_object",
    "is_option",
    "is_reference",
    "is_signer",
    "is_signer_reference",
    "is_string",
    "is_u8",
    "is_vector",
    "kind_of",
    "object_of",
    "option_of",
    "primitive",
    "reference_to",
    "signer_tag",
    "string_tag",
    "struct_tag",
    "vector_of",
]
