"""Mappings from type kinds to TypeScript classes, input types and coercions."""

from __future__ import annotations

from typing import Dict, Sequence

from ..errors import EmissionError
from ..typetags.tags import TypeKind, TypeTag, address_tag, is_byte_vector

_CLASS_NAMES: Dict[TypeKind, str] = {
    TypeKind.BOOL: "Bool",
    TypeKind.U8: "U8",
    TypeKind.U16: "U16",
    TypeKind.U32: "U32",
    TypeKind.U64: "U64",
    TypeKind.U128: "U128",
    TypeKind.U256: "U256",
    TypeKind.ADDRESS: "AccountAddress",
    TypeKind.STRING: "MoveString",
    TypeKind.VECTOR: "MoveVector",
    TypeKind.OPTION: "MoveOption",
    TypeKind.OBJECT: "MoveObject",
    TypeKind.SIGNER: "Signer",
    TypeKind.GENERIC: "EntryFunctionArgumentTypes",
}

ENTRY_INPUT_TYPES: Dict[TypeKind, str] = {
    TypeKind.BOOL: "boolean",
    TypeKind.U8: "Uint8",
    TypeKind.U16: "Uint16",
    TypeKind.U32: "Uint32",
    TypeKind.U64: "Uint64",
    TypeKind.U128: "Uint128",
    TypeKind.U256: "Uint256",
    TypeKind.ADDRESS: "AccountAddressInput",
    TypeKind.STRING: "string",
    TypeKind.VECTOR: "Array",
    TypeKind.OPTION: "Option",
    TypeKind.OBJECT: "ObjectAddress",
    TypeKind.SIGNER: "Signer",
    TypeKind.GENERIC: "EntryFunctionArgumentTypes",
}

# Wide integers and addresses travel as strings in view requests.
VIEW_INPUT_TYPES: Dict[TypeKind, str] = {
    **ENTRY_INPUT_TYPES,
    TypeKind.U64: "string",
    TypeKind.U128: "string",
    TypeKind.U256: "string",
    TypeKind.ADDRESS: "string",
    TypeKind.GENERIC: "InputTypes",
}

_VIEW_RETURN_TYPES: Dict[TypeKind, str] = {
    TypeKind.BOOL: "boolean",
    TypeKind.U8: "number",
    TypeKind.U16: "number",
    TypeKind.U32: "number",
    TypeKind.U64: "string",
    TypeKind.U128: "string",
    TypeKind.U256: "string",
    TypeKind.ADDRESS: "string",
    TypeKind.STRING: "string",
    TypeKind.OBJECT: "{ inner: string }",
    TypeKind.GENERIC: "MoveValue",
    TypeKind.STRUCT: "MoveValue",
}

HEX_INPUT_TYPE = "HexInput"


def class_name(kind: TypeKind) -> str:
    """Serialization class for a single kind; resource structs have none."""
    try:
        return _CLASS_NAMES[kind]
    except KeyError:
        raise EmissionError(f"Cannot convert {kind.value} to a BCS class") from None


def class_names_string(chain: Sequence[TypeTag]) -> str:
    """Nest class names outward to inward, e.g. `MoveVector<MoveOption<U64>>`."""
    if not chain:
        return ""
    rendered = class_name(chain[-1].kind)
    for tag in reversed(chain[:-1]):
        rendered = f"{class_name(tag.kind)}<{rendered}>"
    return rendered


def input_type_string(chain: Sequence[TypeTag], *, view: bool) -> str:
    """Type a caller passes for an argument with the given flattened chain."""
    mapping = VIEW_INPUT_TYPES if view else ENTRY_INPUT_TYPES
    head = chain[0]
    kind = head.kind
    if kind is TypeKind.VECTOR and is_byte_vector(chain):
        return HEX_INPUT_TYPE
    if kind in (TypeKind.VECTOR, TypeKind.OPTION):
        return f"{mapping[kind]}<{input_type_string(chain[1:], view=view)}>"
    if kind in mapping:
        return mapping[kind]
    raise EmissionError(f"No input type for {head} ({kind.value})")


def number_to_letter(number: int) -> str:
    if number < 1 or number > 26:
        raise ValueError("Number out of range. Please provide a number between 1 and 26.")
    return chr(64 + number)


def _lambda_name(depth: int) -> str:
    return f"arg{number_to_letter(depth)}"


def _as_address(tag: TypeTag) -> TypeTag:
    # Objects are passed around by their address.
    return address_tag() if tag.kind is TypeKind.OBJECT else tag


def entry_transform(expression: str, chain: Sequence[TypeTag], depth: int = 0) -> str:
    """Expression coercing a raw constructor input into its BCS class."""
    head = _as_address(chain[0])
    kind = head.kind
    if kind is TypeKind.VECTOR:
        if is_byte_vector(chain):
            return f"MoveVector.U8({expression})"
        inner = _lambda_name(depth + 1)
        return f"new MoveVector({expression}.map({inner} => {entry_transform(inner, chain[1:], depth + 1)}))"
    if kind is TypeKind.OPTION:
        inner = _lambda_name(depth + 1)
        value = entry_transform(inner, chain[1:], depth + 1)
        return f"new MoveOption({expression}.map({inner} => {value})[0])"
    if kind is TypeKind.ADDRESS:
        return f"AccountAddress.fromRelaxed({expression})"
    if kind is TypeKind.GENERIC:
        return expression
    if kind in (TypeKind.STRUCT, TypeKind.SIGNER, TypeKind.REFERENCE):
        raise EmissionError(f"Cannot serialize {chain[0]} as an entry function argument")
    return f"new {class_name(kind)}({expression})"


def view_transform(expression: str, chain: Sequence[TypeTag], depth: int = 0) -> str:
    """Expression coercing a raw constructor input into its view-request JSON form."""
    head = _as_address(chain[0])
    kind = head.kind
    if kind is TypeKind.VECTOR and is_byte_vector(chain):
        return f"Hex.fromHexInput({expression}).toString()"
    if kind in (TypeKind.VECTOR, TypeKind.OPTION):
        inner = _lambda_name(depth + 1)
        return f"{expression}.map({inner} => {view_transform(inner, chain[1:], depth + 1)})"
    if kind is TypeKind.ADDRESS:
        return f"AccountAddress.fromRelaxed({expression}).toString()"
    if kind in (TypeKind.U64, TypeKind.U128, TypeKind.U256):
        return f"BigInt({expression}).toString()"
    if kind in (TypeKind.BOOL, TypeKind.U8, TypeKind.U16, TypeKind.U32, TypeKind.STRING, TypeKind.GENERIC):
        return expression
    raise EmissionError(f"Cannot pass {chain[0]} to a view function")


def view_return_type(tag: TypeTag) -> str:
    """JSON shape the node returns for one view-function result."""
    kind = tag.kind
    if kind is TypeKind.VECTOR:
        if tag.value.kind is TypeKind.U8:
            return "string"
        return f"Array<{view_return_type(tag.value)}>"
    if kind is TypeKind.OPTION:
        return f"{{ vec: [{view_return_type(tag.value)}] | [] }}"
    return _VIEW_RETURN_TYPES.get(kind, "MoveValue")


def to_pascal_case(value: str) -> str:
    return "".join(part[:1].upper() + part[1:].lower() for part in value.split("_") if part)


def truncate_address_for_file_name(address: str) -> str:
    return f"Module_0x{address[2:8]}"


__all__ = [
    "ENTRY_INPUT_TYPES",
    "HEX_INPUT_TYPE",
    "VIEW_INPUT_TYPES",
    "class_name",
    "class_names_string",
    "entry_transform",
    "input_type_string",
    "number_to_letter",
    "to_pascal_case",
    "truncate_address_for_file_name",
    "view_return_type",
    "view_transform",
]
