"""Flattening of nested type tags and documentation annotations."""

from __future__ import annotations

from typing import List, Mapping

from ..errors import DescriptorError
from .tags import TypeKind, TypeTag, is_signer


def flatten(tag: TypeTag) -> List[TypeTag]:
    """Expand a type tag into a chain ordered from outermost wrapper to innermost leaf.

    `vector`, `Option` and `Object` contribute themselves and then their single
    type argument. Strings and arbitrary resource structs terminate the chain,
    as do primitives, signers and generic placeholders. The only reference
    allowed is a reference to `signer`.
    """
    kind = tag.kind
    if kind is TypeKind.VECTOR:
        return [tag, *flatten(tag.value)]
    if kind in (TypeKind.OPTION, TypeKind.OBJECT):
        return [tag, *flatten(tag.value)]
    if kind is TypeKind.REFERENCE:
        if is_signer(tag.value):
            return [tag]
        raise DescriptorError(f"Invalid reference argument: {tag}", signature=str(tag))
    return [tag]


def truncated_type_tag_string(
    tag: TypeTag,
    *,
    named_addresses: Mapping[str, str] | None = None,
    named_type_tags: Mapping[str, str] | None = None,
) -> str:
    """Render `tag` for documentation, abbreviating framework and aliased structs."""
    addresses = named_addresses or {}
    type_tags = named_type_tags or {}

    def render(inner: TypeTag) -> str:
        return truncated_type_tag_string(inner, named_addresses=addresses, named_type_tags=type_tags)

    kind = tag.kind
    if kind is TypeKind.VECTOR:
        return f"vector<{render(tag.value)}>"
    if kind is TypeKind.OPTION:
        return f"Option<{', '.join(render(arg) for arg in tag.type_args)}>"
    if kind is TypeKind.OBJECT:
        return f"Object<{', '.join(render(arg) for arg in tag.type_args)}>"
    if kind is TypeKind.STRING:
        return "String"
    if kind is TypeKind.STRUCT:
        full = str(tag)
        if full in type_tags:
            return type_tags[full]
        if tag.address in addresses:
            return f"{addresses[tag.address]}::{tag.module}::{tag.name}"
    return str(tag)


__all__ = ["flatten", "truncated_type_tag_string"]
