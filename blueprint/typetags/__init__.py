"""Move type-tag model, parser and flattener."""

from __future__ import annotations

from .flatten import flatten, truncated_type_tag_string
from .parser import parse_type_tag
from .tags import (
    TypeKind,
    TypeTag,
    canonical_address,
    is_byte_vector,
    is_generic,
    is_object,
    is_option,
    is_signer,
    is_signer_reference,
    is_vector,
    kind_of,
)

__all__ = [
    "TypeKind",
    "TypeTag",
    "canonical_address",
    "flatten",
    "is_byte_vector",
    "is_generic",
    "is_object",
    "is_option",
    "is_signer",
    "is_signer_reference",
    "is_vector",
    "kind_of",
    "parse_type_tag",
    "truncated_type_tag_string",
]
