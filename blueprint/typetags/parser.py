"""Recursive-descent parser for textual Move type tags found in ABIs."""

from __future__ import annotations

import re
from typing import List

from ..errors import DescriptorError, TypeTagParseError
from .tags import (
    PRIMITIVE_NAMES,
    TypeKind,
    TypeTag,
    generic,
    primitive,
    reference_to,
    struct_tag,
    vector_of,
)

_TOKEN_PATTERN = re.compile(r"\s*(::|&|<|>|,|[A-Za-z0-9_]+)")
_GENERIC_PATTERN = re.compile(r"^T(\d+)$")
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def parse_type_tag(text: str, *, allow_generics: bool = True) -> TypeTag:
    """Parse `text` such as `0x1::option::Option<vector<u8>>` into a `TypeTag`."""
    parser = _TypeTagParser(text, allow_generics=allow_generics)
    return parser.parse()


def _tokenize(text: str) -> List[str]:
    tokens: List[str] = []
    position = 0
    stripped_end = len(text.rstrip())
    while position < stripped_end:
        match = _TOKEN_PATTERN.match(text, position)
        if match is None:
            raise TypeTagParseError(
                f"Unexpected character {text[position:].strip()[:1]!r} in type tag {text!r}",
                signature=text,
            )
        tokens.append(match.group(1))
        position = match.end()
    return tokens


class _TypeTagParser:
    def __init__(self, text: str, *, allow_generics: bool) -> None:
        self.text = text
        self.allow_generics = allow_generics
        self.tokens = _tokenize(text)
        self.position = 0

    def parse(self) -> TypeTag:
        if not self.tokens:
            raise TypeTagParseError("Empty type tag", signature=self.text)
        tag = self._parse_type()
        if self.position != len(self.tokens):
            self._fail(f"unexpected trailing token {self.tokens[self.position]!r}")
        return tag

    def _parse_type(self) -> TypeTag:
        token = self._next()
        if token == "&":
            mutable = self._peek() == "mut"
            if mutable:
                self.position += 1
            return reference_to(self._parse_type(), mutable=mutable)
        if token == "vector":
            self._expect("<")
            inner = self._parse_type()
            self._expect(">")
            return vector_of(inner)
        if token in PRIMITIVE_NAMES:
            return primitive(PRIMITIVE_NAMES[token])
        generic_match = _GENERIC_PATTERN.match(token)
        if generic_match and self._peek() != "::":
            if not self.allow_generics:
                self._fail(f"generic type parameter {token} is not allowed here")
            return generic(int(generic_match.group(1)))
        if self._peek() == "::":
            return self._parse_struct(token)
        self._fail(f"unknown type {token!r}")
        raise AssertionError("unreachable")  # pragma: no cover

    def _parse_struct(self, address: str) -> TypeTag:
        self._expect("::")
        module = self._identifier()
        self._expect("::")
        name = self._identifier()
        type_args: List[TypeTag] = []
        if self._peek() == "<":
            self.position += 1
            type_args.append(self._parse_type())
            while self._peek() == ",":
                self.position += 1
                type_args.append(self._parse_type())
            self._expect(">")
        try:
            tag = struct_tag(address, module, name, type_args)
        except DescriptorError as exc:
            raise TypeTagParseError(str(exc), signature=self.text) from exc
        if tag.kind in {TypeKind.OPTION, TypeKind.OBJECT} and len(tag.type_args) != 1:
            self._fail(f"{module}::{name} takes exactly one type argument")
        if tag.kind is TypeKind.STRING and tag.type_args:
            self._fail("string::String takes no type arguments")
        return tag

    def _identifier(self) -> str:
        token = self._next()
        if not _IDENTIFIER_PATTERN.match(token):
            self._fail(f"expected identifier, found {token!r}")
        return token

    def _expect(self, expected: str) -> None:
        token = self._next()
        if token != expected:
            self._fail(f"expected {expected!r}, found {token!r}")

    def _peek(self) -> str | None:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _next(self) -> str:
        if self.position >= len(self.tokens):
            self._fail("unexpected end of input")
        token = self.tokens[self.position]
        self.position += 1
        return token

    def _fail(self, reason: str) -> None:
        raise TypeTagParseError(f"Invalid type tag {self.text!r}: {reason}", signature=self.text)


__all__ = ["parse_type_tag"]
