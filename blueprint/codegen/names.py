"""Recover parameter names from Move source, which ABIs do not carry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..errors import NameRecoveryError


@dataclass(frozen=True)
class RecoveredArgument:
    name: str
    type_text: str


@dataclass(frozen=True)
class RecoveredSignature:
    """Generic clause and `name: type` pairs of one function declaration."""

    generic_clause: Optional[str]
    arguments: List[RecoveredArgument] = field(default_factory=list)

    @property
    def argument_names(self) -> List[str]:
        return [argument.name for argument in self.arguments]


@dataclass(frozen=True)
class _Token:
    text: str
    start: int
    end: int


def remove_comments(source: str) -> str:
    """Blank out `//` and `/* */` comments, leaving string literals untouched.

    Comment characters are replaced with spaces (newlines kept) so offsets
    into the returned text match the input. An unterminated block comment
    runs to the end of the text.
    """
    chars = list(source)
    index = 0
    length = len(source)
    while index < length:
        char = source[index]
        if char == '"':
            index = _skip_string(source, index)
            continue
        if source.startswith("//", index):
            end = source.find("\n", index)
            end = length if end == -1 else end
            _blank(chars, index, end)
            index = end
            continue
        if source.startswith("/*", index):
            end = source.find("*/", index + 2)
            end = length if end == -1 else end + 2
            _blank(chars, index, end)
            index = end
            continue
        index += 1
    return "".join(chars)


def _blank(chars: List[str], start: int, end: int) -> None:
    for position in range(start, end):
        if chars[position] != "\n":
            chars[position] = " "


def _skip_string(source: str, start: int) -> int:
    index = start + 1
    while index < len(source):
        if source[index] == "\\":
            index += 2
            continue
        if source[index] == '"':
            return index + 1
        index += 1
    return len(source)


def tokenize(source: str) -> List[_Token]:
    tokens: List[_Token] = []
    index = 0
    length = len(source)
    while index < length:
        char = source[index]
        if char.isspace():
            index += 1
            continue
        if char in "bx" and source.startswith('"', index + 1):
            end = _skip_string(source, index + 1)
            tokens.append(_Token(source[index:end], index, end))
            index = end
            continue
        if char == '"':
            end = _skip_string(source, index)
            tokens.append(_Token(source[index:end], index, end))
            index = end
            continue
        if char.isalnum() or char == "_":
            end = index
            while end < length and (source[end].isalnum() or source[end] == "_"):
                end += 1
            tokens.append(_Token(source[index:end], index, end))
            index = end
            continue
        if source.startswith("::", index):
            tokens.append(_Token("::", index, index + 2))
            index += 2
            continue
        tokens.append(_Token(char, index, index + 1))
        index += 1
    return tokens


def recover_names(function_name: str, source: str) -> RecoveredSignature:
    """Locate `fun <function_name>` in `source` and read its parameter list.

    The first declaration wins when the name appears more than once.
    """
    text = remove_comments(source)
    tokens = tokenize(text)
    for index in range(len(tokens) - 1):
        if tokens[index].text == "fun" and tokens[index + 1].text == function_name:
            return _read_signature(text, tokens, index + 2, function_name)
    raise NameRecoveryError(
        f"Could not find function signature for {function_name}", function_name=function_name
    )


def _read_signature(
    text: str, tokens: Sequence[_Token], index: int, function_name: str
) -> RecoveredSignature:
    generic_clause: Optional[str] = None
    if index < len(tokens) and tokens[index].text == "<":
        close = _matching(tokens, index, "<", ">")
        generic_clause = _squash(text[tokens[index].end : tokens[close].start])
        index = close + 1
    if index >= len(tokens) or tokens[index].text != "(":
        raise NameRecoveryError(
            f"Malformed declaration of {function_name}: expected a parameter list",
            function_name=function_name,
        )
    close = _matching(tokens, index, "(", ")")
    arguments: List[RecoveredArgument] = []
    for start, end in _split_top_level(tokens, index + 1, close):
        argument = _read_argument(text, tokens, start, end)
        if argument is not None:
            arguments.append(argument)
    return RecoveredSignature(generic_clause=generic_clause or None, arguments=arguments)


def _matching(tokens: Sequence[_Token], index: int, opening: str, closing: str) -> int:
    depth = 0
    for position in range(index, len(tokens)):
        text = tokens[position].text
        if text == opening:
            depth += 1
        elif text == closing:
            depth -= 1
            if depth == 0:
                return position
    raise NameRecoveryError(f"Unbalanced {opening}{closing} in declaration")


def _split_top_level(tokens: Sequence[_Token], start: int, end: int) -> List[tuple[int, int]]:
    pieces: List[tuple[int, int]] = []
    depth = 0
    piece_start = start
    for position in range(start, end):
        text = tokens[position].text
        if text in ("<", "("):
            depth += 1
        elif text in (">", ")"):
            depth -= 1
        elif text == "," and depth == 0:
            pieces.append((piece_start, position))
            piece_start = position + 1
    pieces.append((piece_start, end))
    return [(first, last) for first, last in pieces if first < last]


def _read_argument(
    text: str, tokens: Sequence[_Token], start: int, end: int
) -> Optional[RecoveredArgument]:
    colon = next((position for position in range(start, end) if tokens[position].text == ":"), None)
    if colon is None or colon == start or colon + 1 >= end:
        return None
    name = _squash(text[tokens[start].start : tokens[colon - 1].end])
    type_text = _squash(text[tokens[colon + 1].start : tokens[end - 1].end])
    if not name or not type_text or "//" in name or "//" in type_text:
        return None
    return RecoveredArgument(name=name, type_text=type_text)


def _squash(value: str) -> str:
    return " ".join(value.split())


__all__ = ["RecoveredArgument", "RecoveredSignature", "recover_names", "remove_comments", "tokenize"]
