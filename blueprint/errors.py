"""Error taxonomy for blueprint generation runs."""

from __future__ import annotations


class BlueprintError(RuntimeError):
    """Base class for errors that abort generation of a single function."""


class DescriptorError(BlueprintError):
    """Raised for unrecognised, malformed or invalid type signatures."""

    def __init__(self, message: str, *, signature: str | None = None) -> None:
        super().__init__(message)
        self.signature = signature


class TypeTagParseError(DescriptorError):
    """Raised when a textual type tag cannot be parsed."""


class ClassificationError(BlueprintError):
    """Raised when classified arguments cannot be wired to their names."""


class NameRecoveryError(BlueprintError):
    """Raised when a function signature cannot be located in module source."""

    def __init__(self, message: str, *, function_name: str | None = None) -> None:
        super().__init__(message)
        self.function_name = function_name


class EmissionError(BlueprintError):
    """Raised when a type has no valid serialization form in generated code."""

    def __init__(self, message: str, *, signature: str | None = None) -> None:
        super().__init__(message)
        self.signature = signature


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


class ChainClientError(RuntimeError):
    """Raised when the node REST API cannot be reached or returns bad data."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


__all__ = [
    "BlueprintError",
    "ChainClientError",
    "ClassificationError",
    "ConfigError",
    "DescriptorError",
    "EmissionError",
    "NameRecoveryError",
    "TypeTagParseError",
]
