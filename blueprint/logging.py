"""Logging utilities for blueprint commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, MutableMapping

_LOGGER_NAME = "blueprint"


class FunctionLogAdapter(logging.LoggerAdapter):
    """Prefixes records with the `address::module::function` being generated."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = self.extra or {}
        target = "::".join(
            str(part) for part in (extra.get("address"), extra.get("module"), extra.get("function")) if part
        )
        return (f"{target}: {msg}" if target else msg), kwargs


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the blueprint hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def function_logger(
    logger: logging.Logger, *, address: str, module: str, function: str | None = None
) -> FunctionLogAdapter:
    """Wrap `logger` so every message names the function it concerns."""
    return FunctionLogAdapter(logger, {"address": address, "module": module, "function": function})


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the blueprint logger with console output and an optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[blueprint] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["FunctionLogAdapter", "configure_logging", "function_logger", "get_logger"]
