"""Typed TypeScript client bindings generated from Move module ABIs."""

from __future__ import annotations

from .config import BlueprintConfig, load_config
from .models import FunctionAbi, GeneratedUnit, ModuleAbi
from .orchestrator import GenerationReport, Orchestrator

__version__ = "0.1.0"

__all__ = [
    "BlueprintConfig",
    "FunctionAbi",
    "GeneratedUnit",
    "GenerationReport",
    "ModuleAbi",
    "Orchestrator",
    "__version__",
    "load_config",
]
