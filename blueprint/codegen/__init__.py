"""Classification, name recovery and TypeScript emission for Move functions."""

from __future__ import annotations

from .classifier import AnnotationSettings, assign_argument_names, classify, placeholder_names
from .emitter import EmitterSettings, FunctionDocument, build_function_document, emit
from .names import RecoveredSignature, recover_names
from .renderer import CodeRenderer

__all__ = [
    "AnnotationSettings",
    "CodeRenderer",
    "EmitterSettings",
    "FunctionDocument",
    "RecoveredSignature",
    "assign_argument_names",
    "build_function_document",
    "classify",
    "emit",
    "placeholder_names",
    "recover_names",
]
