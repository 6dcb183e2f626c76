"""wrappergen: describe the interfaces of a Go package for forwarding-wrapper generation."""

from __future__ import annotations

from . import errors
from .config import GeneratorConfig
from .generator import WrapperGenerator, generate
from .model import GenerationResult, InterfaceDecl, Method

__all__ = [
    "GenerationResult",
    "GeneratorConfig",
    "InterfaceDecl",
    "Method",
    "WrapperGenerator",
    "errors",
    "generate",
]
