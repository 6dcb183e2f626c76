"""Module resolution: turn a Go package pattern into a resolved Module."""

from __future__ import annotations

from .decode import decode_module, decode_type
from .resolve import GoResolver, ModuleResolver

__all__ = [
    "GoResolver",
    "ModuleResolver",
    "decode_module",
    "decode_type",
]
