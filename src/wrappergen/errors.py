"""Domain-specific errors for wrappergen."""

from __future__ import annotations


class WrapperGenError(Exception):
    """Base error for wrappergen."""


class ModuleLoadError(WrapperGenError):
    """Raised when the resolver cannot produce a valid module (load failure or compile errors)."""

    def __init__(self, module_path: str, diagnostics: list[str] | None = None, *, hint: str | None = None):
        self.module_path = module_path
        self.diagnostics = list(diagnostics or [])
        msg = f"failed to load package {module_path}"
        if self.diagnostics:
            msg += "\n" + "\n".join(self.diagnostics)
        if hint:
            msg += "\n\n" + hint
        super().__init__(msg)


class SignatureResolutionError(WrapperGenError):
    """Raised when an interface method's type is not a callable signature."""

    def __init__(self, interface: str, method: str, kind: str):
        self.interface = interface
        self.method = method
        self.kind = kind
        super().__init__(f"invalid method type: {interface}.{method} resolves to {kind}, not a signature")
