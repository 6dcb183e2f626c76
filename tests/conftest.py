from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import pytest

from wrappergen.gotypes import Func, Interface, Named, Package
from wrappergen.model import Module, SyntaxTree, TypeName, TypeSpec


@dataclass
class StaticResolver:
    """Resolver double that hands back a prebuilt Module and records calls."""

    module: Module
    calls: list[str] = field(default_factory=list)

    def resolve(self, module_path: str) -> Module:
        self.calls.append(module_path)
        return self.module


@pytest.fixture
def make_module() -> Callable[..., Module]:
    """Build a Module from {filename: {decl name: underlying type or None}}.

    None declares a type spec whose identifier has no resolved object.
    """

    def build(name: str, files: dict[str, dict[str, Any]], *, path: str | None = None) -> Module:
        pkg = Package(path=path or f"example.com/{name}", name=name)
        syntax: list[SyntaxTree] = []
        defs: dict[str, TypeName] = {}
        for filename, decls in files.items():
            specs: list[TypeSpec] = []
            for i, (decl_name, underlying) in enumerate(decls.items()):
                ident = f"{filename}:{i + 1}:6"
                specs.append(TypeSpec(name=decl_name, ident=ident))
                if underlying is not None:
                    defs[ident] = TypeName(
                        name=decl_name,
                        type=Named(name=decl_name, pkg=pkg),
                        underlying=underlying,
                    )
            syntax.append(SyntaxTree(filename=filename, type_specs=tuple(specs)))
        return Module(name=name, path=pkg.path, syntax=tuple(syntax), defs=defs)

    return build


@pytest.fixture
def make_interface() -> Callable[..., Interface]:
    def build(*methods: Func) -> Interface:
        ordered = tuple(sorted(methods, key=lambda m: m.name))
        return Interface(methods=ordered, explicit=tuple(methods))

    return build


@pytest.fixture
def static_resolver() -> Callable[[Module], StaticResolver]:
    return StaticResolver


@pytest.fixture
def context_pkg() -> Package:
    return Package(path="context", name="context")
