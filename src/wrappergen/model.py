from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .gotypes import GoType, Interface


@dataclass(frozen=True)
class TypeSpec:
    name: str
    ident: str  # key into Module.defs (the identifier's source position)


@dataclass(frozen=True)
class SyntaxTree:
    filename: str
    type_specs: tuple[TypeSpec, ...] = ()


@dataclass(frozen=True)
class TypeName:
    """Resolved object for a declared type name."""

    name: str
    type: GoType
    underlying: GoType


@dataclass(frozen=True)
class Module:
    name: str
    path: str
    syntax: tuple[SyntaxTree, ...] = ()
    defs: Mapping[str, TypeName] = field(default_factory=dict)


@dataclass(frozen=True)
class InterfaceHandle:
    """A discovered interface declaration whose methods have not been rendered yet."""

    name: str
    type: Interface
    filename: str


@dataclass(frozen=True)
class Method:
    name: str
    params: str
    args: str
    returns: str  # the return-type list; `return` is reserved in Python


@dataclass(frozen=True)
class InterfaceDecl:
    name: str
    methods: tuple[Method, ...] = ()


@dataclass(frozen=True)
class GenerationResult:
    package_name: str
    interfaces: tuple[InterfaceDecl, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.package_name,
            "interfaces": [
                {
                    "name": iface.name,
                    "methods": [
                        {"name": m.name, "params": m.params, "args": m.args, "return": m.returns}
                        for m in iface.methods
                    ],
                }
                for iface in self.interfaces
            ],
        }
