"""Resolved Go types as reported by the resolver.

These mirror the shapes of `go/types` closely enough to re-render any type the
way `types.TypeString` does. Named types are shallow references (package +
name + type arguments); their underlying form only appears on the top-level
declaration that defines them, which keeps recursive types finite.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Package:
    path: str
    name: str


@dataclass(frozen=True)
class Basic:
    name: str  # "int", "string", "byte", ...


@dataclass(frozen=True)
class Named:
    name: str
    pkg: Package | None = None  # None for predeclared types such as `error`
    args: tuple["GoType", ...] = ()


@dataclass(frozen=True)
class Alias:
    """An alias reference. GoResolver reports aliases as their target type, so
    this only comes from hand-built resolvers."""

    name: str
    pkg: Package | None = None
    args: tuple["GoType", ...] = ()


@dataclass(frozen=True)
class TypeParam:
    name: str


@dataclass(frozen=True)
class Pointer:
    elem: "GoType"


@dataclass(frozen=True)
class Slice:
    elem: "GoType"


@dataclass(frozen=True)
class Array:
    len: int
    elem: "GoType"


@dataclass(frozen=True)
class Map:
    key: "GoType"
    elem: "GoType"


# Channel directions, spelled like go/types.ChanDir.
SEND_RECV = "both"
SEND_ONLY = "send"
RECV_ONLY = "recv"


@dataclass(frozen=True)
class Chan:
    dir: str
    elem: "GoType"


@dataclass(frozen=True)
class Var:
    name: str
    type: "GoType"


@dataclass(frozen=True)
class Signature:
    params: tuple[Var, ...] = ()
    results: tuple[Var, ...] = ()
    variadic: bool = False


@dataclass(frozen=True)
class Func:
    """A method: name plus its type (a Signature for anything well-formed)."""

    name: str
    type: "GoType"


@dataclass(frozen=True)
class Interface:
    # `methods` is the full method set in go/types order (sorted by method id),
    # including promoted methods from embedded interfaces. `explicit` and
    # `embeddeds` are what the declaration spells out; they drive rendering.
    methods: tuple[Func, ...] = ()
    explicit: tuple[Func, ...] = ()
    embeddeds: tuple["GoType", ...] = ()


@dataclass(frozen=True)
class Field:
    name: str
    type: "GoType"
    embedded: bool = False
    tag: str = ""


@dataclass(frozen=True)
class Struct:
    fields: tuple[Field, ...] = ()


@dataclass(frozen=True)
class Term:
    tilde: bool
    type: "GoType"


@dataclass(frozen=True)
class Union_:
    terms: tuple[Term, ...] = ()


GoType = Union[
    Basic,
    Named,
    Alias,
    TypeParam,
    Pointer,
    Slice,
    Array,
    Map,
    Chan,
    Signature,
    Interface,
    Struct,
    Union_,
]


def kind_of(t: object) -> str:
    """Short lowercase kind name used in error messages ("signature", "struct", ...)."""
    return type(t).__name__.rstrip("_").lower()
