from __future__ import annotations

from typing import Any

from ..errors import ModuleLoadError
from ..gotypes import (
    RECV_ONLY,
    SEND_ONLY,
    SEND_RECV,
    Alias,
    Array,
    Basic,
    Chan,
    Field,
    Func,
    GoType,
    Interface,
    Map,
    Named,
    Package,
    Pointer,
    Signature,
    Slice,
    Struct,
    Term,
    TypeParam,
    Union_,
    Var,
)
from ..model import Module, SyntaxTree, TypeName, TypeSpec


def _str(obj: dict[str, Any], key: str, *, required: bool = True) -> str:
    v = obj.get(key)
    if v is None and not required:
        return ""
    if not isinstance(v, str):
        raise ValueError(f"expected string {key!r}, got {v!r}")
    return v


def _list(obj: dict[str, Any], key: str) -> list[Any]:
    v = obj.get(key)
    if v is None:
        return []
    if not isinstance(v, list):
        raise ValueError(f"expected list {key!r}, got {type(v).__name__}")
    return v


def _pkg(v: Any) -> Package | None:
    if v is None:
        return None
    if not isinstance(v, dict):
        raise ValueError(f"expected package object, got {v!r}")
    return Package(path=_str(v, "path"), name=_str(v, "name"))


def _vars(items: list[Any]) -> tuple[Var, ...]:
    return tuple(Var(name=_str(it, "name", required=False), type=decode_type(it.get("type"))) for it in items)


def _funcs(items: list[Any]) -> tuple[Func, ...]:
    return tuple(Func(name=_str(it, "name"), type=decode_type(it.get("type"))) for it in items)


def decode_type(obj: Any) -> GoType:
    """Decode one JSON-encoded type produced by the resolver helper."""
    if not isinstance(obj, dict):
        raise ValueError(f"expected type object, got {obj!r}")
    kind = obj.get("kind")
    if kind == "basic":
        return Basic(name=_str(obj, "name"))
    if kind in ("named", "alias"):
        cls = Named if kind == "named" else Alias
        return cls(
            name=_str(obj, "name"),
            pkg=_pkg(obj.get("pkg")),
            args=tuple(decode_type(a) for a in _list(obj, "args")),
        )
    if kind == "typeparam":
        return TypeParam(name=_str(obj, "name"))
    if kind == "pointer":
        return Pointer(elem=decode_type(obj.get("elem")))
    if kind == "slice":
        return Slice(elem=decode_type(obj.get("elem")))
    if kind == "array":
        n = obj.get("len", 0)
        if not isinstance(n, int):
            raise ValueError(f"expected integer array length, got {n!r}")
        return Array(len=n, elem=decode_type(obj.get("elem")))
    if kind == "map":
        return Map(key=decode_type(obj.get("key")), elem=decode_type(obj.get("elem")))
    if kind == "chan":
        d = obj.get("dir", SEND_RECV)
        if d not in (SEND_RECV, SEND_ONLY, RECV_ONLY):
            raise ValueError(f"unknown channel direction {d!r}")
        return Chan(dir=d, elem=decode_type(obj.get("elem")))
    if kind == "signature":
        return Signature(
            params=_vars(_list(obj, "params")),
            results=_vars(_list(obj, "results")),
            variadic=bool(obj.get("variadic", False)),
        )
    if kind == "interface":
        return Interface(
            methods=_funcs(_list(obj, "methods")),
            explicit=_funcs(_list(obj, "explicit")),
            embeddeds=tuple(decode_type(e) for e in _list(obj, "embeddeds")),
        )
    if kind == "struct":
        return Struct(
            fields=tuple(
                Field(
                    name=_str(f, "name"),
                    type=decode_type(f.get("type")),
                    embedded=bool(f.get("embedded", False)),
                    tag=_str(f, "tag", required=False),
                )
                for f in _list(obj, "fields")
            )
        )
    if kind == "union":
        return Union_(
            terms=tuple(
                Term(tilde=bool(t.get("tilde", False)), type=decode_type(t.get("type")))
                for t in _list(obj, "terms")
            )
        )
    raise ValueError(f"unsupported type kind {kind!r}")


def decode_module(obj: Any, *, module_path: str) -> Module:
    """Convert the resolver helper's JSON document into a Module.

    Any reported diagnostic, a missing package, or malformed output raises
    ModuleLoadError; no partial Module is returned.
    """
    if not isinstance(obj, dict):
        raise ModuleLoadError(module_path, [f"malformed resolver output: expected object, got {type(obj).__name__}"])

    errors = obj.get("errors") or []
    if not isinstance(errors, list):
        errors = [str(errors)]
    if errors:
        raise ModuleLoadError(module_path, [str(e) for e in errors])
    if not obj.get("found"):
        raise ModuleLoadError(module_path, ["no packages matched"])

    try:
        syntax: list[SyntaxTree] = []
        for f in _list(obj, "files"):
            specs = tuple(TypeSpec(name=_str(s, "name"), ident=_str(s, "ident")) for s in _list(f, "type_specs"))
            syntax.append(SyntaxTree(filename=_str(f, "filename"), type_specs=specs))

        raw_defs = obj.get("defs") or {}
        if not isinstance(raw_defs, dict):
            raise ValueError("expected object 'defs'")
        defs: dict[str, TypeName] = {}
        for ident, d in raw_defs.items():
            if not isinstance(d, dict):
                raise ValueError(f"expected definition object for {ident}")
            defs[ident] = TypeName(
                name=_str(d, "name"),
                type=decode_type(d.get("type")),
                underlying=decode_type(d.get("underlying")),
            )

        return Module(
            name=_str(obj, "name"),
            path=_str(obj, "path"),
            syntax=tuple(syntax),
            defs=defs,
        )
    except (AttributeError, ValueError) as e:
        raise ModuleLoadError(module_path, [f"malformed resolver output: {e}"]) from e
