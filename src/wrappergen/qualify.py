from __future__ import annotations

import json
from typing import Callable

from .gotypes import (
    RECV_ONLY,
    SEND_ONLY,
    Alias,
    Array,
    Basic,
    Chan,
    GoType,
    Interface,
    Map,
    Named,
    Package,
    Pointer,
    Signature,
    Slice,
    Struct,
    TypeParam,
    Union_,
    Var,
)

Qualifier = Callable[[Package], str]


def after_last_slash(s: str) -> str:
    return s.rsplit("/", 1)[-1]


def package_qualifier(module_name: str) -> Qualifier:
    """Return the qualifier used for code generated inside package `module_name`.

    Types owned by the package itself are left unqualified. Everything else is
    qualified by the last segment of its import path; two imports sharing that
    segment are not told apart.
    """

    def qualifier(pkg: Package) -> str:
        if pkg.name == module_name:
            return ""
        return after_last_slash(pkg.path or pkg.name)

    return qualifier


def type_string(t: GoType, qualifier: Qualifier | None = None) -> str:
    """Render `t` in Go syntax, matching go/types.TypeString."""
    parts: list[str] = []
    _write_type(parts, t, qualifier)
    return "".join(parts)


def _write_type(w: list[str], t: GoType, q: Qualifier | None) -> None:
    if isinstance(t, Basic):
        w.append(t.name)
    elif isinstance(t, (Named, Alias)):
        if t.pkg is not None:
            prefix = q(t.pkg) if q is not None else t.pkg.path
            if prefix:
                w.append(prefix)
                w.append(".")
        w.append(t.name)
        if t.args:
            w.append("[")
            _write_list(w, t.args, q)
            w.append("]")
    elif isinstance(t, TypeParam):
        w.append(t.name)
    elif isinstance(t, Pointer):
        w.append("*")
        _write_type(w, t.elem, q)
    elif isinstance(t, Slice):
        w.append("[]")
        _write_type(w, t.elem, q)
    elif isinstance(t, Array):
        w.append(f"[{t.len}]")
        _write_type(w, t.elem, q)
    elif isinstance(t, Map):
        w.append("map[")
        _write_type(w, t.key, q)
        w.append("]")
        _write_type(w, t.elem, q)
    elif isinstance(t, Chan):
        _write_chan(w, t, q)
    elif isinstance(t, Signature):
        w.append("func")
        _write_signature(w, t, q)
    elif isinstance(t, Interface):
        _write_interface(w, t, q)
    elif isinstance(t, Struct):
        w.append("struct{")
        for i, f in enumerate(t.fields):
            if i > 0:
                w.append("; ")
            if not f.embedded:
                w.append(f.name)
                w.append(" ")
            _write_type(w, f.type, q)
            if f.tag:
                w.append(" ")
                w.append(json.dumps(f.tag, ensure_ascii=False))
        w.append("}")
    elif isinstance(t, Union_):
        for i, term in enumerate(t.terms):
            if i > 0:
                w.append(" | ")
            if term.tilde:
                w.append("~")
            _write_type(w, term.type, q)
    else:
        raise TypeError(f"unsupported type: {t!r}")


def _write_list(w: list[str], types: tuple[GoType, ...], q: Qualifier | None) -> None:
    for i, t in enumerate(types):
        if i > 0:
            w.append(", ")
        _write_type(w, t, q)


def _write_chan(w: list[str], t: Chan, q: Qualifier | None) -> None:
    parens = False
    if t.dir == SEND_ONLY:
        w.append("chan<- ")
    elif t.dir == RECV_ONLY:
        w.append("<-chan ")
    else:
        w.append("chan ")
        # `chan (<-chan T)` needs parentheses to keep its meaning.
        parens = isinstance(t.elem, Chan) and t.elem.dir == RECV_ONLY
    if parens:
        w.append("(")
    _write_type(w, t.elem, q)
    if parens:
        w.append(")")


def _write_tuple(w: list[str], vars_: tuple[Var, ...], variadic: bool, q: Qualifier | None) -> None:
    w.append("(")
    for i, v in enumerate(vars_):
        if i > 0:
            w.append(", ")
        if v.name:
            w.append(v.name)
            w.append(" ")
        if variadic and i == len(vars_) - 1 and isinstance(v.type, Slice):
            w.append("...")
            _write_type(w, v.type.elem, q)
        else:
            _write_type(w, v.type, q)
    w.append(")")


def _write_signature(w: list[str], sig: Signature, q: Qualifier | None) -> None:
    _write_tuple(w, sig.params, sig.variadic, q)
    if not sig.results:
        return
    w.append(" ")
    if len(sig.results) == 1 and not sig.results[0].name:
        _write_type(w, sig.results[0].type, q)
        return
    _write_tuple(w, sig.results, False, q)


def _write_interface(w: list[str], t: Interface, q: Qualifier | None) -> None:
    w.append("interface{")
    first = True
    for m in t.explicit:
        if not first:
            w.append("; ")
        first = False
        w.append(m.name)
        if isinstance(m.type, Signature):
            _write_signature(w, m.type, q)
        else:
            w.append(" ")
            _write_type(w, m.type, q)
    for e in t.embeddeds:
        if not first:
            w.append("; ")
        first = False
        _write_type(w, e, q)
    w.append("}")
