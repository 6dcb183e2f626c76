from __future__ import annotations

import pytest

from wrappergen.errors import ModuleLoadError
from wrappergen.gotypes import (
    RECV_ONLY,
    Alias,
    Array,
    Basic,
    Chan,
    Func,
    Interface,
    Named,
    Package,
    Signature,
    Slice,
    Struct,
    Var,
)
from wrappergen.loader import decode_module, decode_type


def _doc(**overrides):
    iface = {
        "kind": "interface",
        "methods": [
            {
                "name": "Get",
                "type": {
                    "kind": "signature",
                    "params": [
                        {"name": "ctx", "type": {"kind": "named", "name": "Context", "pkg": {"path": "context", "name": "context"}}},
                        {"name": "keys", "type": {"kind": "slice", "elem": {"kind": "basic", "name": "string"}}},
                    ],
                    "results": [{"name": "", "type": {"kind": "named", "name": "error"}}],
                    "variadic": True,
                },
            }
        ],
    }
    doc = {
        "found": True,
        "name": "store",
        "path": "example.com/store",
        "errors": [],
        "files": [
            {
                "filename": "/src/store/store.go",
                "type_specs": [
                    {"name": "Store", "ident": "/src/store/store.go:5:6"},
                    {"name": "Row", "ident": "/src/store/store.go:9:6"},
                ],
            }
        ],
        "defs": {
            "/src/store/store.go:5:6": {
                "name": "Store",
                "type": {"kind": "named", "name": "Store", "pkg": {"path": "example.com/store", "name": "store"}},
                "underlying": iface,
            },
            "/src/store/store.go:9:6": {
                "name": "Row",
                "type": {"kind": "named", "name": "Row", "pkg": {"path": "example.com/store", "name": "store"}},
                "underlying": {"kind": "struct"},
            },
        },
    }
    doc.update(overrides)
    return doc


def test_decode_module():
    m = decode_module(_doc(), module_path=".")
    assert m.name == "store"
    assert m.path == "example.com/store"
    assert [t.filename for t in m.syntax] == ["/src/store/store.go"]
    assert [s.name for s in m.syntax[0].type_specs] == ["Store", "Row"]

    store = m.defs["/src/store/store.go:5:6"]
    assert store.type == Named(name="Store", pkg=Package(path="example.com/store", name="store"))
    assert isinstance(store.underlying, Interface)
    (get,) = store.underlying.methods
    assert get.name == "Get"
    assert get.type == Signature(
        params=(
            Var("ctx", Named(name="Context", pkg=Package(path="context", name="context"))),
            Var("keys", Slice(Basic("string"))),
        ),
        results=(Var("", Named(name="error")),),
        variadic=True,
    )
    assert m.defs["/src/store/store.go:9:6"].underlying == Struct()


def test_spec_without_def_is_kept_in_syntax():
    doc = _doc()
    del doc["defs"]["/src/store/store.go:9:6"]
    m = decode_module(doc, module_path=".")
    assert len(m.syntax[0].type_specs) == 2
    assert "/src/store/store.go:9:6" not in m.defs


def test_diagnostics_raise_module_load_error():
    doc = _doc(errors=["store.go:3:2: undefined: Foo"])
    with pytest.raises(ModuleLoadError, match="undefined: Foo") as ei:
        decode_module(doc, module_path="./store")
    assert ei.value.diagnostics == ["store.go:3:2: undefined: Foo"]
    assert ei.value.module_path == "./store"


def test_no_package_raises_module_load_error():
    with pytest.raises(ModuleLoadError, match="no packages matched"):
        decode_module({"found": False, "errors": []}, module_path="./nothing")


@pytest.mark.parametrize(
    "doc",
    [
        [],
        {"found": True, "name": "p", "path": "p", "files": "nope"},
        {"found": True, "name": "p", "path": "p", "files": [{"filename": 3}]},
        {"found": True, "name": "p", "path": "p", "defs": {"x": {"name": "X", "type": {"kind": "mystery"}}}},
        {"found": True, "name": "p", "path": "p", "defs": {"x": {"name": "X", "type": None}}},
        {"found": True, "name": "p", "path": "p", "files": [{"filename": "a.go", "type_specs": [1]}]},
    ],
)
def test_malformed_output_raises_module_load_error(doc):
    with pytest.raises(ModuleLoadError, match="malformed resolver output"):
        decode_module(doc, module_path=".")


def test_decode_type_shapes():
    assert decode_type({"kind": "array", "len": 4, "elem": {"kind": "basic", "name": "byte"}}) == Array(4, Basic("byte"))
    assert decode_type({"kind": "chan", "dir": "recv", "elem": {"kind": "basic", "name": "int"}}) == Chan(
        RECV_ONLY, Basic("int")
    )
    assert decode_type({"kind": "alias", "name": "any"}) == Alias(name="any")
    generic = decode_type(
        {
            "kind": "named",
            "name": "List",
            "pkg": {"path": "example.com/c", "name": "c"},
            "args": [{"kind": "typeparam", "name": "T"}],
        }
    )
    assert generic.args[0].name == "T"


def test_decode_interface_keeps_method_order():
    t = decode_type(
        {
            "kind": "interface",
            "methods": [{"name": "A", "type": {"kind": "signature"}}, {"name": "B", "type": {"kind": "signature"}}],
            "explicit": [{"name": "B", "type": {"kind": "signature"}}],
            "embeddeds": [{"kind": "named", "name": "HasA", "pkg": {"path": "x/y", "name": "y"}}],
        }
    )
    assert [m.name for m in t.methods] == ["A", "B"]
    assert t.explicit == (Func("B", Signature()),)
    assert len(t.embeddeds) == 1


def test_decode_type_rejects_unknown_kind():
    with pytest.raises(ValueError, match="unsupported type kind"):
        decode_type({"kind": "tuple"})
