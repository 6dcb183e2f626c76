from __future__ import annotations

import logging

from wrappergen.config import GeneratorConfig
from wrappergen.gotypes import Basic, Func, Signature, Struct
from wrappergen.scan import file_base_name, scan_interfaces


def test_file_base_name():
    assert file_base_name("/src/p/store.go") == "store.go"
    assert file_base_name("C:\\src\\p\\store.go") == "store.go"
    assert file_base_name("store.go") == "store.go"


def test_scan_finds_interfaces_in_source_order(make_module, make_interface):
    reader = make_interface(Func("Read", Signature()))
    writer = make_interface(Func("Write", Signature()))
    module = make_module(
        "p",
        {
            "/src/p/a.go": {"Writer": writer, "Config": Struct(), "ID": Basic("int")},
            "/src/p/b.go": {"Reader": reader},
        },
    )
    handles = scan_interfaces(module, GeneratorConfig())
    assert [h.name for h in handles] == ["Writer", "Reader"]
    assert handles[0].type is writer
    assert handles[1].filename == "/src/p/b.go"


def test_scan_skips_declarations_without_resolved_type(make_module, make_interface):
    module = make_module("p", {"/src/p/a.go": {"Broken": None, "Ok": make_interface()}})
    assert [h.name for h in scan_interfaces(module, GeneratorConfig())] == ["Ok"]


def test_excluded_files_are_skipped_entirely(make_module, make_interface):
    module = make_module(
        "p",
        {
            "/src/p/api.go": {"API": make_interface()},
            "/src/p/mocks.go": {"MockA": make_interface(), "MockB": make_interface()},
        },
    )
    cfg = GeneratorConfig.from_lists(exclude_files=["mocks.go"])
    assert [h.name for h in scan_interfaces(module, cfg)] == ["API"]


def test_file_exclusion_matches_base_name_in_any_directory(make_module, make_interface):
    module = make_module(
        "p",
        {
            "/src/p/gen/types.go": {"A": make_interface()},
            "/src/p/types.go": {"B": make_interface()},
            "/src/p/other.go": {"C": make_interface()},
        },
    )
    cfg = GeneratorConfig.from_lists(exclude_files=["types.go"])
    assert [h.name for h in scan_interfaces(module, cfg)] == ["C"]


def test_excluded_interfaces_are_exact_match(make_module, make_interface):
    module = make_module(
        "p",
        {"/src/p/a.go": {"Store": make_interface(), "StoreTx": make_interface()}},
    )
    cfg = GeneratorConfig.from_lists(exclude_interfaces=["Store"])
    assert [h.name for h in scan_interfaces(module, cfg)] == ["StoreTx"]


def test_exclusion_of_non_interface_names_is_harmless(make_module, make_interface):
    module = make_module("p", {"/src/p/a.go": {"Store": make_interface(), "Config": Struct()}})
    cfg = GeneratorConfig.from_lists(exclude_interfaces=["Config"], exclude_files=["missing.go"])
    assert [h.name for h in scan_interfaces(module, cfg)] == ["Store"]


def test_every_non_excluded_interface_appears_exactly_once(make_module, make_interface):
    files = {
        f"/src/p/f{i}.go": {f"I{i}a": make_interface(), f"I{i}b": make_interface(), f"S{i}": Struct()}
        for i in range(4)
    }
    module = make_module("p", files)
    cfg = GeneratorConfig.from_lists(exclude_files=["f1.go"], exclude_interfaces=["I2b"])
    names = [h.name for h in scan_interfaces(module, cfg)]
    assert names == ["I0a", "I0b", "I2a", "I3a", "I3b"]
    assert len(names) == len(set(names))


def test_filtered_declarations_only_log_at_debug(monkeypatch, caplog, make_module, make_interface):
    # The CLI may have stopped propagation on the package logger in an earlier test.
    monkeypatch.setattr(logging.getLogger("wrappergen"), "propagate", True)
    module = make_module(
        "p",
        {
            "/src/p/mocks.go": {"Mock": make_interface()},
            "/src/p/api.go": {
                "Unresolved": None,
                "Config": Struct(),
                "Hidden": make_interface(),
                "API": make_interface(),
            },
        },
    )
    cfg = GeneratorConfig.from_lists(exclude_files=["mocks.go"], exclude_interfaces=["Hidden"])

    with caplog.at_level(logging.DEBUG, logger="wrappergen.scan"):
        handles = scan_interfaces(module, cfg)

    assert [h.name for h in handles] == ["API"]
    records = [r for r in caplog.records if r.name == "wrappergen.scan"]
    assert records
    assert all(r.levelno == logging.DEBUG for r in records)
