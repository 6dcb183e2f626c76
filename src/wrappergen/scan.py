from __future__ import annotations

from .config import GeneratorConfig
from .gotypes import Interface
from .log import get_logger
from .model import InterfaceHandle, Module

log = get_logger("scan")


def file_base_name(filename: str) -> str:
    """Last path segment of a source file name (either separator)."""
    return filename.replace("\\", "/").rsplit("/", 1)[-1]


def scan_interfaces(module: Module, config: GeneratorConfig) -> list[InterfaceHandle]:
    """Find interface type declarations in `module`, honoring `config` exclusions.

    Trees are visited in resolver order and declarations in source order.
    Declarations without a resolved type, or whose underlying type is not an
    interface, are skipped; that is filtering, not an error.
    """
    found: list[InterfaceHandle] = []
    for tree in module.syntax:
        base = file_base_name(tree.filename)
        if base in config.exclude_files:
            log.debug("skipping excluded file %s", tree.filename)
            continue
        for spec in tree.type_specs:
            obj = module.defs.get(spec.ident)
            if obj is None:
                log.debug("no resolved type for %s in %s", spec.name, base)
                continue
            if not isinstance(obj.underlying, Interface):
                continue
            if spec.name in config.exclude_interfaces:
                log.debug("skipping excluded interface %s", spec.name)
                continue
            found.append(InterfaceHandle(name=spec.name, type=obj.underlying, filename=tree.filename))
    return found
