from __future__ import annotations

from typing import Iterable

from .config import GeneratorConfig
from .loader import GoResolver, ModuleResolver
from .log import get_logger
from .model import GenerationResult, InterfaceDecl, InterfaceHandle, Method, Module
from .scan import scan_interfaces
from .signature import render_method

log = get_logger("generator")


class WrapperGenerator:
    """Collect every interface of a Go package with its methods rendered for wrapper code.

    The run is all-or-nothing: a load failure or an unrenderable method raises and
    no partial result is returned.
    """

    def __init__(
        self,
        module_path: str,
        config: GeneratorConfig | None = None,
        *,
        resolver: ModuleResolver | None = None,
    ):
        self.module_path = module_path
        self.config = config or GeneratorConfig()
        self.resolver = resolver or GoResolver()

    def parse_data(self) -> GenerationResult:
        module = self.resolver.resolve(self.module_path)
        handles = scan_interfaces(module, self.config)

        interfaces: list[InterfaceDecl] = []
        for handle in handles:
            interfaces.append(InterfaceDecl(name=handle.name, methods=self._parse_methods(module, handle)))

        log.info(
            "found %d interface(s) in package %s",
            len(interfaces),
            module.name,
        )
        return GenerationResult(package_name=module.name, interfaces=tuple(interfaces))

    def _parse_methods(self, module: Module, handle: InterfaceHandle) -> tuple[Method, ...]:
        return tuple(render_method(m, module.name, interface=handle.name) for m in handle.type.methods)


def generate(
    module_path: str = ".",
    *,
    exclude_files: Iterable[str] = (),
    exclude_interfaces: Iterable[str] = (),
    resolver: ModuleResolver | None = None,
) -> GenerationResult:
    config = GeneratorConfig.from_lists(exclude_files=exclude_files, exclude_interfaces=exclude_interfaces)
    return WrapperGenerator(module_path, config, resolver=resolver).parse_data()
