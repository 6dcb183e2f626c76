from __future__ import annotations

from .errors import SignatureResolutionError
from .gotypes import Func, Signature, Var, kind_of
from .model import Method
from .qualify import Qualifier, package_qualifier, type_string


def _param_names(params: tuple[Var, ...]) -> list[str]:
    # Unnamed and blank parameters cannot be forwarded; give them positional names.
    taken = {p.name for p in params}
    names: list[str] = []
    for i, p in enumerate(params):
        name = p.name
        if not name or name == "_":
            name = f"arg{i}"
            while name in taken:
                name += "_"
            taken.add(name)
        names.append(name)
    return names


def _variadic_type(type_str: str) -> str:
    # The last parameter of a variadic signature is a slice at the type level.
    if type_str.startswith("[]"):
        return "..." + type_str[2:]
    return type_str


def render_params(sig: Signature, q: Qualifier) -> str:
    names = _param_names(sig.params)
    last = len(sig.params) - 1
    out: list[str] = []
    for i, (name, p) in enumerate(zip(names, sig.params)):
        typ = type_string(p.type, q)
        if sig.variadic and i == last:
            out.append(f"{name.replace('[]', '')} {_variadic_type(typ)}")
        else:
            out.append(f"{name} {typ}")
    return ", ".join(out)


def render_args(sig: Signature) -> str:
    names = _param_names(sig.params)
    if sig.variadic and names:
        names[-1] = names[-1].replace("[]", "") + "..."
    return ", ".join(names)


def render_results(sig: Signature, q: Qualifier) -> str:
    return ", ".join(type_string(r.type, q) for r in sig.results)


def render_method(method: Func, module_name: str, *, interface: str = "") -> Method:
    """Render one interface method into its params/args/return strings.

    Raises SignatureResolutionError when the method's type is not a signature.
    """
    sig = method.type
    if not isinstance(sig, Signature):
        raise SignatureResolutionError(interface, method.name, kind_of(sig))
    q = package_qualifier(module_name)
    return Method(
        name=method.name,
        params=render_params(sig, q),
        args=render_args(sig),
        returns=render_results(sig, q),
    )
