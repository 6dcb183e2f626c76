from __future__ import annotations

import argparse
import importlib.metadata
import json
import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="wrappergen")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print wrappergen version.")

    p_inspect = sub.add_parser(
        "inspect",
        help="Print the interfaces of a Go package and their rendered method signatures as JSON.",
    )
    p_inspect.add_argument(
        "--module",
        default=".",
        help="Go package pattern to load: directory-relative path or import path (default: .).",
    )
    p_inspect.add_argument(
        "--dir",
        default=None,
        help="Directory to resolve --module in (default: current directory).",
    )
    p_inspect.add_argument(
        "--exclude-file",
        action="append",
        default=[],
        metavar="NAME",
        help="Skip declarations in files with this base name (repeatable).",
    )
    p_inspect.add_argument(
        "--exclude-interface",
        action="append",
        default=[],
        metavar="NAME",
        help="Skip the interface with this exact name (repeatable).",
    )
    p_inspect.add_argument("--verbose", action="store_true", help="Enable debug logging.")

    args = parser.parse_args(argv)
    if args.cmd == "version":
        try:
            print(importlib.metadata.version("wrappergen"))
        except importlib.metadata.PackageNotFoundError:
            # Running from a source checkout.
            print("0.0.0")
        return

    if args.cmd == "inspect":
        from .errors import WrapperGenError
        from .generator import generate
        from .loader import GoResolver
        from .log import configure_logging

        configure_logging(verbose=bool(args.verbose))
        resolver = GoResolver(work_dir=Path(args.dir) if args.dir else None)
        try:
            result = generate(
                args.module,
                exclude_files=args.exclude_file,
                exclude_interfaces=args.exclude_interface,
                resolver=resolver,
            )
        except WrapperGenError as e:
            print(str(e), file=sys.stderr)
            raise SystemExit(1) from e

        json.dump(result.to_dict(), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return
