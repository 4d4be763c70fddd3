# teaforge/cli/main.py
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from ..errors import ConfigError
from ..io.config import load_config
from . import diff, replay, search
from ._config import find_config
from ._exit import USER_ERR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="teaforge",
        description="TeaForge log inspection CLI",
        allow_abbrev=False,
    )
    from teaforge import __version__ as _VER

    parser.add_argument(
        "--version",
        action="version",
        version=f"teaforge {_VER}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="log at DEBUG level regardless of config",
    )
    parser.add_argument(
        "-c",
        "--config",
        dest="config",
        help="config file or directory (default: discovered)",
    )
    subparsers = parser.add_subparsers(dest="command")

    replay.register(subparsers)
    diff.register(subparsers)
    search.register(subparsers)

    return parser


def main(argv: List[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    ns = parser.parse_args(argv)
    if not hasattr(ns, "func"):
        parser.print_help(sys.stderr)
        return USER_ERR

    choice = find_config(ns.config, Path.cwd(), os.environ)
    if getattr(ns, "verbose", False):
        sys.stderr.write(choice.breadcrumb() + "\n")
    if choice.error:
        sys.stderr.write(f"Config error: {choice.error}\n")
        return USER_ERR
    try:
        ns.cfg = load_config(str(choice.path) if choice.path else None)
    except ConfigError as e:
        sys.stderr.write(f"Config error: {e}\n")
        return USER_ERR

    logging.basicConfig(
        level=logging.DEBUG if ns.debug else getattr(logging, ns.cfg.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return ns.func(ns)


if __name__ == "__main__":
    raise SystemExit(main())
