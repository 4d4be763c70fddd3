"""Where the CLI finds its config file.

Lookup order: `--config`, then `$TEAFORGE_CONFIG`, then `./configs/config.yaml`,
then `${XDG_CONFIG_HOME:-~/.config}/teaforge/config.yaml`. A candidate may name
a file or a directory holding `config.yaml`. Only an explicit `--config` that
does not exist is an error; the other candidates are skipped when absent.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping, Optional, Tuple

ENV_VAR = "TEAFORGE_CONFIG"
CONFIG_NAME = "config.yaml"


@dataclass(frozen=True)
class ConfigChoice:
    path: Optional[Path]
    source: str  # explicit | env | cwd | xdg | none
    missing: bool = False

    @property
    def error(self) -> Optional[str]:
        if self.missing:
            return f"{self.path} not found"
        return None

    def breadcrumb(self) -> str:
        shown = self.path if self.path is not None else "none"
        return f"[teaforge] config: {shown} (from {self.source})"


def _expand(raw: str) -> Path:
    return Path(os.path.expandvars(raw)).expanduser()


def _existing(candidate: Path) -> Optional[Path]:
    if candidate.is_dir():
        candidate = candidate / CONFIG_NAME
    return candidate.resolve() if candidate.is_file() else None


def _implicit_candidates(cwd: Path, env: Mapping[str, str]) -> Iterator[Tuple[str, Path]]:
    if env.get(ENV_VAR):
        yield "env", _expand(env[ENV_VAR])
    yield "cwd", cwd / "configs" / CONFIG_NAME
    xdg = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    yield "xdg", _expand(xdg) / "teaforge" / CONFIG_NAME


def find_config(
    explicit: Optional[str],
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ConfigChoice:
    if explicit:
        wanted = _expand(explicit)
        found = _existing(wanted)
        if found is None:
            return ConfigChoice(wanted, "explicit", missing=True)
        return ConfigChoice(found, "explicit")
    for source, candidate in _implicit_candidates(cwd or Path.cwd(), env or {}):
        found = _existing(candidate)
        if found is not None:
            return ConfigChoice(found, source)
    return ConfigChoice(None, "none")


__all__ = ["ConfigChoice", "ENV_VAR", "find_config"]
