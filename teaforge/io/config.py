from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List
import os

import yaml

from configs.validate import DEFAULTS, validate_config
from ..engine.filters import ActiveFilters
from ..engine.session import IngestSession
from ..errors import ConfigError


@dataclass
class Config:
    raw_text_limit: int = DEFAULTS["ingest"]["raw_text_limit"]
    skip_blank_lines: bool = DEFAULTS["ingest"]["skip_blank_lines"]
    max_search_results: int = DEFAULTS["search"]["max_results"]
    log_level: str = DEFAULTS["logging"]["level"]
    filters: List[Dict[str, Any]] = field(default_factory=list)

    def new_session(self) -> IngestSession:
        return IngestSession(raw_text_limit=self.raw_text_limit, skip_blank_lines=self.skip_blank_lines)

    def active_filters(self) -> ActiveFilters:
        return ActiveFilters.from_list(self.filters)


# ---- small helpers --------------------------------------------------------

def _parse_level_env(v: str | None) -> str | None:
    if not v:
        return None
    s = v.strip().upper()
    return s if s in {"DEBUG", "INFO", "WARNING", "ERROR"} else None


def config_from_dict(data: Dict[str, Any] | None) -> Config:
    norm = validate_config(data or {})
    cfg = Config(
        raw_text_limit=norm["ingest"]["raw_text_limit"],
        skip_blank_lines=norm["ingest"]["skip_blank_lines"],
        max_search_results=norm["search"]["max_results"],
        log_level=norm["logging"]["level"],
        filters=list(norm["filters"]),
    )
    # TEAFORGE_LOG_LEVEL overrides the file
    env_level = _parse_level_env(os.getenv("TEAFORGE_LOG_LEVEL"))
    if env_level:
        cfg.log_level = env_level
    return cfg


# ---- loader ---------------------------------------------------------------

def load_config(path: str | None = None) -> Config:
    """
    Load a YAML config if given; otherwise return defaults.
    Behavior:
      * A missing file yields defaults (the CLI reports explicit-but-missing paths itself).
      * Invalid YAML or an invalid config raises ConfigError.
      * TEAFORGE_LOG_LEVEL=DEBUG|INFO|WARNING|ERROR overrides logging.level.
    """
    if not path:
        return config_from_dict({})
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return config_from_dict({})
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e
    return config_from_dict(data)
