"""Tablebase run configuration, read from the `tablebase:` section of a YAML file."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional

import yaml


@dataclass
class TablebaseConfig:
    """Where the collections live and how far to solve."""
    store_dir: str = "data/khk"
    prefix: str = "khk"
    max_depth: Optional[int] = None  # None = run to the fixed point
    log_level: str = "INFO"


def config_from_dict(config: dict) -> TablebaseConfig:
    section = config.get("tablebase", {}) or {}
    known = {f.name for f in fields(TablebaseConfig)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown tablebase config keys: {sorted(unknown)}")
    cfg = TablebaseConfig(**section)
    if cfg.max_depth is not None and cfg.max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {cfg.max_depth}")
    return cfg


def load_config(path: str) -> TablebaseConfig:
    with open(path) as f:
        config = yaml.safe_load(f) or {}
    return config_from_dict(config)
