"""YAML settings for the patcher.

Example:
    sizing: last              # "last" (default) or "max"
    expected_crc32: 0x1A2B3C4D
"""
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from .patcher import SIZING_POLICIES
from .rom_utils import parse_crc32

KNOWN_KEYS = {"sizing", "expected_crc32"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class PatcherConfig:
    sizing: str = "last"
    expected_crc32: int | None = None

    def merged(self, **overrides: Any) -> "PatcherConfig":
        """Return a copy with the non-None overrides applied (command line wins)."""
        return from_mapping({**self.__dict__, **{k: v for k, v in overrides.items() if v is not None}})


def from_mapping(raw: dict[str, Any]) -> PatcherConfig:
    unknown = set(raw) - KNOWN_KEYS
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(sorted(unknown))}")
    cfg = PatcherConfig()
    sizing = raw.get("sizing")
    if sizing is not None:
        if sizing not in SIZING_POLICIES:
            raise ConfigError(f"sizing must be one of {', '.join(SIZING_POLICIES)}, got {sizing!r}")
        cfg = replace(cfg, sizing=sizing)
    crc = raw.get("expected_crc32")
    if crc is not None:
        try:
            cfg = replace(cfg, expected_crc32=parse_crc32(crc))
        except ValueError as e:
            raise ConfigError(str(e)) from e
    return cfg


def load_config(path: str | Path) -> PatcherConfig:
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return PatcherConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return from_mapping(raw)
