"""
Engine defaults loaded from YAML.

A config file is a mapping with a single ``engine`` namespace:

    engine:
      enharmonic_policy: flat
      sevenths: true
      log_level: debug
      strict_slots: false

Keys outside the namespace, or unknown keys inside it, are rejected.
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Collection, Mapping, Optional, Union

import yaml

from .convert import ENHARMONIC_POLICIES
from .log import VERBOSITY_LEVELS

ConfigPath = Union[str, Path]

ALLOWED_TOP_LEVEL_KEYS: Collection[str] = {"engine"}


@dataclass(frozen=True)
class EngineConfig:
    enharmonic_policy : str  = "key-signature"
    sevenths          : bool = False
    log_level         : str  = "info"
    strict_slots      : bool = False

    def __post_init__(self):
        if self.enharmonic_policy not in ENHARMONIC_POLICIES:
            raise ValueError(f"enharmonic_policy must be one of {ENHARMONIC_POLICIES}, "
                             f"not {self.enharmonic_policy!r}")
        if self.log_level not in VERBOSITY_LEVELS:
            raise ValueError(f"log_level must be one of {VERBOSITY_LEVELS}, not {self.log_level!r}")
        for name in ("sevenths", "strict_slots"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be true or false, not {getattr(self, name)!r}")


def load_yaml_file(path: ConfigPath) -> Mapping[str, Any]:
    """Load YAML mapping from disk, enforcing a top-level mapping."""
    resolved = Path(path).expanduser()
    with resolved.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Config at {resolved} must contain a mapping, not {type(data)}")
    return data


def _validate_keys(data: Mapping[str, Any], allowed: Collection[str], where: str) -> None:
    unknown = [key for key in data.keys() if key not in allowed]
    if unknown:
        allowed_str = ", ".join(sorted(allowed))
        raise ValueError(f"{where} contains unknown keys {unknown} (allowed: {allowed_str})")


def config_from_mapping(data: Mapping[str, Any], source: str = "<mapping>") -> EngineConfig:
    _validate_keys(data, ALLOWED_TOP_LEVEL_KEYS, f"Config {source}")
    engine = data.get("engine") or {}
    if not isinstance(engine, Mapping):
        raise ValueError(f"Config {source}: 'engine' must be a mapping, not {type(engine)}")
    _validate_keys(engine, {f.name for f in fields(EngineConfig)}, f"Config {source} [engine]")
    return replace(EngineConfig(), **engine)


def load_engine_config(path: Optional[ConfigPath] = None) -> EngineConfig:
    """Defaults when ``path`` is None, otherwise the validated file contents."""
    if path is None:
        return EngineConfig()
    return config_from_mapping(load_yaml_file(path), source=str(path))
