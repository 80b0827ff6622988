"""
EczemaHub settings: default.yaml, an optional user.yaml on top, then
ECZEMAHUB_SECTION__KEY environment variables on top of both.
"""

import os
import yaml
import copy
from pathlib import Path
from typing import Any, Optional

ENV_PREFIX = "ECZEMAHUB_"
DEFAULTS_FILE = Path(__file__).parent / "default.yaml"


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _cast_env(value: str) -> Any:
    """'true'/'false' -> bool, digits -> int, then float, else the string."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def _merge(base: dict, overlay: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in overlay.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class Settings:
    """Process-wide settings singleton."""

    _instance: Optional["Settings"] = None
    _config: dict = {}
    _base_dir: Optional[Path] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def initialize(cls, base_dir: Optional[str] = None):
        """Load defaults, the user overlay and env overrides, in that order.

        Relative paths (snapshot, log file) later resolve against base_dir,
        which defaults to the package directory.
        """
        instance = cls()
        instance._base_dir = Path(base_dir) if base_dir else Path(__file__).parent.parent
        user_cfg = _read_yaml(instance._base_dir / "config" / "user.yaml")
        instance._config = _merge(_read_yaml(DEFAULTS_FILE), user_cfg)
        instance._apply_env_overrides(os.environ)
        return instance

    @classmethod
    def reset(cls):
        """Forget the loaded configuration; the next get_settings() reloads."""
        cls._instance = None
        cls._config = {}

    def get(self, dotpath: str, default: Any = None) -> Any:
        """Look up 'section.key'. Missing and null values give the default."""
        val = self._config
        for k in dotpath.split("."):
            if not isinstance(val, dict) or k not in val:
                return default
            val = val[k]
        return default if val is None else val

    def set(self, dotpath: str, value: Any):
        *parents, leaf = dotpath.split(".")
        cfg = self._config
        for k in parents:
            if not isinstance(cfg.get(k), dict):
                cfg[k] = {}
            cfg = cfg[k]
        cfg[leaf] = value

    def resolve_path(self, relative_path: str) -> Path:
        p = Path(relative_path)
        return p if p.is_absolute() else self._base_dir / p

    def _apply_env_overrides(self, environ):
        for key, value in environ.items():
            if key.startswith(ENV_PREFIX):
                # ECZEMAHUB_GATEWAY__PORT -> gateway.port
                self.set(key[len(ENV_PREFIX):].lower().replace("__", "."), _cast_env(value))


def get_settings() -> Settings:
    """Get the global Settings instance, loading it on first use."""
    if Settings._instance is None:
        Settings.initialize()
    return Settings._instance
