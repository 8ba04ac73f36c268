"""Plugin config: exposebankstate group (enableHttp, port) and logging.

Defaults: loaded from bankstate/config/defaults.yaml (single source of truth, no code-level defaults).
"""

import copy
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

CONFIG_GROUP = "exposebankstate"
KEY_ENABLE_HTTP = "enableHttp"
KEY_PORT = "port"

# Privileged ports (< 1024) are rejected on purpose
MIN_PORT = 1024
MAX_PORT = 65535

_DEFAULTS_PATH = Path(__file__).resolve().parent / "defaults.yaml"

# Lazy-loaded defaults
_DEFAULT_CONFIG: Optional[Dict[str, Any]] = None

_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off", "")


@dataclass(frozen=True)
class ServerConfig:
    """Read-only snapshot of the exposebankstate group, taken on every (re)start."""

    enable_http: bool
    port: int

    @property
    def port_valid(self) -> bool:
        return validate_port(self.port)


def _load_default_config() -> Dict[str, Any]:
    """Load defaults.yaml. No code-level defaults."""
    global _DEFAULT_CONFIG
    if _DEFAULT_CONFIG is None:
        with open(_DEFAULTS_PATH, encoding="utf-8") as f:
            _DEFAULT_CONFIG = yaml.safe_load(f) or {}
    return _DEFAULT_CONFIG


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base. Override values take precedence."""
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def merged_config(cfg: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Merge config with defaults so missing keys come from defaults.yaml. Result never aliases the cached defaults."""
    return _deep_merge(copy.deepcopy(_load_default_config()), cfg or {})


def read_config(config_path: Optional[str] = None) -> Tuple[Dict[str, Any], Optional[str]]:
    """Load user YAML config merged over defaults. Returns (config, resolved_path or None when defaults only)."""
    config_path = config_path or os.environ.get("BANKSTATE_CONFIG", "config/config.yaml")
    if not Path(config_path).exists():
        logger.info("Config %s not found; using defaults", config_path)
        return merged_config({}), None
    resolved = str(Path(config_path).resolve())
    with open(resolved, "r", encoding="utf-8") as f:
        user_cfg = yaml.safe_load(f) or {}
    return merged_config(user_cfg), resolved


def validate_port(port: Any) -> bool:
    """True when port is an int in [MIN_PORT, MAX_PORT]."""
    return isinstance(port, int) and not isinstance(port, bool) and MIN_PORT <= port <= MAX_PORT


def as_bool(value: Any) -> bool:
    """Coerce a stored config value (bool or string from a config UI) to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE_STRINGS:
            return True
        if v in _FALSE_STRINGS:
            return False
    raise ValueError(f"not a boolean: {value!r}")


def as_port(value: Any) -> int:
    """Coerce a stored port value to int. Unparsable values map to 0 (rejected later as out of range)."""
    if isinstance(value, bool):
        logger.warning("Port %r is not a number", value)
        return 0
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        logger.warning("Port %r is not a number", value)
        return 0


def get_group_config(config: Optional[Dict[str, Any]] = None, group: str = CONFIG_GROUP) -> Dict[str, Any]:
    """Return one config group (with defaults filled in). Returns {} if not found."""
    merged = merged_config(config)
    section = merged.get(group)
    return dict(section) if isinstance(section, dict) else {}


def get_server_config(config: Optional[Dict[str, Any]] = None) -> ServerConfig:
    """Return ServerConfig snapshot from the exposebankstate group. Missing keys from defaults.yaml."""
    group = get_group_config(config)
    defaults = _load_default_config().get(CONFIG_GROUP) or {}
    try:
        enable_http = as_bool(group.get(KEY_ENABLE_HTTP))
    except ValueError:
        logger.warning(
            "%s=%r is not a boolean; using default %s",
            KEY_ENABLE_HTTP,
            group.get(KEY_ENABLE_HTTP),
            defaults.get(KEY_ENABLE_HTTP),
        )
        enable_http = bool(defaults.get(KEY_ENABLE_HTTP))
    return ServerConfig(enable_http=enable_http, port=as_port(group.get(KEY_PORT)))


def get_log_level(config: Optional[Dict[str, Any]] = None) -> int:
    """Return logging level (int) from logging.level; INFO if unknown."""
    merged = merged_config(config)
    name = str((merged.get("logging") or {}).get("level") or "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
