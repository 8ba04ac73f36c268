"""Grouped key-value config store (the host's config manager). Posts ConfigChanged on every real change."""

import copy
import logging
import threading
from typing import Any, Dict, Optional

from bankstate.config.settings import ServerConfig, get_server_config, merged_config
from bankstate.host.events import ConfigChanged, EventBus

logger = logging.getLogger(__name__)


class ConfigManager:
    """Holds {group: {key: value}} seeded from defaults.yaml merged with user config."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, event_bus: Optional[EventBus] = None):
        self._lock = threading.Lock()
        self._config = merged_config(copy.deepcopy(config or {}))
        self._event_bus = event_bus

    def get_configuration(self, group: str, key: str, default: Any = None) -> Any:
        with self._lock:
            section = self._config.get(group)
            if not isinstance(section, dict):
                return default
            return section.get(key, default)

    def get_group(self, group: str) -> Dict[str, Any]:
        with self._lock:
            section = self._config.get(group)
            return dict(section) if isinstance(section, dict) else {}

    def set_configuration(self, group: str, key: str, value: Any) -> bool:
        """Store value; post ConfigChanged (outside the lock) only if it changed. Returns True if changed."""
        with self._lock:
            section = self._config.get(group)
            if not isinstance(section, dict):
                section = {}
                self._config[group] = section
            old = section.get(key)
            if key in section and old == value:
                return False
            section[key] = value
        logger.debug("config set %s.%s = %r (was %r)", group, key, value, old)
        if self._event_bus is not None:
            self._event_bus.post(ConfigChanged(group=group, key=key, new_value=value, old_value=old))
        return True

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {g: (dict(s) if isinstance(s, dict) else s) for g, s in self._config.items()}

    def get_server_config(self) -> ServerConfig:
        """Snapshot of the plugin group as ServerConfig."""
        return get_server_config(self.as_dict())
