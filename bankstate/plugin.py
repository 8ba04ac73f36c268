"""Expose Bank State plugin: host lifecycle hooks -> status server start/stop/restart.

The host calls start_up()/shut_down() on its lifecycle thread and delivers ConfigChanged through the event bus.
Any change in the exposebankstate group restarts the server (no diffing of which key changed).
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from bankstate.config.settings import CONFIG_GROUP, ServerConfig
from bankstate.host.api import WidgetHost
from bankstate.host.config_manager import ConfigManager
from bankstate.host.events import ConfigChanged, EventBus
from bankstate.status_server.reader import BankStateReader
from bankstate.status_server.server import StatusServer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginDescriptor:
    name: str
    description: str
    tags: Tuple[str, ...] = ()


class BankStatePlugin:
    """Wires host collaborators (widgets, config, events) to a BankStateReader and a StatusServer."""

    DESCRIPTOR = PluginDescriptor(
        name="Expose Bank State",
        description="Expose bank open/closed state to localhost for overlays",
        tags=("bank", "state", "overlay", "http"),
    )

    def __init__(self, host: WidgetHost, config_manager: ConfigManager, event_bus: EventBus) -> None:
        self._host = host
        self._config_manager = config_manager
        self._event_bus = event_bus
        # start_up, shut_down and config changes may arrive on different host threads
        self._lock = threading.RLock()
        self._reader: Optional[BankStateReader] = None
        self._server: Optional[StatusServer] = None

    @property
    def reader(self) -> Optional[BankStateReader]:
        return self._reader

    @property
    def server(self) -> Optional[StatusServer]:
        return self._server

    def provide_config(self) -> ServerConfig:
        """Current snapshot of the plugin's config group."""
        return self._config_manager.get_server_config()

    def start_up(self) -> None:
        with self._lock:
            if self._server is not None:
                self._server.stop()
            # Fresh state per start; nothing carried over from a previous run
            self._reader = BankStateReader(self._host)
            self._reader.read_bank_open()
            self._server = StatusServer(self._reader)
            config = self.provide_config()
            self._server.restart(config)
            self._event_bus.register(ConfigChanged, self.on_config_changed)
        logger.info("Expose Bank State started. HTTP enabled=%s port=%s", config.enable_http, config.port)

    def shut_down(self) -> None:
        with self._lock:
            self._event_bus.unregister(ConfigChanged, self.on_config_changed)
            if self._server is not None:
                self._server.stop()
            self._server = None
            self._reader = None
        logger.info("Expose Bank State stopped.")

    def on_config_changed(self, event: ConfigChanged) -> None:
        if event.group != CONFIG_GROUP:
            return
        with self._lock:
            server = self._server
            if server is None:
                logger.debug("config change %s ignored: plugin not started", event.key)
                return
            server.restart(self.provide_config())
        logger.info("Expose Bank State config changed: %s = %s", event.key, event.new_value)
