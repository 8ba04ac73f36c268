#!/usr/bin/env python3
"""Run the Expose Bank State plugin against a simulated host (development / overlay testing).

Reads config/config.yaml (or the path given; falls back to defaults), starts the plugin, and serves
GET http://127.0.0.1:<port>/state until Ctrl+C. --toggle-every flips the simulated bank widget periodically.
"""

import argparse
import logging
import os
import signal
import sys
import threading
from pathlib import Path

# Project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))
os.chdir(_PROJECT_ROOT)

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Expose Bank State with a simulated host")
    parser.add_argument("config", nargs="?", default=None, help="YAML config (default: config/config.yaml)")
    parser.add_argument("--port", type=int, default=None, help="Override exposebankstate.port")
    parser.add_argument("--bank-open", action="store_true", help="Start with the bank interface open")
    parser.add_argument(
        "--toggle-every",
        type=float,
        default=0.0,
        metavar="SEC",
        help="Open/close the simulated bank every SEC seconds (0 = never)",
    )
    return parser.parse_args()


def main() -> int:
    from bankstate.config.settings import CONFIG_GROUP, KEY_PORT, get_log_level, read_config
    from bankstate.core.logging_utils import setup_logging
    from bankstate.host.config_manager import ConfigManager
    from bankstate.host.events import EventBus
    from bankstate.host.simulated import SimulatedHost
    from bankstate.plugin import BankStatePlugin

    args = _parse_args()
    config, config_path = read_config(args.config)
    setup_logging(get_log_level(config))
    logger.info("Config: %s", config_path or "defaults")

    if args.port is not None:
        config.setdefault(CONFIG_GROUP, {})[KEY_PORT] = args.port
    sim_cfg = config.get("simulation") or {}
    host = SimulatedHost(bank_open=args.bank_open or bool(sim_cfg.get("bank_open")))
    event_bus = EventBus()
    config_manager = ConfigManager(config, event_bus=event_bus)
    plugin = BankStatePlugin(host, config_manager, event_bus)

    stop_event = threading.Event()

    def _on_signal(signum, frame):
        logger.info("Signal %s received; shutting down", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    plugin.start_up()
    if plugin.server is None or not plugin.server.is_running:
        logger.warning("Status server is not running (disabled, invalid port or bind failure); see log above")
    try:
        interval = args.toggle_every if args.toggle_every > 0 else None
        while not stop_event.wait(interval):
            logger.info("Simulated bank open=%s", host.toggle_bank())
    finally:
        plugin.shut_down()
    return 0


if __name__ == "__main__":
    sys.exit(main())
