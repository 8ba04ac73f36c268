"""Plugin configuration: defaults, user YAML, ServerConfig snapshot."""

from bankstate.config.settings import (
    CONFIG_GROUP,
    MAX_PORT,
    MIN_PORT,
    ServerConfig,
    get_server_config,
    read_config,
    validate_port,
)

__all__ = [
    "CONFIG_GROUP",
    "MAX_PORT",
    "MIN_PORT",
    "ServerConfig",
    "get_server_config",
    "read_config",
    "validate_port",
]
