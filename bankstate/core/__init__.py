"""Core utilities: logging."""

from bankstate.core.logging_utils import log_server_transition, setup_logging

__all__ = ["log_server_transition", "setup_logging"]
