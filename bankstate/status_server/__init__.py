"""Local status server: bank state reader, GET /state app, loopback listener lifecycle."""

from bankstate.status_server.app import create_app
from bankstate.status_server.reader import BankStateReader
from bankstate.status_server.server import LOOPBACK_HOST, ServerState, StatusServer

__all__ = ["BankStateReader", "LOOPBACK_HOST", "ServerState", "StatusServer", "create_app"]
