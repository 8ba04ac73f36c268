"""Pytest fixtures for Expose Bank State tests."""

import socket
import sys
from pathlib import Path
from typing import Tuple

import httpx
import pytest
import yaml

# Ensure project root is in path for bankstate imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def get_free_port() -> int:
    """OS-assigned free loopback port (ephemeral range, always >= 1024)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def http_get(port: int, path: str = "/state", host: str = "127.0.0.1") -> Tuple[int, dict, bytes]:
    """GET http://host:port/path -> (status, lower-cased headers, body)."""
    # trust_env=False: a proxy from the environment must not see loopback requests
    with httpx.Client(trust_env=False, timeout=5) as client:
        resp = client.get(f"http://{host}:{port}{path}")
    headers = {k.lower(): v for k, v in resp.headers.items()}
    return resp.status_code, headers, resp.content


def port_accepts(port: int, host: str = "127.0.0.1") -> bool:
    try:
        with socket.create_connection((host, port), timeout=1):
            return True
    except OSError:
        return False


@pytest.fixture
def project_root() -> Path:
    return _project_root()


@pytest.fixture
def example_config(project_root: Path) -> dict:
    """config/config.yaml.example as dict."""
    with open(project_root / "config" / "config.yaml.example", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@pytest.fixture
def free_port() -> int:
    return get_free_port()


@pytest.fixture
def sim_host():
    from bankstate.host.simulated import SimulatedHost

    return SimulatedHost(bank_open=False)


@pytest.fixture
def reader(sim_host):
    from bankstate.status_server.reader import BankStateReader

    return BankStateReader(sim_host)


@pytest.fixture
def status_server(reader):
    """StatusServer stopped at teardown."""
    from bankstate.status_server.server import StatusServer

    server = StatusServer(reader)
    yield server
    server.stop()
