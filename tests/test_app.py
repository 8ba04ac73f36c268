"""GET /state app: exact JSON bodies, headers, 500 category, unknown routes."""

import pytest
from fastapi.testclient import TestClient

from bankstate.host.simulated import SimulatedHost
from bankstate.status_server.app import create_app
from bankstate.status_server.reader import BankStateReader


class _BrokenReader:
    def read_bank_open(self) -> bool:
        raise RuntimeError("boom")


@pytest.fixture
def host():
    return SimulatedHost(bank_open=False)


@pytest.fixture
def client(host):
    return TestClient(create_app(BankStateReader(host)))


class TestGetState:
    def test_hidden_widget(self, client):
        r = client.get("/state")
        assert r.status_code == 200
        assert r.content == b'{"bankOpen":false}'

    def test_visible_widget(self, client, host):
        host.set_bank_open(True)
        r = client.get("/state")
        assert r.status_code == 200
        assert r.content == b'{"bankOpen":true}'

    def test_headers(self, client):
        r = client.get("/state")
        assert r.headers["content-type"] == "application/json; charset=utf-8"
        assert r.headers["cache-control"] == "no-store"

    def test_reads_per_request(self, client, host):
        assert client.get("/state").json() == {"bankOpen": False}
        host.set_bank_open(True)
        assert client.get("/state").json() == {"bankOpen": True}
        host.set_bank_open(False)
        assert client.get("/state").json() == {"bankOpen": False}

    def test_host_fault_is_not_an_error(self, client, host):
        host.set_bank_open(True)
        host.fail_lookups = True
        r = client.get("/state")
        assert r.status_code == 200
        assert r.json() == {"bankOpen": False}

    def test_handler_fault_returns_500_with_category(self):
        client = TestClient(create_app(_BrokenReader()))
        r = client.get("/state")
        assert r.status_code == 500
        assert r.json() == {"error": "RuntimeError"}
        assert r.headers["content-type"] == "application/json; charset=utf-8"


class TestOtherRoutes:
    def test_unknown_path_404(self, client):
        assert client.get("/status").status_code == 404

    def test_docs_disabled(self, client):
        assert client.get("/docs").status_code == 404
        assert client.get("/openapi.json").status_code == 404

    def test_post_state_not_allowed(self, client):
        assert client.post("/state").status_code == 405
