"""BankStateReader: true iff widget exists and is visible; absent or faulting host reads as closed."""

import threading

from bankstate.host.api import ComponentID
from bankstate.host.simulated import SimulatedHost, SimulatedWidget
from bankstate.status_server.reader import BankStateReader


class _RaisingWidget:
    @property
    def is_hidden(self) -> bool:
        raise AttributeError("widget disposed")


class TestReadBankOpen:
    def test_visible_widget_is_open(self):
        host = SimulatedHost(bank_open=True)
        assert BankStateReader(host).read_bank_open() is True

    def test_hidden_widget_is_closed(self):
        host = SimulatedHost(bank_open=False)
        assert BankStateReader(host).read_bank_open() is False

    def test_absent_widget_is_closed(self):
        host = SimulatedHost(bank_open=True)
        host.remove_widget(ComponentID.BANK_CONTAINER)
        assert BankStateReader(host).read_bank_open() is False

    def test_lookup_fault_is_closed(self):
        host = SimulatedHost(bank_open=True)
        host.fail_lookups = True
        assert BankStateReader(host).read_bank_open() is False

    def test_widget_attribute_fault_is_closed(self):
        host = SimulatedHost()
        host.set_widget(ComponentID.BANK_CONTAINER, _RaisingWidget())
        assert BankStateReader(host).read_bank_open() is False

    def test_reads_only_bank_container(self):
        host = SimulatedHost(bank_open=False)
        host.set_widget(ComponentID.BANK_CONTAINER + 1, SimulatedWidget(is_hidden=False))
        assert BankStateReader(host).read_bank_open() is False

    def test_custom_component_id(self):
        host = SimulatedHost(bank_open=False)
        host.set_widget(42, SimulatedWidget(is_hidden=False))
        assert BankStateReader(host, component_id=42).read_bank_open() is True


class TestLastValue:
    def test_default_false_before_first_read(self):
        assert BankStateReader(SimulatedHost(bank_open=True)).bank_open is False

    def test_each_read_recomputes(self):
        host = SimulatedHost(bank_open=False)
        reader = BankStateReader(host)
        assert reader.read_bank_open() is False
        host.set_bank_open(True)
        assert reader.read_bank_open() is True
        assert reader.bank_open is True
        host.fail_lookups = True
        assert reader.read_bank_open() is False
        assert reader.bank_open is False

    def test_concurrent_reads_while_host_mutates(self):
        host = SimulatedHost(bank_open=False)
        reader = BankStateReader(host)
        results = []

        def mutate():
            for i in range(200):
                host.set_bank_open(i % 2 == 0)

        def read():
            for _ in range(200):
                results.append(reader.read_bank_open())

        t1 = threading.Thread(target=mutate)
        t2 = threading.Thread(target=read)
        t1.start()
        t2.start()
        t1.join()
        t2.join()
        assert len(results) == 200
        assert all(isinstance(r, bool) for r in results)
