"""In-memory host widget tree for the standalone runner and tests."""

import threading
from dataclasses import dataclass
from typing import Dict, Optional

from bankstate.host.api import ComponentID


@dataclass
class SimulatedWidget:
    is_hidden: bool = False


class HostNotReadyError(RuntimeError):
    """Raised by SimulatedHost lookups while fail_lookups is set (client not logged in / loading)."""


class SimulatedHost:
    """WidgetHost backed by a dict. set_bank_open() mimics the bank interface opening/closing."""

    def __init__(self, bank_open: bool = False):
        self._lock = threading.Lock()
        self._widgets: Dict[int, SimulatedWidget] = {}
        self.fail_lookups = False
        self.set_bank_open(bank_open)

    def lookup_widget(self, component_id: int) -> Optional[SimulatedWidget]:
        if self.fail_lookups:
            raise HostNotReadyError("widget tree not available")
        with self._lock:
            return self._widgets.get(component_id)

    def set_widget(self, component_id: int, widget: SimulatedWidget) -> None:
        with self._lock:
            self._widgets[component_id] = widget

    def remove_widget(self, component_id: int) -> None:
        with self._lock:
            self._widgets.pop(component_id, None)

    def set_bank_open(self, bank_open: bool) -> None:
        """Bank container exists in both cases; closed means hidden."""
        self.set_widget(ComponentID.BANK_CONTAINER, SimulatedWidget(is_hidden=not bank_open))

    def toggle_bank(self) -> bool:
        with self._lock:
            widget = self._widgets.get(ComponentID.BANK_CONTAINER)
            now_open = widget is None or widget.is_hidden
            self._widgets[ComponentID.BANK_CONTAINER] = SimulatedWidget(is_hidden=not now_open)
            return now_open
