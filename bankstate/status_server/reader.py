"""Read bank open/closed from the host widget tree. Never raises: any host fault reads as closed."""

import logging

from bankstate.host.api import ComponentID, WidgetHost

logger = logging.getLogger(__name__)


class BankStateReader:
    """Best-effort snapshot of the bank container's visibility; no synchronization with the host thread."""

    def __init__(self, host: WidgetHost, component_id: int = ComponentID.BANK_CONTAINER) -> None:
        self._host = host
        self._component_id = component_id
        self._bank_open = False

    @property
    def bank_open(self) -> bool:
        """Value from the last read (False before the first read)."""
        return self._bank_open

    def read_bank_open(self) -> bool:
        """True iff the bank container exists and is not hidden. Absent widget or host error -> False."""
        try:
            widget = self._host.lookup_widget(self._component_id)
            bank_open = widget is not None and not widget.is_hidden
        except Exception as e:
            # Don't ever break the host from this plugin
            logger.debug("Bank widget lookup failed: %s", e)
            bank_open = False
        self._bank_open = bool(bank_open)
        return self._bank_open
