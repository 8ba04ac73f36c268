"""Host client interfaces consumed by the plugin: widget lookup."""

from typing import Optional, Protocol


class ComponentID:
    """Packed widget component ids: (interface id << 16) | child index."""

    BANK_INTERFACE = 12
    BANK_CONTAINER = (BANK_INTERFACE << 16) | 1  # 786433


class Widget(Protocol):
    """Host-owned UI element. Only visibility is observed."""

    @property
    def is_hidden(self) -> bool: ...


class WidgetHost(Protocol):
    """Widget tree owned by the host client (mutated by the host's main thread)."""

    def lookup_widget(self, component_id: int) -> Optional[Widget]: ...
