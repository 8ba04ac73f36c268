"""Host collaborators: widget lookup, config manager, event bus, simulated host."""

from bankstate.host.api import ComponentID, Widget, WidgetHost
from bankstate.host.config_manager import ConfigManager
from bankstate.host.events import ConfigChanged, EventBus
from bankstate.host.simulated import SimulatedHost, SimulatedWidget

__all__ = [
    "ComponentID",
    "ConfigChanged",
    "ConfigManager",
    "EventBus",
    "SimulatedHost",
    "SimulatedWidget",
    "Widget",
    "WidgetHost",
]
