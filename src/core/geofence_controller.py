"""
Geofence Controller Interface Module.

Defines the imperative interface a host application uses to drive the
geofence editor without the built-in buttons. Hosts receive the controller
directly (the editor widget implements it), no widget tree search is
involved.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class InteractiveMapGeofenceController(ABC):
    """
    Abstract control surface of the geofence editor.

    Each operation is equivalent to pressing the matching built-in button.
    """

    @abstractmethod
    def toggle_map_type(self) -> None:
        """Switches between the normal and satellite basemap."""
        pass

    @abstractmethod
    def toggle_edit_mode(self) -> None:
        """Switches between view and edit mode."""
        pass

    @abstractmethod
    def delete_last_vertex(self) -> None:
        """Removes the most recently added vertex, if any."""
        pass

    @abstractmethod
    def clear_polygon(self) -> None:
        """Removes every vertex."""
        pass


def controller_for(obj: Any) -> Optional[InteractiveMapGeofenceController]:
    """
    Returns ``obj`` as a controller when it implements the interface.

    Hosts holding an arbitrary widget reference treat None as
    "controls unavailable".

    Args:
        obj: Any object, typically a widget.

    Returns:
        Optional[InteractiveMapGeofenceController]: The controller or None.
    """
    if isinstance(obj, InteractiveMapGeofenceController):
        return obj
    return None
