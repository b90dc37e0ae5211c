"""
WireNet - the set of wires that are electrically connected.

A net owns its wires and a label showing its name. It notifies registered
observers when its highlight state changes, which is how the scene keeps
nets sharing a name highlighted together.
"""

import logging
from typing import Any, Callable

from .errors import SerializationError
from .geometry import Point, Segment, point_on_segment
from .label import Label
from .wire import Wire

logger = logging.getLogger(__name__)


class WireNet:
    """
    Ordered set of wires forming one connected component.

    Observer events:
        highlight_changed (WireNet) - The net's highlight state changed
        name_changed (WireNet) - The net was renamed
    """

    def __init__(self, name: str = ""):
        self._wires: list[Wire] = []
        self._name = name
        self._highlighted = False
        self.label = Label(text=name)
        self._observers: list[Callable[[str, Any], None]] = []

    def add_observer(self, callback: Callable[[str, Any], None]) -> None:
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: Callable[[str, Any], None]) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, event: str) -> None:
        for observer in list(self._observers):
            try:
                observer(event, self)
            except (TypeError, AttributeError, RuntimeError) as e:
                logger.error("Error notifying net observer: %s", e)

    # --- Wires ---

    def wires(self) -> list[Wire]:
        return list(self._wires)

    def contains(self, wire: Wire) -> bool:
        return any(w is wire for w in self._wires)

    def add_wire(self, wire: Wire) -> bool:
        if wire is None or self.contains(wire):
            return False
        self._wires.append(wire)
        wire._set_net(self)
        return True

    def remove_wire(self, wire: Wire) -> bool:
        if not self.contains(wire):
            return False
        self._wires.remove(wire)
        if wire.net is self:
            wire._set_net(None)
        return True

    def is_empty(self) -> bool:
        return not self._wires

    def line_segments(self) -> list[Segment]:
        """All segments of all wires, in wire order."""
        segments = []
        for wire in self._wires:
            segments.extend(wire.line_segments())
        return segments

    def contains_point(self, point: Point) -> bool:
        return any(point_on_segment(a, b, point) for a, b in self.line_segments())

    # --- Name & highlight ---

    @property
    def name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        if name == self._name:
            return
        self._name = name
        self.label.text = name
        self._notify("name_changed")

    @property
    def highlighted(self) -> bool:
        return self._highlighted

    def set_highlighted(self, highlighted: bool) -> None:
        """Set the highlight state of the net and its label."""
        if highlighted == self._highlighted:
            return
        self._highlighted = highlighted
        self.label.set_highlighted(highlighted)
        self._notify("highlight_changed")

    # --- Serialization ---

    def to_dict(self) -> dict:
        return {
            "name": self._name,
            "label": self.label.to_dict(),
            "wires": [w.to_dict() for w in self._wires],
        }

    @classmethod
    def from_dict(cls, data: dict, factory=None) -> "WireNet":
        """
        Deserialize a net and its wires.

        Args:
            data: The net container.
            factory: Optional ItemFactory used to build the wires and label,
                so that custom wire types survive a round trip.

        Raises:
            SerializationError: If the wire list is missing or a wire is invalid.
        """
        wires_data = data.get("wires")
        if not isinstance(wires_data, list):
            raise SerializationError("Net container is missing its 'wires' list.")

        net = cls(name=data.get("name", ""))
        label_data = data.get("label")
        if isinstance(label_data, dict):
            label = factory.from_dict(label_data) if factory else Label.from_dict(label_data)
            if isinstance(label, Label):
                label.text = net.name
                net.label = label

        for wire_data in wires_data:
            wire = factory.from_dict(wire_data) if factory else Wire.from_dict(wire_data)
            if not isinstance(wire, Wire):
                raise SerializationError("Net container holds an item that is not a wire.")
            net.add_wire(wire)
        return net

    def __repr__(self) -> str:
        label = self._name or "<unnamed>"
        return f"WireNet({label}, wires={len(self._wires)})"

