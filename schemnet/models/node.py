"""
Node - Pure Python data model for a schematic node (a component body).

A node has a position, a size and a rotation and owns an ordered list of
connectors. Rotation is in degrees, clockwise, about the centre of the
node's size rect.
"""

from dataclasses import dataclass, field

from .connector import Connector
from .errors import SerializationError
from .geometry import Point, Rect, add, rotate_point

NODE_TYPE_ID = "node"


@dataclass(eq=False)
class Node:
    """Container of connectors placed on the scene."""

    pos: Point = (0.0, 0.0)
    size: tuple[float, float] = (40.0, 40.0)
    rotation: float = 0.0
    text: str = ""
    _connectors: list[Connector] = field(default_factory=list, init=False, repr=False)

    item_type_id = NODE_TYPE_ID

    def connectors(self) -> list[Connector]:
        """The owned connectors, in the order they were added."""
        return list(self._connectors)

    def add_connector(self, connector: Connector) -> bool:
        if connector is None or connector in self._connectors:
            return False
        connector._set_node(self)
        self._connectors.append(connector)
        return True

    def remove_connector(self, connector: Connector) -> bool:
        if connector not in self._connectors:
            return False
        connector.detach_wire()
        connector._set_node(None)
        self._connectors.remove(connector)
        return True

    # --- Geometry ---

    def size_rect(self) -> Rect:
        """The node's body in local coordinates."""
        return (0.0, 0.0, self.size[0], self.size[1])

    def center(self) -> Point:
        return (self.size[0] / 2, self.size[1] / 2)

    def map_to_scene(self, local: Point) -> Point:
        """Map a local point (e.g. a connector position) to scene coordinates."""
        return add(self.pos, rotate_point(local, self.rotation, self.center()))

    def connection_points_absolute(self) -> list[Point]:
        return [c.scene_pos() for c in self._connectors]

    def set_pos(self, pos: Point) -> None:
        self.pos = pos

    def move_by(self, delta: Point) -> None:
        self.pos = add(self.pos, delta)

    def set_rotation(self, degrees: float) -> None:
        self.rotation = degrees % 360

    # --- Connector fan-out ---

    def on_moved(self) -> list[tuple]:
        """
        Let every bound connector drag its wire point along.

        Returns:
            The (wire, index) pairs that were moved.
        """
        moved = []
        for connector in self._connectors:
            result = connector.on_moved()
            if result is not None:
                moved.append(result)
        return moved

    def on_rotated(self) -> list[tuple]:
        return self.on_moved()

    # --- Serialization ---

    def to_dict(self) -> dict:
        return {
            "item_type_id": self.item_type_id,
            "pos": {"x": self.pos[0], "y": self.pos[1]},
            "size": {"width": self.size[0], "height": self.size[1]},
            "rotation": self.rotation,
            "text": self.text,
            "connectors": [c.to_dict() for c in self._connectors],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        """
        Deserialize a node.

        Raises:
            SerializationError: If the position or connector list is missing,
                or a connector cannot be restored.
        """
        pos = data.get("pos")
        if not isinstance(pos, dict):
            raise SerializationError("Node container is missing 'pos'.")
        connectors = data.get("connectors")
        if not isinstance(connectors, list):
            raise SerializationError("Node container is missing its 'connectors' list.")
        size = data.get("size")
        if not isinstance(size, dict):
            size = {}
        node = cls(
            pos=(pos.get("x", 0.0), pos.get("y", 0.0)),
            size=(size.get("width", 40.0), size.get("height", 40.0)),
            rotation=data.get("rotation", 0.0),
            text=data.get("text", ""),
        )
        for connector_data in connectors:
            node.add_connector(Connector.from_dict(connector_data))
        return node

    def __repr__(self) -> str:
        return f"Node({self.text!r} at {self.pos}, connectors={len(self._connectors)})"
