"""
Connector - a named attachment site on a node.

A connector may be bound to one point of one wire. When its node moves,
the connector drags the bound wire point along (on_moved()).
"""

import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .errors import SerializationError
from .geometry import Point, clip_point_to_rect, clip_point_to_rect_outline, sub

CONNECTOR_TYPE_ID = "connector"


class SnapPolicy(Enum):
    """Where a connector may be placed relative to its node."""

    ANYWHERE = "anywhere"
    NODE_RECT = "node_rect"
    NODE_RECT_OUTLINE = "node_rect_outline"
    NODE_SHAPE = "node_shape"


@dataclass(eq=False)
class Connector:
    """Attachment point with a position relative to its parent node."""

    pos: Point = (0.0, 0.0)
    text: str = ""
    snap_policy: SnapPolicy = SnapPolicy.NODE_RECT_OUTLINE
    snap_to_grid: bool = True

    _node_ref: Optional[weakref.ref] = field(default=None, init=False, repr=False)
    _wire_ref: Optional[weakref.ref] = field(default=None, init=False, repr=False)
    _wire_point_index: int = field(default=-1, init=False, repr=False)

    item_type_id = CONNECTOR_TYPE_ID

    @property
    def node(self):
        return self._node_ref() if self._node_ref is not None else None

    def _set_node(self, node) -> None:
        self._node_ref = weakref.ref(node) if node is not None else None

    def scene_pos(self) -> Point:
        """Absolute position of the connector in the scene."""
        node = self.node
        if node is None:
            return self.pos
        return node.map_to_scene(self.pos)

    def set_pos(self, pos: Point, settings=None) -> None:
        """Place the connector, honouring the snap policy and snap-to-grid."""
        node = self.node
        if node is not None:
            rect = node.size_rect()
            if self.snap_policy == SnapPolicy.NODE_RECT:
                pos = clip_point_to_rect(pos, rect)
            elif self.snap_policy in (SnapPolicy.NODE_RECT_OUTLINE, SnapPolicy.NODE_SHAPE):
                # Node shapes are presentational; the size rect outline stands in for them
                pos = clip_point_to_rect_outline(pos, rect)
        if settings is not None and self.snap_to_grid:
            pos = settings.snap_to_grid(pos)
        self.pos = pos

    # --- Wire binding ---

    @property
    def attached_wire(self):
        return self._wire_ref() if self._wire_ref is not None else None

    @property
    def attached_wire_point(self) -> int:
        return self._wire_point_index

    def is_attached(self) -> bool:
        return self.attached_wire is not None

    def attach_wire(self, wire, index: int) -> bool:
        """Bind to a wire point, replacing any previous binding."""
        if wire is None or not wire.is_valid_index(index):
            return False
        self._wire_ref = weakref.ref(wire)
        self._wire_point_index = index
        return True

    def detach_wire(self) -> None:
        self._wire_ref = None
        self._wire_point_index = -1

    def on_moved(self):
        """
        Drag the bound wire point to the connector's scene position.

        Returns:
            The (wire, index) that was moved, or None if nothing is bound.
        """
        wire = self.attached_wire
        if wire is None or not wire.is_valid_index(self._wire_point_index):
            return None
        index = self._wire_point_index
        move_by = sub(self.scene_pos(), wire.point_absolute(index))
        wire.move_point_by(index, move_by)
        return wire, index

    # --- Serialization ---

    def to_dict(self) -> dict:
        return {
            "item_type_id": self.item_type_id,
            "pos": {"x": self.pos[0], "y": self.pos[1]},
            "text": self.text,
            "snap_policy": self.snap_policy.value,
            "snap_to_grid": self.snap_to_grid,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Connector":
        if not isinstance(data, dict):
            raise SerializationError(f"Connector container is not a mapping: {data!r}")
        pos = data.get("pos")
        if not isinstance(pos, dict):
            raise SerializationError("Connector container is missing 'pos'.")
        try:
            policy = SnapPolicy(data.get("snap_policy", SnapPolicy.NODE_RECT_OUTLINE.value))
        except ValueError as e:
            raise SerializationError(f"Unknown connector snap policy: {e}") from e
        return cls(
            pos=(pos.get("x", 0.0), pos.get("y", 0.0)),
            text=data.get("text", ""),
            snap_policy=policy,
            snap_to_grid=data.get("snap_to_grid", True),
        )

    def __repr__(self) -> str:
        return f"Connector({self.text!r} at {self.pos})"
