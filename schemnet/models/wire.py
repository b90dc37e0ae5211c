"""
Wire - Pure Python data model for a schematic wire.

A wire is an ordered polyline. Its points are stored relative to the
wire's own origin (pos); all public mutators take absolute scene
coordinates, like the view hands them over. Mutators fail soft: an
out-of-range index is ignored and reported by a False return value.
Topological legality is never checked here, that is the job of the
scene controller.
"""

import weakref
from dataclasses import dataclass, field
from typing import Optional

from .errors import SerializationError
from .geometry import Point, Rect, Segment, add, bounding_rect, point_on_segment, same_point, sub

WIRE_TYPE_ID = "wire"


@dataclass
class WirePoint:
    """A polyline point plus its junction flag.

    A junction is an endpoint bonded onto the interior of another wire.
    """

    x: float
    y: float
    is_junction: bool = False

    def to_point(self) -> Point:
        return (self.x, self.y)


@dataclass(eq=False)
class Wire:
    """
    Polyline wire with junction flags and a list of attached wires.

    connected_wires holds the wires whose endpoints sit on this wire (this
    wire is their host). Both that list and the owning net are weak
    references: the scene's nets own the wires.
    """

    pos: Point = (0.0, 0.0)
    points: list[WirePoint] = field(default_factory=list)

    _connected: weakref.WeakSet = field(default_factory=weakref.WeakSet, init=False, repr=False)
    _net_ref: Optional[weakref.ref] = field(default=None, init=False, repr=False)

    item_type_id = WIRE_TYPE_ID

    # --- Point access ---

    def point_count(self) -> int:
        return len(self.points)

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.points)

    def points_relative(self) -> list[Point]:
        return [p.to_point() for p in self.points]

    def points_absolute(self) -> list[Point]:
        """Return the polyline in scene coordinates."""
        return [add(self.pos, p.to_point()) for p in self.points]

    def point_absolute(self, index: int) -> Optional[Point]:
        if not self.is_valid_index(index):
            return None
        return add(self.pos, self.points[index].to_point())

    def first_point(self) -> Optional[Point]:
        return self.point_absolute(0)

    def last_point(self) -> Optional[Point]:
        return self.point_absolute(len(self.points) - 1)

    def endpoint_indices(self) -> list[int]:
        """Indices of the first and last point (a single index for one-point wires)."""
        if not self.points:
            return []
        last = len(self.points) - 1
        return [0] if last == 0 else [0, last]

    def is_endpoint(self, index: int) -> bool:
        return index in self.endpoint_indices()

    def junctions(self) -> list[int]:
        """Indices of every point flagged as a junction."""
        return [i for i, p in enumerate(self.points) if p.is_junction]

    def point_is_junction(self, index: int) -> bool:
        return self.is_valid_index(index) and self.points[index].is_junction

    def set_point_is_junction(self, index: int, is_junction: bool) -> bool:
        if not self.is_valid_index(index):
            return False
        self.points[index].is_junction = is_junction
        return True

    # --- Point editing ---

    def _make_point(self, point: Point) -> WirePoint:
        x, y = sub(point, self.pos)
        return WirePoint(x, y)

    def append_point(self, point: Point) -> bool:
        """Append a scene point; ignored if it equals the current last point."""
        if self.points and same_point(point, self.last_point()):
            return False
        self.points.append(self._make_point(point))
        return True

    def prepend_point(self, point: Point) -> bool:
        """Prepend a scene point; ignored if it equals the current first point."""
        if self.points and same_point(point, self.first_point()):
            return False
        self.points.insert(0, self._make_point(point))
        return True

    def insert_point(self, index: int, point: Point) -> bool:
        if not 0 <= index <= len(self.points):
            return False
        self.points.insert(index, self._make_point(point))
        return True

    def remove_point(self, index: int) -> bool:
        """Remove a point, unless that would leave the wire without points."""
        if not self.is_valid_index(index) or len(self.points) <= 1:
            return False
        del self.points[index]
        return True

    def remove_last_point(self) -> bool:
        return self.remove_point(len(self.points) - 1)

    def move_point_to(self, index: int, point: Point) -> bool:
        if not self.is_valid_index(index):
            return False
        wire_point = self.points[index]
        wire_point.x, wire_point.y = sub(point, self.pos)
        return True

    def move_point_by(self, index: int, delta: Point) -> bool:
        if not self.is_valid_index(index):
            return False
        wire_point = self.points[index]
        wire_point.x += delta[0]
        wire_point.y += delta[1]
        return True

    def set_pos(self, pos: Point) -> None:
        self.pos = pos

    def move_by(self, delta: Point) -> None:
        """Translate the whole wire."""
        self.pos = add(self.pos, delta)

    def simplify(self) -> None:
        """
        Remove duplicate and collinear points.

        The first and last points are always kept, and so is every interior
        point flagged as a junction. Duplicates merge their junction flags.
        """
        if len(self.points) < 2:
            return

        result = [self.points[0]]
        for point in self.points[1:]:
            if same_point(point.to_point(), result[-1].to_point()):
                result[-1].is_junction = result[-1].is_junction or point.is_junction
                continue
            result.append(point)

        i = 1
        while i < len(result) - 1:
            prev, mid, nxt = result[i - 1], result[i], result[i + 1]
            if not mid.is_junction and point_on_segment(prev.to_point(), nxt.to_point(), mid.to_point()):
                del result[i]
                # The previous point has a new neighbour, look at it again
                i = max(1, i - 1)
            else:
                i += 1

        self.points = result

    # --- Geometry ---

    def line_segments(self) -> list[Segment]:
        points = self.points_absolute()
        return [(points[i], points[i + 1]) for i in range(len(points) - 1)]

    def point_is_on_wire(self, point: Point) -> bool:
        """
        Check whether a scene point lies on the interior of the polyline.

        Interior means on any segment but not on the first or last point:
        touching an endpoint is a shared endpoint, not a junction.
        """
        points = self.points_absolute()
        if len(points) < 2:
            return False
        if same_point(point, points[0]) or same_point(point, points[-1]):
            return False
        return any(point_on_segment(a, b, point) for a, b in self.line_segments())

    def bounding_rect(self) -> Rect:
        return bounding_rect(self.points_absolute())

    # --- Connectivity ---

    @property
    def connected_wires(self) -> set["Wire"]:
        """Wires attached to this one (a snapshot, safe to iterate while editing)."""
        return set(self._connected)

    def connect_wire(self, wire: "Wire") -> None:
        if wire is not None and wire is not self:
            self._connected.add(wire)

    def disconnect_wire(self, wire: "Wire") -> None:
        self._connected.discard(wire)

    def is_connected_to(self, wire: "Wire") -> bool:
        return wire in self._connected

    @property
    def net(self):
        """The owning WireNet, or None if the wire is not part of a scene."""
        return self._net_ref() if self._net_ref is not None else None

    def _set_net(self, net) -> None:
        self._net_ref = weakref.ref(net) if net is not None else None

    # --- Serialization ---

    def to_dict(self) -> dict:
        return {
            "item_type_id": self.item_type_id,
            "pos": {"x": self.pos[0], "y": self.pos[1]},
            "points": [{"x": p.x, "y": p.y, "junction": p.is_junction} for p in self.points],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Wire":
        points = data.get("points")
        if not isinstance(points, list):
            raise SerializationError("Wire container is missing its 'points' list.")
        if not points:
            raise SerializationError("Wire container has no points.")
        if not all(isinstance(p, dict) for p in points):
            raise SerializationError("Wire container holds a point that is not a mapping.")
        pos = data.get("pos", {})
        wire = cls(pos=(pos.get("x", 0.0), pos.get("y", 0.0)))
        wire.points = [
            WirePoint(p.get("x", 0.0), p.get("y", 0.0), bool(p.get("junction", False)))
            for p in points
        ]
        return wire

    def __repr__(self) -> str:
        return f"Wire({self.points_absolute()})"
