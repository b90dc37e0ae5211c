"""
SceneController - Owns the schematic scene and keeps its topology consistent.

This module contains no widgets. The view host reports edit intents (items
added, wire points moved, nodes moved, wires drawn) and the controller
mutates the model, re-establishes the net partition, the junction flags
and the connector bindings, and then notifies views through an observer
pattern.

Connection rules:
    - A wire endpoint lying on the interior of another wire is a junction.
      The flag is set on the endpoint and the host wire records the
      attached wire in its connected_wires.
    - Two wires whose endpoints coincide share an endpoint. They are
      connected the same way (the wire that was there first is the host)
      but no junction flag is set.
    - A net is a connected component of the resulting graph.
"""

import logging
from collections import deque
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from PyQt6.QtCore import QCoreApplication, QTimer

from schemnet.models.errors import SerializationError, WireFloatingError
from schemnet.models.geometry import Point, Rect, add, distance, same_point, sub
from schemnet.models.item_factory import ItemFactory, item_factory
from schemnet.models.node import Node
from schemnet.models.settings import Settings
from schemnet.models.wire import Wire
from schemnet.models.wire_net import WireNet

from .commands import AddItemCommand, Command, MoveItemsCommand
from .undo_manager import UndoManager

logger = logging.getLogger(__name__)

DEFAULT_SCENE_RECT: Rect = (-500, -500, 1000, 1000)


class Mode(Enum):
    NORMAL = "normal"
    DRAWING_WIRE = "drawing_wire"


class SceneController:
    """
    Topology engine and edit surface for a schematic scene.

    Changes that should be undoable are wrapped in commands and run through
    execute(); the methods called by the commands (add_node, add_wire,
    move_items, ...) apply the change immediately without touching the
    history.

    Observer events:
        item_added (Node | Wire) - An item was added to the scene
        item_removed (Node | Wire) - An item was removed from the scene
        net_changed (WireNet) - A net was created, deleted, renamed or its wires changed
        net_highlighted (tuple[WireNet, bool]) - A net's highlight state changed
        dirty_changed (bool) - The scene became dirty (True) or clean (False)
        mode_changed (Mode) - The edit mode changed
        scene_loaded (None) - The scene was rebuilt from a container
        scene_cleared (None) - The scene was emptied
        model_loaded / model_saved (Path) - Sent by the FileController
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        factory: Optional[ItemFactory] = None,
        max_undo_depth: int = 100,
    ):
        self.settings = settings or Settings()
        self.factory = factory or item_factory
        self.scene_rect: Rect = DEFAULT_SCENE_RECT
        self.undo_manager = UndoManager(max_undo_depth, on_clean_changed=self._on_clean_changed)

        self._nodes: list[Node] = []
        self._nets: list[WireNet] = []
        self._observers: list[Callable[[str, Any], None]] = []

        # Notifications raised while an edit runs are queued until it completes
        self._pending: list[tuple[str, Any]] = []
        self._edit_depth = 0
        self._propagating_highlight = False

        # Removed items stay referenced until the next event loop turn
        self._keep_alive: list = []

        # Transient edit state
        self._mode = Mode.NORMAL
        self._new_wire: Optional[Wire] = None
        self._preview_point: Optional[Point] = None
        self._invert_wire_posture = True
        self._initial_positions: dict = {}
        self._drag_net_names: dict = {}

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Register a callback for model change events."""
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Unregister a previously registered callback."""
        if callback in self._observers:
            self._observers.remove(callback)

    def notify(self, event: str, data: Any) -> None:
        """Send an event to the observers on behalf of a collaborator."""
        self._notify(event, data)

    def _notify(self, event: str, data: Any) -> None:
        """Notify observers now, or once the running edit has completed."""
        if self._edit_depth > 0:
            if event == "net_changed" and any(e == event and d is data for e, d in self._pending):
                return
            self._pending.append((event, data))
            return
        self._emit(event, data)

    def _emit(self, event: str, data: Any) -> None:
        for observer in list(self._observers):
            try:
                observer(event, data)
            except (TypeError, AttributeError, RuntimeError) as e:
                logger.error("Error notifying observer: %s", e)

    @contextmanager
    def _edit(self):
        """Run an edit; queued notifications go out when the outermost edit ends."""
        if self._edit_depth == 0 and QCoreApplication.instance() is None:
            # Without an event loop the next edit intent is the next turn
            self._keep_alive.clear()
        self._edit_depth += 1
        try:
            yield
        finally:
            self._edit_depth -= 1
            if self._edit_depth == 0:
                while self._pending:
                    event, data = self._pending.pop(0)
                    self._emit(event, data)

    def _keep_alive_item(self, item) -> None:
        if not self._keep_alive and QCoreApplication.instance() is not None:
            QTimer.singleShot(0, self._release_kept_alive)
        self._keep_alive.append(item)

    def _release_kept_alive(self) -> None:
        self._keep_alive.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def nodes(self) -> list[Node]:
        return list(self._nodes)

    def nets(self) -> list[WireNet]:
        return list(self._nets)

    def wires(self) -> list[Wire]:
        """All wires, net by net."""
        wires = []
        for net in self._nets:
            wires.extend(net.wires())
        return wires

    def connectors(self) -> list:
        connectors = []
        for node in self._nodes:
            connectors.extend(node.connectors())
        return connectors

    def connection_points(self) -> list[Point]:
        """Scene positions of every connector."""
        return [c.scene_pos() for c in self.connectors()]

    def contains_node(self, node) -> bool:
        return any(n is node for n in self._nodes)

    def contains_wire(self, wire) -> bool:
        if not isinstance(wire, Wire):
            return False
        net = wire.net
        return net is not None and any(n is net for n in self._nets)

    def net(self, wire: Wire) -> Optional[WireNet]:
        """Return the net that contains wire."""
        return wire.net if self.contains_wire(wire) else None

    def nets_named(self, net_or_name) -> list[WireNet]:
        """Nets whose non-empty name matches (case-insensitively), the given net included."""
        name = net_or_name.name if isinstance(net_or_name, WireNet) else str(net_or_name)
        if not name:
            return []
        key = name.casefold()
        return [net for net in self._nets if net.name and net.name.casefold() == key]

    def nets_at(self, point: Point) -> list[WireNet]:
        """Nets with a segment passing through point."""
        return [net for net in self._nets if net.contains_point(point)]

    def wires_connected_to(self, wire: Wire) -> list[Wire]:
        """The connected component of wire within its net, wire itself first."""
        if not self.contains_wire(wire):
            return []
        for component in self._components(wire.net.wires()):
            if any(w is wire for w in component):
                return [wire] + [w for w in component if w is not wire]
        return [wire]

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> bool:
        """Add a node and bind its connectors to any wire endpoints under them."""
        if node is None or self.contains_node(node):
            return False
        with self._edit():
            self._nodes.append(node)
            self._notify("item_added", node)
            self.update_node_connections(node)
        return True

    def remove_node(self, node: Node) -> bool:
        """Remove a node; its connectors let go of their wires."""
        if not self.contains_node(node):
            return False
        with self._edit():
            for connector in node.connectors():
                connector.detach_wire()
            self._nodes.remove(node)
            self._keep_alive_item(node)
            self._notify("item_removed", node)
        return True

    def on_node_moved(self, node: Node) -> None:
        """Carry bound wire points along with a node that moved, then fix the topology."""
        if not self.contains_node(node):
            return
        with self._edit():
            self._after_node_transform(node, node.on_moved())

    def on_node_rotated(self, node: Node) -> None:
        if not self.contains_node(node):
            return
        with self._edit():
            self._after_node_transform(node, node.on_rotated())

    def _after_node_transform(self, node: Node, moved: list[tuple]) -> None:
        for wire, index in moved:
            if self.contains_wire(wire):
                self._update_wire_point(wire, index)
                self._refresh_neighbours(wire)
        self.update_node_connections(node)

    def rotate_node(self, node: Node, rotation: float) -> None:
        if not self.contains_node(node):
            return
        node.set_rotation(rotation)
        self.on_node_rotated(node)

    def update_node_connections(self, node: Node) -> None:
        """
        Bind free connectors of node to wire endpoints lying under them.

        Junction endpoints and endpoints already held by another connector
        are skipped.
        """
        with self._edit():
            for connector in node.connectors():
                if connector.is_attached():
                    continue
                position = connector.scene_pos()
                for wire in self.wires():
                    index = self._free_endpoint_at(wire, position, connector)
                    if index is not None:
                        connector.attach_wire(wire, index)
                        break

    def _free_endpoint_at(self, wire: Wire, position: Point, connector) -> Optional[int]:
        for index in wire.endpoint_indices():
            if not same_point(wire.point_absolute(index), position):
                continue
            if wire.point_is_junction(index):
                continue
            if self._is_bound(wire, index, exclude=connector):
                continue
            return index
        return None

    def _is_bound(self, wire: Wire, index: int, exclude=None) -> bool:
        for connector in self.connectors():
            if connector is exclude:
                continue
            if connector.attached_wire is wire and connector.attached_wire_point == index:
                return True
        return False

    # ------------------------------------------------------------------
    # Wires
    # ------------------------------------------------------------------

    def add_wire(self, wire: Wire) -> bool:
        """
        Install a wire whose points are already set.

        The wire starts out in a net of its own; attaching its endpoints
        (and the endpoints of other wires lying on it) may merge that net
        into existing ones.
        """
        if wire is None or wire.point_count() == 0 or self.contains_wire(wire):
            return False
        with self._edit():
            net = WireNet()
            net.add_wire(wire)
            self._add_net(net)
            self._notify("item_added", wire)
            for index in range(wire.point_count()):
                self._update_wire_point(wire, index)
            self._refresh_neighbours(wire)
        return True

    def remove_wire(self, wire: Wire) -> bool:
        """
        Remove a wire, break its connections and split its net if needed.
        """
        if not self.contains_wire(wire):
            return False
        with self._edit():
            for connector in self.connectors():
                if connector.attached_wire is wire:
                    connector.detach_wire()

            partners = []
            for other in self.wires():
                if other is wire:
                    continue
                if other.is_connected_to(wire) or wire.is_connected_to(other):
                    other.disconnect_wire(wire)
                    wire.disconnect_wire(other)
                    partners.append(other)

            net = wire.net
            net.remove_wire(wire)
            if net.is_empty():
                self._remove_net(net)
            else:
                self._notify("net_changed", net)
                self._split_net(net)

            for other in partners:
                self._refresh_junction_flags(other)

            self._keep_alive_item(wire)
            self._notify("item_removed", wire)
        return True

    def on_wire_point_moved_by_user(self, wire: Wire, index: int) -> None:
        """
        Re-establish connectors, junctions and nets after a wire point moved.

        Out-of-range indices and wires outside the scene are ignored.
        """
        if not self.contains_wire(wire) or not wire.is_valid_index(index):
            return
        with self._edit():
            self._update_wire_point(wire, index)
            self._refresh_neighbours(wire)

    def move_wire_point(self, wire: Wire, index: int, point: Point) -> bool:
        """Move a wire point to a scene position and update the topology."""
        if not self.contains_wire(wire) or not wire.is_valid_index(index):
            return False
        with self._edit():
            wire.move_point_to(index, point)
            self.on_wire_point_moved_by_user(wire, index)
        return True

    def on_wire_moved(self, wire: Wire) -> None:
        """Update the topology after a whole wire was translated."""
        if not self.contains_wire(wire):
            return
        with self._edit():
            for index in range(wire.point_count()):
                self._update_wire_point(wire, index)
            self._refresh_neighbours(wire)

    def move_items(self, items: Iterable, deltas: Iterable[Point]) -> None:
        """
        Translate items, each by its own delta, then fix the topology.

        Wires are handled before nodes so that a node dragged together with
        its wires does not move the wire points twice.
        """
        pairs = [(item, delta) for item, delta in zip(items, deltas)
                 if self.contains_wire(item) or self.contains_node(item)]
        wires = [(item, delta) for item, delta in pairs if isinstance(item, Wire)]
        nodes = [(item, delta) for item, delta in pairs if not isinstance(item, Wire)]
        with self._edit():
            for item, delta in wires + nodes:
                item.move_by(delta)
            for wire, _ in wires:
                self.on_wire_moved(wire)
            for node, _ in nodes:
                self.on_node_moved(node)

    # ------------------------------------------------------------------
    # Topology internals
    # ------------------------------------------------------------------

    def _on_endpoint(self, host: Wire, point: Point) -> bool:
        return any(same_point(point, host.point_absolute(i)) for i in host.endpoint_indices())

    def _touches(self, host: Wire, point: Point) -> bool:
        """Whether point attaches to host, as a junction or as a shared endpoint."""
        return host.point_is_on_wire(point) or self._on_endpoint(host, point)

    def _still_attached(self, host: Wire, wire: Wire, skip_index: Optional[int] = None) -> bool:
        """Whether an endpoint or junction of wire (other than skip_index) still touches host."""
        for index in sorted(set(wire.endpoint_indices()) | set(wire.junctions())):
            if index == skip_index:
                continue
            if self._touches(host, wire.point_absolute(index)):
                return True
        return False

    def _update_wire_point(self, wire: Wire, index: int) -> None:
        point = wire.point_absolute(index)

        # Detach connectors that no longer sit on the point
        for connector in self.connectors():
            if connector.attached_wire is wire and connector.attached_wire_point == index:
                if not same_point(connector.scene_pos(), point):
                    connector.detach_wire()

        # Attach free connectors that the point now sits on
        for connector in self.connectors():
            if not connector.is_attached() and same_point(connector.scene_pos(), point):
                connector.attach_wire(wire, index)

        if not wire.is_endpoint(index):
            return

        # Break connections to hosts the wire no longer touches
        for host in self.wires():
            if host is wire or not host.is_connected_to(wire):
                continue
            if self._touches(host, point) or self._still_attached(host, wire, skip_index=index):
                continue
            self._disconnect(host, wire)
        wire.set_point_is_junction(index, False)

        # Form new junctions and shared endpoints
        for host in self.wires():
            if host is wire:
                continue
            if host.point_is_on_wire(point):
                wire.set_point_is_junction(index, True)
                self._connect(host, wire)
            elif self._on_endpoint(host, point):
                self._connect(host, wire)

    def _refresh_neighbours(self, wire: Wire) -> None:
        """Reconsider the endpoints of wires attached to wire or now lying on it."""
        for other in self.wires():
            if other is wire:
                continue
            related = (
                wire.is_connected_to(other)
                or other.is_connected_to(wire)
                or any(self._touches(wire, other.point_absolute(j)) for j in other.endpoint_indices())
            )
            if not related:
                continue
            for index in other.endpoint_indices():
                self._update_wire_point(other, index)
            if wire.is_connected_to(other) and not self._still_attached(wire, other):
                self._disconnect(wire, other)

    def _refresh_junction_flags(self, wire: Wire) -> None:
        """Clear junction flags on endpoints that no longer lie on a host."""
        hosts = [h for h in self.wires() if h is not wire and h.is_connected_to(wire)]
        for index in wire.endpoint_indices():
            if wire.point_is_junction(index):
                point = wire.point_absolute(index)
                wire.set_point_is_junction(index, any(h.point_is_on_wire(point) for h in hosts))

    def _connect(self, host: Wire, wire: Wire) -> None:
        if host.is_connected_to(wire) or wire.is_connected_to(host):
            return
        host.connect_wire(wire)
        self._merge_nets(host.net, wire.net)

    def _disconnect(self, host: Wire, wire: Wire) -> None:
        host.disconnect_wire(wire)
        wire.disconnect_wire(host)
        if host.net is not None:
            self._split_net(host.net)

    def merge_nets(self, net: WireNet, other: WireNet) -> bool:
        """
        Merge other into net.

        Returns:
            False if both are the same net, True once other has been absorbed.
        """
        with self._edit():
            return self._merge_nets(net, other)

    def _merge_nets(self, net: Optional[WireNet], other: Optional[WireNet]) -> bool:
        if net is None or other is None or net is other:
            return False
        for wire in other.wires():
            other.remove_wire(wire)
            net.add_wire(wire)
        self._remove_net(other)
        self._notify("net_changed", net)
        logger.debug("Merged %r into %r", other, net)
        return True

    @staticmethod
    def _components(wires: list[Wire]) -> list[list[Wire]]:
        """Connected components of wires, each listed in the given order."""
        order = {id(w): i for i, w in enumerate(wires)}
        seen: set[int] = set()
        components = []
        for start in wires:
            if id(start) in seen:
                continue
            seen.add(id(start))
            component = [start]
            queue = deque([start])
            while queue:
                current = queue.popleft()
                for other in wires:
                    if id(other) in seen:
                        continue
                    if current.is_connected_to(other) or other.is_connected_to(current):
                        seen.add(id(other))
                        component.append(other)
                        queue.append(other)
            component.sort(key=lambda w: order[id(w)])
            components.append(component)
        return components

    def _split_net(self, net: WireNet) -> None:
        """Split net into one net per connected component; the first stays in net."""
        components = self._components(net.wires())
        if len(components) <= 1:
            return
        logger.debug("Splitting %r into %d nets", net, len(components))
        for component in components[1:]:
            new_net = WireNet()
            for wire in component:
                net.remove_wire(wire)
                new_net.add_wire(wire)
            self._add_net(new_net)
        self._notify("net_changed", net)

    def _add_net(self, net: WireNet) -> None:
        net.add_observer(self._on_net_event)
        self._nets.append(net)
        self._notify("net_changed", net)

    def _remove_net(self, net: WireNet) -> None:
        net.remove_observer(self._on_net_event)
        self._nets = [n for n in self._nets if n is not net]
        self._notify("net_changed", net)

    # ------------------------------------------------------------------
    # Net names & highlighting
    # ------------------------------------------------------------------

    def set_net_name(self, net: WireNet, name: str) -> None:
        with self._edit():
            net.set_name(name)

    def net_names(self) -> dict:
        """Map every wire to the name of its net."""
        return {wire: net.name for net in self._nets for wire in net.wires()}

    def restore_net_names(self, names: dict) -> None:
        """
        Rename each net after the first of its wires found in names.

        Used to put names back after an edit that merged nets has been
        reverted, since a merge drops the absorbed net's name.
        """
        with self._edit():
            for net in self._nets:
                for wire in net.wires():
                    if wire in names:
                        net.set_name(names[wire])
                        break

    def set_net_highlighted(self, net: WireNet, highlighted: bool) -> None:
        with self._edit():
            net.set_highlighted(highlighted)

    def _on_net_event(self, event: str, net: WireNet) -> None:
        if event == "name_changed":
            self._notify("net_changed", net)
            return
        if event != "highlight_changed":
            return

        self._notify("net_highlighted", (net, net.highlighted))

        # Nets sharing the name follow along; the guard stops them echoing back
        if self._propagating_highlight or not net.name:
            return
        self._propagating_highlight = True
        try:
            for other in self.nets_named(net):
                if other is not net:
                    other.set_highlighted(net.highlighted)
        finally:
            self._propagating_highlight = False

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def execute(self, command: Command) -> None:
        """Run a command and record it in the history."""
        with self._edit():
            self.undo_manager.execute(command)

    def undo(self) -> bool:
        with self._edit():
            return self.undo_manager.undo()

    def redo(self) -> bool:
        with self._edit():
            return self.undo_manager.redo()

    def is_dirty(self) -> bool:
        return not self.undo_manager.is_clean()

    def clear_is_dirty(self) -> None:
        self.undo_manager.set_clean()

    def _on_clean_changed(self, is_clean: bool) -> None:
        self._notify("dirty_changed", not is_clean)

    # ------------------------------------------------------------------
    # Dragging
    # ------------------------------------------------------------------

    def begin_drag(self, items: Iterable) -> None:
        """Snapshot the positions of the items about to be dragged."""
        self._initial_positions = {
            item: item.pos for item in items
            if self.contains_node(item) or self.contains_wire(item)
        }
        self._drag_net_names = self.net_names()

    def is_dragging(self) -> bool:
        return bool(self._initial_positions)

    def drag_to(self, offset: Point) -> None:
        """Move the dragged items to their start positions plus offset (no history)."""
        if not self._initial_positions:
            return
        items = list(self._initial_positions)
        deltas = [sub(add(self._initial_positions[item], offset), item.pos) for item in items]
        self.move_items(items, deltas)

    def end_drag(self) -> bool:
        """
        Finish a drag with a single undoable move.

        The items are put back where the drag started and the total
        translation is then applied through one MoveItemsCommand.

        Returns:
            True if a move was recorded.
        """
        if not self._initial_positions:
            return False
        items = list(self._initial_positions)
        deltas = [sub(item.pos, self._initial_positions[item]) for item in items]
        self._initial_positions = {}

        with self._edit():
            self.move_items(items, [(-dx, -dy) for dx, dy in deltas])
            self.restore_net_names(self._drag_net_names)
            self._drag_net_names = {}
            if all(dx == 0 and dy == 0 for dx, dy in deltas):
                return False
            self.execute(MoveItemsCommand(self, items, deltas))
        return True

    # ------------------------------------------------------------------
    # Modes & wire drawing
    # ------------------------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self._mode

    def set_mode(self, mode: Mode) -> None:
        if mode == self._mode:
            return
        if self._mode == Mode.DRAWING_WIRE:
            # Discard the wire being drawn
            self.cancel_wire()
        self._mode = mode
        self._notify("mode_changed", mode)

    @property
    def new_wire(self) -> Optional[Wire]:
        """The wire being drawn, not yet part of the scene."""
        return self._new_wire

    def begin_wire(self) -> None:
        self.set_mode(Mode.DRAWING_WIRE)
        self._new_wire = None
        self._preview_point = None

    def toggle_wire_posture(self) -> None:
        """Flip which way the corner of a straight-angle segment is placed."""
        self._invert_wire_posture = not self._invert_wire_posture

    def append_wire_point(self, point: Point) -> bool:
        """Add a clicked point (snapped to the grid) to the wire being drawn."""
        if self._mode != Mode.DRAWING_WIRE:
            return False
        snapped = self.settings.snap_to_grid(point)
        self._preview_point = None

        if self._new_wire is None:
            self._new_wire = Wire(pos=snapped)
            return self._new_wire.append_point(snapped)

        last = self._new_wire.last_point()
        if self.settings.route_straight_angles and last[0] != snapped[0] and last[1] != snapped[1]:
            self._new_wire.append_point(self._corner(last, snapped))
        return self._new_wire.append_point(snapped)

    def _corner(self, previous: Point, point: Point) -> Point:
        if self._invert_wire_posture:
            return (point[0], previous[1])
        return (previous[0], point[1])

    def update_wire_preview(self, point: Point) -> None:
        """Set the provisional point following the cursor."""
        if self._new_wire is None:
            return
        self._preview_point = self.settings.snap_to_grid(point)

    def wire_preview_points(self) -> list[Point]:
        """Points to draw for the wire in progress, provisional ones included."""
        if self._new_wire is None:
            return []
        points = self._new_wire.points_absolute()
        if self._preview_point is None:
            return points
        last = points[-1]
        if self.settings.route_straight_angles and last[0] != self._preview_point[0] \
                and last[1] != self._preview_point[1]:
            points.append(self._corner(last, self._preview_point))
        points.append(self._preview_point)
        return points

    def cancel_wire(self) -> None:
        self._new_wire = None
        self._preview_point = None

    def finalize_wire(self) -> Optional[Wire]:
        """
        Finish the wire being drawn and add it to the scene (undoable).

        The provisional cursor point is dropped. The wire must end on a
        connector or on another wire.

        Returns:
            The installed wire, or None if there was nothing to finish.

        Raises:
            WireFloatingError: If the last point is free. Nothing is changed.
        """
        wire = self._new_wire
        if self._mode != Mode.DRAWING_WIRE or wire is None or wire.point_count() < 2:
            return None

        last = wire.last_point()
        on_connector = any(same_point(p, last) for p in self.connection_points())
        on_wire = any(self._touches(other, last) for other in self.wires())
        if not (on_connector or on_wire):
            raise WireFloatingError(last)

        self._preview_point = None
        self._new_wire = None
        wire.simplify()
        self.execute(AddItemCommand(self, wire))
        return wire

    # ------------------------------------------------------------------
    # Whole-scene operations
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Remove everything and reset the history and the dirty flag."""
        with self._edit():
            self._initial_positions = {}
            self.cancel_wire()
            self._clear_items()
            self.undo_manager.clear()
            self._notify("scene_cleared", None)

    def _clear_items(self) -> None:
        for node in self._nodes:
            for connector in node.connectors():
                connector.detach_wire()
            self._keep_alive_item(node)
            self._notify("item_removed", node)
        self._nodes = []

        for net in self._nets:
            net.remove_observer(self._on_net_event)
            for wire in net.wires():
                self._keep_alive_item(wire)
                self._notify("item_removed", wire)
        self._nets = []

    def to_dict(self) -> dict:
        """Serialize the scene to a nested container."""
        x, y, width, height = self.scene_rect
        return {
            "scene": {"rect": {"x": x, "y": y, "width": width, "height": height}},
            "nodes": [node.to_dict() for node in self._nodes],
            "nets": [net.to_dict() for net in self._nets],
        }

    def load_dict(self, data: dict) -> None:
        """
        Replace the scene with the contents of a container.

        Nodes and nets that cannot be restored are logged and skipped.
        Connectors are bound to wire points lying under them and junctions
        are rediscovered. The history is cleared and the scene is clean.
        """
        with self._edit():
            self._initial_positions = {}
            self.cancel_wire()
            self._clear_items()

            scene = data.get("scene")
            rect = scene.get("rect") if isinstance(scene, dict) else None
            if isinstance(rect, dict):
                self.scene_rect = (
                    rect.get("x", 0), rect.get("y", 0),
                    rect.get("width", 0), rect.get("height", 0),
                )

            for node_data in data.get("nodes", []):
                node = self.factory.from_dict(node_data)
                if not isinstance(node, Node):
                    logger.error("Couldn't restore node, skipping")
                    continue
                self._nodes.append(node)
                self._notify("item_added", node)

            for net_data in data.get("nets", []):
                try:
                    net = WireNet.from_dict(net_data, self.factory)
                except (SerializationError, AttributeError) as e:
                    logger.error("Couldn't restore net, skipping: %s", e)
                    continue
                if net.is_empty():
                    continue
                self._add_net(net)
                for wire in net.wires():
                    self._notify("item_added", wire)

            # Attach the wires to the connectors
            for wire in self.wires():
                for connector in self.connectors():
                    for index, point in enumerate(wire.points_absolute()):
                        if distance(connector.scene_pos(), point) < 1:
                            connector.attach_wire(wire, index)
                            break

            # Find junctions and shared endpoints
            wires = self.wires()
            for wire in wires:
                for other in wires:
                    if other is wire:
                        continue
                    for index in other.endpoint_indices():
                        point = other.point_absolute(index)
                        if wire.point_is_on_wire(point):
                            self._connect(wire, other)
                            other.set_point_is_junction(index, True)
                        elif self._on_endpoint(wire, point):
                            self._connect(wire, other)
            for wire in wires:
                self._refresh_junction_flags(wire)

            # A stored net may hold wires that do not touch
            for net in self.nets():
                self._split_net(net)

            self.undo_manager.clear()
            self.undo_manager.set_clean()
            self._notify("scene_loaded", None)
