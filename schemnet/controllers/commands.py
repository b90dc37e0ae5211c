"""
Command Pattern Implementation for Undo/Redo.

Each command stores minimal state needed to undo/redo an operation.
Commands are executed through the SceneController so that every change
goes through the topology engine and keeps the nets consistent.
"""

from abc import ABC, abstractmethod
from typing import Optional

from schemnet.models.geometry import Point
from schemnet.models.node import Node
from schemnet.models.wire import Wire


class Command(ABC):
    """Base class for undoable commands."""

    @abstractmethod
    def execute(self) -> None:
        """Execute the command (perform the action)."""
        pass

    @abstractmethod
    def undo(self) -> None:
        """Undo the command (reverse the action)."""
        pass

    def get_description(self) -> str:
        """Return a human-readable description of this command."""
        return self.__class__.__name__


def _item_name(item) -> str:
    if isinstance(item, Wire):
        return "wire"
    if isinstance(item, Node):
        return item.text or "node"
    return type(item).__name__.lower()


class AddItemCommand(Command):
    """Command to add a node or a wire to the scene."""

    def __init__(self, controller, item):
        self.controller = controller
        self.item = item

    def execute(self) -> None:
        if isinstance(self.item, Wire):
            self.controller.add_wire(self.item)
        else:
            self.controller.add_node(self.item)

    def undo(self) -> None:
        if isinstance(self.item, Wire):
            self.controller.remove_wire(self.item)
        else:
            self.controller.remove_node(self.item)

    def get_description(self) -> str:
        return f"Add {_item_name(self.item)}"


class RemoveItemCommand(Command):
    """Command to remove a node or a wire from the scene.

    Removed items stay referenced by the command so that undo can put the
    very same objects back.
    """

    def __init__(self, controller, item):
        self.controller = controller
        self.item = item
        self.net_name = ""
        self.bindings: list[tuple] = []

    def execute(self) -> None:
        if isinstance(self.item, Wire):
            net = self.item.net
            self.net_name = net.name if net else ""
            self.controller.remove_wire(self.item)
        else:
            # Remember which wire points the connectors held
            self.bindings = [
                (connector, connector.attached_wire, connector.attached_wire_point)
                for connector in self.item.connectors()
                if connector.is_attached()
            ]
            self.controller.remove_node(self.item)

    def undo(self) -> None:
        if isinstance(self.item, Wire):
            self.controller.add_wire(self.item)
            net = self.item.net
            if net is not None and self.net_name and not net.name:
                self.controller.set_net_name(net, self.net_name)
        else:
            self.controller.add_node(self.item)
            for connector, wire, index in self.bindings:
                if self.controller.contains_wire(wire):
                    connector.attach_wire(wire, index)

    def get_description(self) -> str:
        return f"Remove {_item_name(self.item)}"


class MoveItemsCommand(Command):
    """Command to translate several items, each by its own delta."""

    def __init__(self, controller, items: list, deltas: list[Point]):
        self.controller = controller
        self.items = list(items)
        self.deltas = list(deltas)
        self.net_names: dict = {}

    def execute(self) -> None:
        self.net_names = self.controller.net_names()
        self.controller.move_items(self.items, self.deltas)

    def undo(self) -> None:
        self.controller.move_items(self.items, [(-dx, -dy) for dx, dy in self.deltas])
        self.controller.restore_net_names(self.net_names)

    def get_description(self) -> str:
        if len(self.items) == 1:
            return f"Move {_item_name(self.items[0])}"
        return f"Move {len(self.items)} items"


class MoveWirePointCommand(Command):
    """Command to move a single wire point to a new scene position."""

    def __init__(
        self,
        controller,
        wire: Wire,
        index: int,
        new_point: Point,
        old_point: Optional[Point] = None,
    ):
        self.controller = controller
        self.wire = wire
        self.index = index
        self.new_point = new_point
        self.old_point = old_point
        self.net_names: dict = {}

    def execute(self) -> None:
        """Move the point and store the old position and net names."""
        if self.old_point is None:
            self.old_point = self.wire.point_absolute(self.index)
        self.net_names = self.controller.net_names()
        self.controller.move_wire_point(self.wire, self.index, self.new_point)

    def undo(self) -> None:
        if self.old_point is not None:
            self.controller.move_wire_point(self.wire, self.index, self.old_point)
            self.controller.restore_net_names(self.net_names)

    def get_description(self) -> str:
        return "Move wire point"


class RotateNodeCommand(Command):
    """Command to rotate a node to a new angle."""

    def __init__(self, controller, node: Node, rotation: float):
        self.controller = controller
        self.node = node
        self.rotation = rotation
        self.old_rotation: Optional[float] = None

    def execute(self) -> None:
        self.old_rotation = self.node.rotation
        self.controller.rotate_node(self.node, self.rotation)

    def undo(self) -> None:
        if self.old_rotation is not None:
            self.controller.rotate_node(self.node, self.old_rotation)

    def get_description(self) -> str:
        return f"Rotate {_item_name(self.node)}"


class CompoundCommand(Command):
    """Command that groups multiple commands into a single undo step."""

    def __init__(self, commands: list[Command], description: str = "Multiple actions"):
        self.commands = commands
        self.description = description

    def execute(self) -> None:
        """Execute all commands in order."""
        for command in self.commands:
            command.execute()

    def undo(self) -> None:
        """Undo all commands in reverse order."""
        for command in reversed(self.commands):
            command.undo()

    def get_description(self) -> str:
        return self.description
