"""
Pure Python data models for schemnet.

This package contains Qt-free data classes for schematic items
(nodes, connectors, wires, labels) and the nets that group wires.
"""

from .connector import Connector, SnapPolicy
from .errors import SchemnetError, SerializationError, WireFloatingError
from .item_factory import Item, ItemFactory, item_factory
from .label import Label
from .node import Node
from .settings import Settings, load_settings, save_settings
from .wire import Wire, WirePoint
from .wire_net import WireNet

__all__ = [
    "Connector",
    "SnapPolicy",
    "SchemnetError",
    "SerializationError",
    "WireFloatingError",
    "Item",
    "ItemFactory",
    "item_factory",
    "Label",
    "Node",
    "Settings",
    "load_settings",
    "save_settings",
    "Wire",
    "WirePoint",
    "WireNet",
]
