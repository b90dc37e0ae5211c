"""
Shared test fixtures for the schemnet test suite.

All fixtures build pure-Python model objects; no QApplication is created,
so the scene controller releases removed items at the next edit.
"""

import pytest
from schemnet.controllers.scene_controller import SceneController
from schemnet.models.connector import Connector, SnapPolicy
from schemnet.models.node import Node
from schemnet.models.settings import Settings
from schemnet.models.wire import Wire, WirePoint


def make_wire(*points, pos=(0.0, 0.0)):
    """Helper to create a Wire from absolute scene points."""
    wire = Wire(pos=pos)
    wire.points = [WirePoint(x - pos[0], y - pos[1]) for x, y in points]
    return wire


def make_node(pos=(0.0, 0.0), connectors=((0.0, 0.0),), size=(40.0, 40.0), text=""):
    """Helper to create a Node with connectors at the given local positions."""
    node = Node(pos=pos, size=size, text=text)
    for i, local in enumerate(connectors):
        node.add_connector(Connector(pos=local, text=str(i + 1), snap_policy=SnapPolicy.ANYWHERE))
    return node


class EventLog:
    """Observer that records (event, data) pairs."""

    def __init__(self):
        self.events = []

    def __call__(self, event, data):
        self.events.append((event, data))

    def names(self):
        return [event for event, _ in self.events]

    def of(self, name):
        return [data for event, data in self.events if event == name]

    def clear(self):
        self.events.clear()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def controller(settings):
    return SceneController(settings=settings)


@pytest.fixture
def events(controller):
    """An EventLog already registered on the controller."""
    log = EventLog()
    controller.add_observer(log)
    return log


@pytest.fixture
def junction_scene(controller):
    """
    Wire A along the x axis with wire B standing on its middle.

        B
        |
    A --+--
    """
    wire_a = make_wire((0, 0), (100, 0))
    wire_b = make_wire((50, 0), (50, 100))
    controller.add_wire(wire_a)
    controller.add_wire(wire_b)
    return controller, wire_a, wire_b
