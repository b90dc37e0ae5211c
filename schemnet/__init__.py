"""
schemnet - wire-network topology engine for schematic editors.

The models package holds the Qt-free scene items; the controllers package
keeps nets, junctions and connector bindings consistent while the scene is
edited, and provides undo/redo and file I/O.
"""

from .controllers import FileController, Mode, SceneController
from .models import Connector, Label, Node, Settings, Wire, WireNet

__all__ = [
    "FileController",
    "Mode",
    "SceneController",
    "Connector",
    "Label",
    "Node",
    "Settings",
    "Wire",
    "WireNet",
]
