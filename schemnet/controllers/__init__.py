"""
Controllers for schemnet.

This package contains the topology engine and the controllers that
orchestrate operations between models and views using an observer pattern.
"""

from .commands import (
    AddItemCommand,
    Command,
    CompoundCommand,
    MoveItemsCommand,
    MoveWirePointCommand,
    RemoveItemCommand,
    RotateNodeCommand,
)
from .file_controller import FileController, validate_scene_data
from .scene_controller import Mode, SceneController
from .undo_manager import UndoManager

__all__ = [
    "AddItemCommand",
    "Command",
    "CompoundCommand",
    "MoveItemsCommand",
    "MoveWirePointCommand",
    "RemoveItemCommand",
    "RotateNodeCommand",
    "FileController",
    "validate_scene_data",
    "Mode",
    "SceneController",
    "UndoManager",
]
