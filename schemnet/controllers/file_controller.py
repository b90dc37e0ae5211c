"""
FileController - Handles scene file I/O and recent files.

File dialog interaction is the responsibility of the view layer.
Recent files tracking uses QSettings for cross-session persistence.
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import QSettings

logger = logging.getLogger(__name__)

MAX_RECENT_FILES = 10
RECENT_FILES_KEY = "file/recent_files"


def validate_scene_data(data) -> None:
    """
    Validate the JSON structure of a scene before loading.

    Raises ValueError with a descriptive message if anything is wrong.
    Individual items that cannot be restored are skipped by the loader,
    so only the shape of the containers is checked here.
    """
    if not isinstance(data, dict):
        raise ValueError("File does not contain a valid scene object.")

    if "nodes" not in data or not isinstance(data["nodes"], list):
        raise ValueError("Missing or invalid 'nodes' list.")
    if "nets" not in data or not isinstance(data["nets"], list):
        raise ValueError("Missing or invalid 'nets' list.")

    scene = data.get("scene")
    if scene is not None:
        rect = scene.get("rect") if isinstance(scene, dict) else None
        if not isinstance(rect, dict):
            raise ValueError("Scene has invalid 'rect' data.")
        for key in ("x", "y", "width", "height"):
            if not isinstance(rect.get(key), (int, float)):
                raise ValueError(f"Scene rect value '{key}' must be numeric.")

    for i, node in enumerate(data["nodes"]):
        if not isinstance(node, dict):
            raise ValueError(f"Node #{i + 1} is not an object.")
        pos = node.get("pos")
        if not isinstance(pos, dict) or "x" not in pos or "y" not in pos:
            raise ValueError(f"Node #{i + 1} has invalid position data.")

    for i, net in enumerate(data["nets"]):
        if not isinstance(net, dict):
            raise ValueError(f"Net #{i + 1} is not an object.")
        if not isinstance(net.get("wires"), list):
            raise ValueError(f"Net #{i + 1} is missing its 'wires' list.")


class FileController:
    """
    Manages scene file I/O.

    Saves and loads the scene held by a SceneController as JSON and tracks
    the current file path for quick-save.
    """

    def __init__(self, scene_ctrl, settings: Optional[QSettings] = None):
        self.scene_ctrl = scene_ctrl
        self.current_file: Optional[Path] = None
        self._settings = settings

    def _qsettings(self) -> QSettings:
        if self._settings is not None:
            return self._settings
        return QSettings("schemnet", "schemnet")

    def new_scene(self) -> None:
        """Clear the scene and reset file state."""
        self.scene_ctrl.clear()
        self.current_file = None

    def save_scene(self, filepath) -> None:
        """
        Save the scene to a JSON file and mark it clean.

        Raises:
            OSError: If the file cannot be written.
            TypeError: If the scene data is not JSON-serializable.
        """
        filepath = Path(filepath)
        data = self.scene_ctrl.to_dict()
        with open(filepath, "w") as f:
            json.dump(data, f, indent=2)
        self.current_file = filepath
        self.add_recent_file(filepath)
        self.scene_ctrl.clear_is_dirty()
        logger.info("Saved scene to %s", filepath)

        self.scene_ctrl.notify("model_saved", filepath)

    def load_scene(self, filepath) -> None:
        """
        Load a scene from a JSON file.

        Validates the JSON structure before loading. The scene controller
        is rebuilt in place so views stay connected.

        Raises:
            json.JSONDecodeError: If file is not valid JSON.
            ValueError: If file structure is invalid.
            OSError: If the file cannot be read.
        """
        filepath = Path(filepath)
        with open(filepath, "r") as f:
            data = json.load(f)

        validate_scene_data(data)

        self.scene_ctrl.load_dict(data)
        self.current_file = filepath
        self.add_recent_file(filepath)
        logger.info("Loaded scene from %s", filepath)

        self.scene_ctrl.notify("model_loaded", filepath)

    def has_file(self) -> bool:
        """Return whether a current file path is set (for quick-save)."""
        return self.current_file is not None

    def get_window_title(self, base: str = "Schematic Editor") -> str:
        """Get window title based on current file and dirty state."""
        title = base
        if self.current_file:
            title = f"{base} - {self.current_file.name}"
        if self.scene_ctrl.is_dirty():
            title += " *"
        return title

    def get_recent_files(self) -> List[str]:
        """
        Get list of recently opened files from QSettings.

        Returns:
            List of file paths (most recent first), with non-existent files removed.
        """
        settings = self._qsettings()
        recent = settings.value(RECENT_FILES_KEY, [])

        # A single stored entry comes back as a plain string
        if isinstance(recent, str):
            recent = [recent]
        if not isinstance(recent, list):
            recent = []

        existing = [f for f in recent if os.path.exists(f)]

        if len(existing) != len(recent):
            settings.setValue(RECENT_FILES_KEY, existing)

        return existing

    def add_recent_file(self, filepath: Path) -> None:
        """Move filepath to the front of the recent files list."""
        filepath_str = str(Path(filepath).absolute())
        recent = self.get_recent_files()

        if filepath_str in recent:
            recent.remove(filepath_str)
        recent.insert(0, filepath_str)
        recent = recent[:MAX_RECENT_FILES]

        self._qsettings().setValue(RECENT_FILES_KEY, recent)

    def clear_recent_files(self) -> None:
        """Clear the recent files list."""
        self._qsettings().setValue(RECENT_FILES_KEY, [])
