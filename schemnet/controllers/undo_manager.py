"""
UndoManager - Manages undo/redo stacks and command execution.

Maintains a history of executed commands with configurable depth limit.
Supports undo, redo, clearing history and tracking a clean state (the
point in history that matches what was last saved or loaded).
"""

from typing import Callable, Optional

from .commands import Command


class UndoManager:
    """
    Manages command execution with undo/redo support.

    Commands are executed through this manager to ensure they can be undone.
    The manager maintains undo and redo stacks with a maximum depth limit.
    """

    def __init__(self, max_depth: int = 100, on_clean_changed: Optional[Callable[[bool], None]] = None):
        """
        Initialize the undo manager.

        Args:
            max_depth: Maximum number of commands to keep in history (default 100)
            on_clean_changed: Called with the new clean state whenever it flips
        """
        self.max_depth = max_depth
        self.on_clean_changed = on_clean_changed
        self._undo_stack: list[Command] = []
        self._redo_stack: list[Command] = []
        # Undo stack length at the clean state; None once that state is unreachable
        self._clean_index: Optional[int] = 0

    def _track_clean(self, was_clean: bool) -> None:
        is_clean = self.is_clean()
        if is_clean != was_clean and self.on_clean_changed is not None:
            self.on_clean_changed(is_clean)

    def execute(self, command: Command) -> None:
        """
        Execute a command and add it to the undo stack.

        Clears the redo stack since a new action invalidates any redo history.

        Args:
            command: The command to execute
        """
        was_clean = self.is_clean()
        command.execute()

        # A clean state sitting in the redo stack can never be reached again
        if self._clean_index is not None and self._clean_index > len(self._undo_stack):
            self._clean_index = None

        self._undo_stack.append(command)

        # Enforce max depth
        if len(self._undo_stack) > self.max_depth:
            self._undo_stack.pop(0)
            if self._clean_index is not None:
                self._clean_index = self._clean_index - 1 if self._clean_index > 0 else None

        # Clear redo stack - new actions invalidate redo history
        self._redo_stack.clear()
        self._track_clean(was_clean)

    def undo(self) -> bool:
        """
        Undo the last command.

        Returns:
            True if an action was undone, False if undo stack is empty
        """
        if not self._undo_stack:
            return False

        was_clean = self.is_clean()
        command = self._undo_stack.pop()
        command.undo()
        self._redo_stack.append(command)
        self._track_clean(was_clean)

        return True

    def redo(self) -> bool:
        """
        Redo the last undone command.

        Returns:
            True if an action was redone, False if redo stack is empty
        """
        if not self._redo_stack:
            return False

        was_clean = self.is_clean()
        command = self._redo_stack.pop()
        command.execute()
        self._undo_stack.append(command)
        self._track_clean(was_clean)

        return True

    def can_undo(self) -> bool:
        """Return whether there are commands to undo."""
        return len(self._undo_stack) > 0

    def can_redo(self) -> bool:
        """Return whether there are commands to redo."""
        return len(self._redo_stack) > 0

    def get_undo_description(self) -> Optional[str]:
        if self._undo_stack:
            return self._undo_stack[-1].get_description()
        return None

    def get_redo_description(self) -> Optional[str]:
        if self._redo_stack:
            return self._redo_stack[-1].get_description()
        return None

    def is_clean(self) -> bool:
        """Return whether the history sits at the clean state."""
        return self._clean_index == len(self._undo_stack)

    def set_clean(self) -> None:
        """Mark the current point in history as clean."""
        was_clean = self.is_clean()
        self._clean_index = len(self._undo_stack)
        self._track_clean(was_clean)

    def clear(self) -> None:
        """Clear both undo and redo stacks; the empty history is clean."""
        was_clean = self.is_clean()
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._clean_index = 0
        self._track_clean(was_clean)

    def get_undo_count(self) -> int:
        """Return the number of commands in the undo stack."""
        return len(self._undo_stack)

    def get_redo_count(self) -> int:
        """Return the number of commands in the redo stack."""
        return len(self._redo_stack)
