"""Exceptions raised by the schematic data model and topology engine."""


class SchemnetError(Exception):
    """Base class for all schemnet errors."""


class WireFloatingError(SchemnetError, ValueError):
    """Raised when a wire being drawn ends on neither a connector nor another wire."""

    def __init__(self, point):
        super().__init__(
            f"A wire must end on either a node connector or a wire (free end at {point})."
        )
        self.point = point


class SerializationError(SchemnetError, ValueError):
    """Raised when a stored container is missing a required key or sub-container."""
