"""
ItemFactory - builds scene items from stored containers.

Items are a tagged variant (Node | Wire | Label). The tag is the
"item_type_id" stored in every item container; the factory maps each tag
to a class with a from_dict() constructor. Applications register their
own node or wire subclasses under their own ids.
"""

import logging
from typing import Optional, Union

from .errors import SerializationError
from .label import LABEL_TYPE_ID, Label
from .node import NODE_TYPE_ID, Node
from .wire import WIRE_TYPE_ID, Wire

logger = logging.getLogger(__name__)

Item = Union[Node, Wire, Label]


class ItemFactory:
    """Registry of item classes keyed by item_type_id."""

    def __init__(self):
        self._registry: dict[str, type] = {
            NODE_TYPE_ID: Node,
            WIRE_TYPE_ID: Wire,
            LABEL_TYPE_ID: Label,
        }

    def register(self, type_id: str, item_class: type) -> None:
        """Register (or replace) the class built for type_id."""
        self._registry[type_id] = item_class

    def is_registered(self, type_id: str) -> bool:
        return type_id in self._registry

    def from_dict(self, data: dict) -> Optional[Item]:
        """
        Build an item from its container.

        Returns:
            The item, or None if the type id is unknown or the container is
            invalid. Failures are logged, never raised.
        """
        if not isinstance(data, dict):
            logger.error("Item container is not a mapping: %r", data)
            return None

        type_id = data.get("item_type_id")
        item_class = self._registry.get(type_id)
        if item_class is None:
            logger.error("Unknown item type id %r, skipping item", type_id)
            return None

        try:
            return item_class.from_dict(data)
        except SerializationError as e:
            logger.error("Couldn't restore %s: %s", type_id, e)
            return None


# Shared default instance
item_factory = ItemFactory()
