"""Label - a piece of text placed on the scene (used for net names)."""

from dataclasses import dataclass

from .errors import SerializationError
from .geometry import Point

LABEL_TYPE_ID = "label"


@dataclass(eq=False)
class Label:
    """A text label with a position and a highlight state.

    Labels have no electrical significance; each wire net owns one to
    display its name.
    """

    text: str = ""
    pos: Point = (0.0, 0.0)
    highlighted: bool = False

    item_type_id = LABEL_TYPE_ID

    def set_highlighted(self, highlighted: bool) -> None:
        self.highlighted = highlighted

    def to_dict(self) -> dict:
        return {
            "item_type_id": self.item_type_id,
            "text": self.text,
            "pos": {"x": self.pos[0], "y": self.pos[1]},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Label":
        pos = data.get("pos")
        if not isinstance(pos, dict):
            raise SerializationError("Label container is missing 'pos'.")
        return cls(text=data.get("text", ""), pos=(pos.get("x", 0.0), pos.get("y", 0.0)))

    def __repr__(self) -> str:
        return f"Label({self.text!r})"
