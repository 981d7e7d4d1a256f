"""
Module: items

Purpose:
    Provides the Item dataclass - one placed image on the sheet with its
    transform (position, rotation, scale) and visibility.

Key Functions:
    - new_item_id(): Fresh unique item id
    - Item.scaled_width / scaled_height: Current bounding box size
    - Item.to_dict() / Item.from_dict(): JSON payload conversion

Dependencies:
    - dataclasses (std)
    - uuid (std)

Used By:
    - builder.collection: Item CRUD
    - builder.layout: Bulk placement
    - builder.interaction: Drag updates
    - builder.output: Export geometry
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

# Fields a patch may change; everything else is fixed at creation
MUTABLE_FIELDS = frozenset({"name", "x", "y", "rotation", "scale", "visible"})


def new_item_id() -> str:
    """Generate a fresh item id."""
    return f"item-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True, slots=True)
class Item:
    """
    A placed image (immutable).

    Coordinates are sheet pixels at display resolution, with (x, y) the
    top-left of the item's unrotated, scaled bounding box. Rotation is
    about the item's own center and is stored unnormalized.

    Attributes:
        id: Unique id within a project
        name: Display name (usually the uploaded filename)
        source: Image reference - a ``data:`` URI or a file path
        width: Intrinsic pixel width of the decoded image
        height: Intrinsic pixel height of the decoded image
        x: Left edge in sheet pixels
        y: Top edge in sheet pixels
        rotation: Degrees clockwise, any real value
        scale: Multiplier applied to intrinsic size (> 0)
        visible: Whether the item is exported

    Invariants:
        - width > 0 and height > 0
        - scale > 0
    """

    id: str
    name: str
    source: str
    width: int
    height: int
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    scale: float = 1.0
    visible: bool = True

    def __post_init__(self) -> None:
        """Validate item on construction."""
        if not self.id:
            raise ValueError("id must be non-empty")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"intrinsic size must be positive: {self.width}x{self.height}")
        if self.scale <= 0:
            raise ValueError(f"scale must be > 0: {self.scale}")

    @property
    def scaled_width(self) -> float:
        return self.width * self.scale

    @property
    def scaled_height(self) -> float:
        return self.height * self.scale

    @property
    def center(self) -> tuple[float, float]:
        """Center of the scaled bounding box (rotation pivot)."""
        return (self.x + self.scaled_width / 2, self.y + self.scaled_height / 2)

    @property
    def display_rotation(self) -> float:
        """Rotation normalized into [0, 360) for display."""
        return self.rotation % 360

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "src": self.source,
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
            "scale": self.scale,
            "visible": self.visible,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Item:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            source=data["src"],
            width=int(data["width"]),
            height=int(data["height"]),
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            rotation=data.get("rotation", 0.0),
            scale=data.get("scale", 1.0),
            visible=data.get("visible", True),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"Item({self.id!r}, {self.width}x{self.height} @ "
            f"({self.x:g}, {self.y:g}) s={self.scale:g} r={self.rotation:g})"
        )
