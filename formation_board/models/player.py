"""
Player marker model for the Formation Board application.

This module contains the PlayerEntity dataclass which represents one
positioned player marker on the pitch, including its display name and
optional photo.
"""
import base64
import binascii
import math
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from ..utils import PLACEHOLDER_NAME


@dataclass(frozen=True)
class Offset:
    """
    A 2D offset in layout units relative to the pitch centre.

    Positive height points towards the own goal, so the goalkeeper of the
    default layout sits at height 250.
    """
    width: float
    height: float

    def __post_init__(self):
        """Reject values that cannot be persisted as JSON numbers."""
        for label, value in (("width", self.width), ("height", self.height)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Offset {label} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"Offset {label} must be finite, got {value!r}")

    def translated(self, dw: float, dh: float) -> "Offset":
        """Return this offset moved by a drag delta."""
        return Offset(self.width + dw, self.height + dh)


@dataclass
class PlayerEntity:
    """
    Represents one player marker in a formation roster.

    Attributes:
        position: Marker offset from the pitch centre
        name: Display name shown under the marker
        photo: Raw image bytes, None to use the default icon
        id: Unique identifier assigned at creation, never reused
    """
    position: Offset
    name: str = PLACEHOLDER_NAME
    photo: Optional[bytes] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def has_photo(self) -> bool:
        """Check whether a custom photo is set."""
        return bool(self.photo)

    def moved_by(self, dw: float, dh: float) -> None:
        """Apply a drag delta to the marker position."""
        self.position = self.position.translated(dw, dh)

    def copy(self) -> "PlayerEntity":
        """Create a detached copy with the same identity."""
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        The position is written as two independent numeric fields and the
        photo as base64; the imageData key is omitted when there is no photo.
        """
        data: Dict[str, Any] = {
            "id": str(self.id),
            "positionWidth": self.position.width,
            "positionHeight": self.position.height,
            "name": self.name,
        }
        if self.photo is not None:
            data["imageData"] = base64.b64encode(self.photo).decode("ascii")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerEntity":
        """
        Create from dictionary for JSON deserialization.

        Raises:
            KeyError: If id or a position field is missing
            ValueError: If a field holds an invalid value
        """
        if not isinstance(data, dict):
            raise ValueError(f"Player record must be an object, got {type(data).__name__}")

        player_id = uuid.UUID(str(data["id"]))
        position = Offset(data["positionWidth"], data["positionHeight"])

        name = data.get("name", PLACEHOLDER_NAME)
        if not isinstance(name, str):
            raise ValueError(f"Player name must be a string, got {name!r}")

        photo = None
        if data.get("imageData") is not None:
            try:
                photo = base64.b64decode(data["imageData"], validate=True)
            except (binascii.Error, TypeError) as e:
                raise ValueError(f"Invalid imageData for player {player_id}: {e}") from e

        return cls(position=position, name=name, photo=photo, id=player_id)
