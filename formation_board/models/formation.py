"""Formation catalog entry model for the Formation Board application."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from ..utils import is_bare_filename, parse_timestamp, to_iso, utc_now, fmt_created_at
from ..utils.constants import ROSTER_FILENAME_PREFIX, ROSTER_FILENAME_SUFFIX


def new_roster_filename() -> str:
    """Generate a fresh, unique roster filename of the form formation-<uuid>.json."""
    return f"{ROSTER_FILENAME_PREFIX}{uuid.uuid4()}{ROSTER_FILENAME_SUFFIX}"


@dataclass
class Formation:
    """
    Represents one named formation in the catalog.

    Attributes:
        name: Display name (non-empty is enforced by callers)
        filename: Roster file holding this formation's players; set once
        id: Unique identifier
        created_at: Creation timestamp (timezone-aware)
    """
    name: str
    filename: str = field(default_factory=new_roster_filename)
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=utc_now)

    @property
    def created_display(self) -> str:
        """Creation time formatted for list display."""
        return fmt_created_at(self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        """Convert formation to dictionary for serialization."""
        return {
            "id": str(self.id),
            "name": self.name,
            "filename": self.filename,
            "createdAt": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Formation:
        """
        Create formation from dictionary.

        Records written before createdAt existed decode through the legacy
        schema with the timestamp defaulted to now.

        Raises:
            KeyError: If id, name or filename is missing
            ValueError: If a field holds an invalid value
        """
        if not isinstance(data, dict):
            raise ValueError(f"Formation record must be an object, got {type(data).__name__}")
        if "createdAt" in data:
            return cls._from_current_schema(data)
        return cls._from_legacy_schema(data)

    @classmethod
    def _from_current_schema(cls, data: Dict[str, Any]) -> Formation:
        base = cls._from_legacy_schema(data)
        base.created_at = parse_timestamp(data["createdAt"])
        return base

    @classmethod
    def _from_legacy_schema(cls, data: Dict[str, Any]) -> Formation:
        name = data["name"]
        filename = data["filename"]
        if not isinstance(name, str):
            raise ValueError(f"Formation name must be a string, got {name!r}")
        if not is_bare_filename(filename):
            raise ValueError(f"Formation filename must be a bare file name, got {filename!r}")
        return cls(
            name=name,
            filename=filename,
            id=uuid.UUID(str(data["id"])),
        )
