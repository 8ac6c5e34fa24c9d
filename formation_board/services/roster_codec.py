"""
Roster codec for the Formation Board application.

This module reads and writes the per-formation roster files and owns the
default layout, the preset layouts and preset matching.
"""
import json
import logging
from typing import Iterable, List, Optional, Sequence

from ..models import PlayerEntity, preset_names, preset_offsets, PresetName
from ..utils import LEGACY_ROSTER_FILENAME, PRESET_MATCH_TOLERANCE, is_bare_filename
from .storage import StorageLocation

logger = logging.getLogger(__name__)


class RosterCodec:
    """
    Service for persisting rosters (ordered lists of PlayerEntity).

    Reads are best effort: a missing or unreadable file yields None so the
    caller can fall back to the default roster.
    """

    def __init__(self, storage: StorageLocation):
        """
        Initialize the codec.

        Args:
            storage: Location of the roster files
        """
        self.storage = storage

    # ---------- File operations ---------- #

    def load(self, filename: str = LEGACY_ROSTER_FILENAME) -> Optional[List[PlayerEntity]]:
        """
        Load a roster.

        Args:
            filename: Roster file name

        Returns:
            Players in stored order, or None if absent or unreadable
        """
        if not self._usable_name(filename):
            return None
        try:
            payload = self.storage.read_json(filename)
        except OSError as e:
            logger.warning("Roster %s could not be read: %s", filename, e)
            return None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Roster %s is not valid JSON: %s", filename, e)
            self.storage.quarantine(filename)
            return None

        if payload is None:
            return None

        try:
            return self.decode(payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Roster %s could not be decoded: %r", filename, e)
            self.storage.quarantine(filename)
            return None

    def save(self, roster: Iterable[PlayerEntity], filename: str = LEGACY_ROSTER_FILENAME) -> bool:
        """
        Save a roster, replacing the file atomically.

        Returns:
            True if the file was written
        """
        if not self._usable_name(filename):
            return False
        return self.storage.write_json(filename, self.encode(roster))

    def delete(self, filename: str = LEGACY_ROSTER_FILENAME) -> bool:
        """Delete a roster file; a missing file is not an error."""
        if not self._usable_name(filename):
            return False
        return self.storage.delete(filename)

    @staticmethod
    def _usable_name(filename: str) -> bool:
        if is_bare_filename(filename):
            return True
        logger.warning("Ignoring roster with invalid file name %r", filename)
        return False

    @staticmethod
    def encode(roster: Iterable[PlayerEntity]) -> List[dict]:
        """Convert a roster to its JSON array form."""
        return [player.to_dict() for player in roster]

    @staticmethod
    def decode(payload) -> List[PlayerEntity]:
        """
        Convert a JSON array to a roster.

        Raises:
            ValueError: If the payload is not an array or a record is invalid
            KeyError: If a record misses a required field
        """
        if not isinstance(payload, list):
            raise ValueError(f"Roster must be a JSON array, got {type(payload).__name__}")
        return [PlayerEntity.from_dict(item) for item in payload]

    # ---------- Layouts ---------- #

    @staticmethod
    def default_roster() -> List[PlayerEntity]:
        """Get the fixed 11-player starting layout with fresh identities."""
        return RosterCodec.preset_roster(PresetName.DEFAULT.value)

    @staticmethod
    def preset_roster(preset_name: str) -> List[PlayerEntity]:
        """
        Get a preset layout with fresh identities, placeholder names and no photos.

        Unknown preset names give the default layout.
        """
        return [PlayerEntity(position=offset) for offset in preset_offsets(preset_name)]

    @staticmethod
    def matches_preset(
        roster: Sequence[PlayerEntity],
        preset_name: str,
        tolerance: float = PRESET_MATCH_TOLERANCE,
    ) -> bool:
        """
        Check whether a roster is laid out like a preset.

        Positions are compared index by index; every width and height must
        be within the tolerance (inclusive) and the lengths must be equal.
        """
        offsets = preset_offsets(preset_name)
        if len(roster) != len(offsets):
            return False
        return all(
            abs(player.position.width - offset.width) <= tolerance
            and abs(player.position.height - offset.height) <= tolerance
            for player, offset in zip(roster, offsets)
        )

    @staticmethod
    def matching_presets(roster: Sequence[PlayerEntity]) -> List[str]:
        """Get the names of all presets the roster matches, in table order."""
        return [name for name in preset_names() if RosterCodec.matches_preset(roster, name)]
