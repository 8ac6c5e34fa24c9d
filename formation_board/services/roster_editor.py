"""Editing session for one opened formation's roster."""

from __future__ import annotations

import logging
import uuid
from threading import RLock
from typing import List, Optional

from ..models import Formation, Offset, PlayerEntity, is_known_preset
from .background_saver import BackgroundSaver
from .catalog_store import FormationCatalogStore

logger = logging.getLogger(__name__)


class RosterEditor:
    """
    Holds the in-memory roster of one formation and persists every change.

    The in-memory roster is the source of truth; each mutation queues a full
    save on the background saver, and a failed save is reconciled by the
    next one.
    """

    def __init__(self, store: FormationCatalogStore, formation: Formation, saver: BackgroundSaver):
        """
        Open a formation for editing.

        Args:
            store: Catalog store used to load the roster
            formation: Formation to edit
            saver: Background saver for roster writes
        """
        self.formation = formation
        self.saver = saver
        self._lock = RLock()
        self._players: List[PlayerEntity] = store.open_roster(formation)

    # ---------- Read access ---------- #

    @property
    def filename(self) -> str:
        return self.formation.filename

    @property
    def players(self) -> List[PlayerEntity]:
        """Detached copies of the players in display order."""
        with self._lock:
            return [player.copy() for player in self._players]

    def get(self, player_id: uuid.UUID) -> PlayerEntity:
        """
        Get a copy of one player.

        Raises:
            KeyError: If the player is not in the roster
        """
        with self._lock:
            return self._find(player_id).copy()

    def matching_presets(self) -> List[str]:
        """Names of the presets the current layout matches."""
        with self._lock:
            return self.saver.codec.matching_presets(self._players)

    # ---------- Mutations ---------- #

    def move_by(self, player_id: uuid.UUID, dw: float, dh: float) -> PlayerEntity:
        """Apply a drag delta to a player."""
        with self._lock:
            player = self._find(player_id)
            player.moved_by(dw, dh)
            self._persist()
            return player.copy()

    def move_to(self, player_id: uuid.UUID, width: float, height: float) -> PlayerEntity:
        """Place a player at an absolute offset."""
        with self._lock:
            player = self._find(player_id)
            player.position = Offset(width, height)
            self._persist()
            return player.copy()

    def rename_player(self, player_id: uuid.UUID, name: str) -> PlayerEntity:
        """Change a player's display name."""
        if not isinstance(name, str):
            raise ValueError(f"Player name must be a string, got {name!r}")
        with self._lock:
            player = self._find(player_id)
            player.name = name
            self._persist()
            return player.copy()

    def set_photo(self, player_id: uuid.UUID, data: Optional[bytes]) -> bool:
        """
        Set or clear a player's photo once an image load resolves.

        A result for a player that has since been replaced is dropped.

        Returns:
            True if the photo was applied
        """
        with self._lock:
            player = self._lookup(player_id)
            if player is None:
                logger.debug("Dropping stale photo for replaced player %s", player_id)
                return False
            player.photo = bytes(data) if data is not None else None
            self._persist()
            return True

    def apply_preset(self, preset_name: str, keep_players: bool = False) -> List[PlayerEntity]:
        """
        Lay the roster out as a preset.

        Args:
            preset_name: Preset to apply; unknown names give the default layout
            keep_players: Keep ids, names and photos and only move positions.
                By default every entry is replaced with a fresh player.

        Returns:
            The new roster
        """
        codec = self.saver.codec
        fresh = codec.preset_roster(preset_name)
        if not is_known_preset(preset_name):
            logger.info("Unknown preset %r; applying default layout", preset_name)
        with self._lock:
            if keep_players:
                for i, template in enumerate(fresh):
                    if i < len(self._players):
                        self._players[i].position = template.position
                        fresh[i] = self._players[i]
            self._players = fresh
            self._persist()
            return self.players

    # ---------- Lifecycle ---------- #

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for queued saves to finish."""
        return self.saver.flush(timeout)

    def _persist(self) -> None:
        self.saver.submit(self.filename, self._players)

    def _lookup(self, player_id: uuid.UUID) -> Optional[PlayerEntity]:
        return next((p for p in self._players if p.id == player_id), None)

    def _find(self, player_id: uuid.UUID) -> PlayerEntity:
        player = self._lookup(player_id)
        if player is None:
            raise KeyError(f"Player {player_id} not in roster")
        return player
