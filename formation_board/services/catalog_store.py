"""
Formation catalog store for the Formation Board application.

This module owns the ordered list of formations, persists it as a single
catalog file and keeps roster files in step with catalog mutations.
"""
from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from threading import RLock
from typing import Callable, Iterable, List, Optional

from ..models import Formation, PlayerEntity
from ..utils import CATALOG_FILENAME
from .roster_codec import RosterCodec
from .storage import StorageLocation

logger = logging.getLogger(__name__)

CatalogListener = Callable[["FormationCatalogStore"], None]


class FormationNameError(ValueError):
    """Raised when a formation name is rejected at the edit boundary."""


def validate_formation_name(name) -> str:
    """
    Validate a formation name entered by the user.

    Args:
        name: Raw name

    Returns:
        The name unchanged

    Raises:
        FormationNameError: If the name is not a string or is empty/whitespace-only
    """
    if not isinstance(name, str) or not name.strip():
        raise FormationNameError("Formation name must not be empty")
    return name


@dataclass
class Subscription:
    """Handle returned by FormationCatalogStore.subscribe."""
    store: "FormationCatalogStore"
    listener: CatalogListener
    active: bool = True

    def cancel(self) -> None:
        """Stop receiving change notifications."""
        if self.active:
            self.store._unsubscribe(self)
            self.active = False


class FormationCatalogStore:
    """
    In-memory catalog of formations backed by one JSON file.

    Every mutation saves the catalog immediately; there is no batched mode.
    Listeners are notified after every load and mutation.
    """

    def __init__(
        self,
        storage: StorageLocation,
        codec: Optional[RosterCodec] = None,
        filename: str = CATALOG_FILENAME,
        autoload: bool = True,
    ):
        """
        Initialize the store.

        Args:
            storage: Location of the catalog and roster files
            codec: Roster codec; one sharing the same storage is created if omitted
            filename: Catalog file name
            autoload: Load the catalog immediately
        """
        self.storage = storage
        self.codec = codec or RosterCodec(storage)
        self.filename = filename
        self._lock = RLock()
        self._formations: List[Formation] = []
        self._subscriptions: List[Subscription] = []
        if autoload:
            self.load()

    # ---------- Read access ---------- #

    @property
    def formations(self) -> List[Formation]:
        """Snapshot of the catalog in insertion order."""
        with self._lock:
            return list(self._formations)

    def __len__(self) -> int:
        with self._lock:
            return len(self._formations)

    def get(self, formation_id: uuid.UUID) -> Optional[Formation]:
        """Get formation by id."""
        with self._lock:
            return next((f for f in self._formations if f.id == formation_id), None)

    def index_of(self, formation_id: uuid.UUID) -> Optional[int]:
        """Get the current index of a formation."""
        with self._lock:
            for i, formation in enumerate(self._formations):
                if formation.id == formation_id:
                    return i
            return None

    # ---------- Persistence ---------- #

    def load(self) -> None:
        """
        Load the catalog file.

        A missing file gives an empty catalog. An unreadable file also gives
        an empty catalog; it is logged and moved aside.
        """
        with self._lock:
            self._formations = self._read_catalog()
        self._notify()

    def save(self) -> bool:
        """
        Save the full catalog atomically.

        Returns:
            True if the file was written
        """
        with self._lock:
            payload = [formation.to_dict() for formation in self._formations]
            return self.storage.write_json(self.filename, payload)

    def _read_catalog(self) -> List[Formation]:
        try:
            payload = self.storage.read_json(self.filename)
        except OSError as e:
            logger.warning("Catalog %s could not be read: %s", self.filename, e)
            return []
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Catalog %s is not valid JSON: %s", self.filename, e)
            self.storage.quarantine(self.filename)
            return []

        if payload is None:
            return []

        try:
            if not isinstance(payload, list):
                raise ValueError(f"Catalog must be a JSON array, got {type(payload).__name__}")
            return [Formation.from_dict(item) for item in payload]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Catalog %s could not be decoded: %r", self.filename, e)
            self.storage.quarantine(self.filename)
            return []

    # ---------- Mutations ---------- #

    def add(self, name: str) -> Formation:
        """
        Create a formation with a fresh roster file holding the default roster.

        Args:
            name: Display name

        Returns:
            The created formation
        """
        formation = Formation(name=name)
        with self._lock:
            self._formations.append(formation)
            self.save()
        self.codec.save(self.codec.default_roster(), formation.filename)
        logger.info("Added formation %r (%s)", name, formation.filename)
        self._notify()
        return formation

    def remove(self, indices: Iterable[int]) -> List[Formation]:
        """
        Remove formations by index, deleting their roster files.

        All indices refer to the catalog as it was before this call.

        Args:
            indices: Positions in the current list

        Returns:
            The removed formations
        """
        with self._lock:
            count = len(self._formations)
            targets = set()
            for index in indices:
                if 0 <= index < count:
                    targets.add(index)
                else:
                    logger.warning("Ignoring out-of-range formation index %s", index)
            if not targets:
                return []

            removed = [self._formations[i] for i in sorted(targets)]
            for formation in removed:
                self.codec.delete(formation.filename)
            self._formations = [
                f for i, f in enumerate(self._formations) if i not in targets
            ]
            self.save()
        for formation in removed:
            logger.info("Removed formation %r (%s)", formation.name, formation.filename)
        self._notify()
        return removed

    def remove_by_id(self, formation_id: uuid.UUID) -> bool:
        """
        Remove a formation by id.

        Returns:
            True if the formation existed
        """
        with self._lock:
            index = self.index_of(formation_id)
            if index is None:
                return False
            self.remove([index])
            return True

    def rename(self, formation_id: uuid.UUID, new_name: str) -> None:
        """Rename a formation; unknown ids are ignored."""
        with self._lock:
            formation = self.get(formation_id)
            if formation is None:
                logger.debug("Rename ignored for unknown formation %s", formation_id)
                return
            formation.name = new_name
            self.save()
        self._notify()

    # ---------- Rosters ---------- #

    def open_roster(self, formation: Formation) -> List[PlayerEntity]:
        """
        Load a formation's roster, falling back to the default roster.

        The fallback is saved so the roster file exists afterwards.
        """
        roster = self.codec.load(formation.filename)
        if roster is None:
            logger.info("No usable roster for %r; using default layout", formation.name)
            roster = self.codec.default_roster()
            self.codec.save(roster, formation.filename)
        return roster

    # ---------- Change notification ---------- #

    def subscribe(self, listener: CatalogListener) -> Subscription:
        """Register a callback invoked with the store after every change."""
        sub = Subscription(store=self, listener=listener)
        with self._lock:
            self._subscriptions.append(sub)
        return sub

    def _unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            self._subscriptions = [s for s in self._subscriptions if s is not sub]

    def _notify(self) -> None:
        with self._lock:
            listeners = [s.listener for s in self._subscriptions if s.active]
        for listener in listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("Catalog listener %r failed", listener)
