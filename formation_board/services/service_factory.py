"""
Service Factory for dependency injection.

This module provides a factory for creating properly configured service instances
with their dependencies injected, all sharing one storage location.
"""
import uuid
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..config import AppConfig
from ..models import Formation
from .background_saver import BackgroundSaver
from .catalog_store import FormationCatalogStore
from .roster_codec import RosterCodec
from .roster_editor import RosterEditor
from .storage import StorageLocation


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.

    The storage location, codec, catalog store and background saver are
    singletons per factory; roster editors are cached per formation so every
    caller edits the same in-memory roster.
    """

    def __init__(self, config: Optional[AppConfig] = None, data_dir: Optional[Path] = None):
        """
        Initialize factory.

        Args:
            config: Application configuration
            data_dir: Overrides the configured data directory
        """
        self.config = config or AppConfig()
        self.data_dir = Path(data_dir) if data_dir is not None else self.config.data_dir
        self._storage: Optional[StorageLocation] = None
        self._codec: Optional[RosterCodec] = None
        self._catalog_store: Optional[FormationCatalogStore] = None
        self._saver: Optional[BackgroundSaver] = None
        self._editors: Dict[uuid.UUID, RosterEditor] = {}

    def get_storage(self) -> StorageLocation:
        """Get singleton storage location."""
        if self._storage is None:
            self._storage = StorageLocation(self.data_dir)
        return self._storage

    def get_roster_codec(self) -> RosterCodec:
        """Get singleton roster codec."""
        if self._codec is None:
            self._codec = RosterCodec(self.get_storage())
        return self._codec

    def get_catalog_store(self) -> FormationCatalogStore:
        """Get singleton catalog store, loading the catalog on first use."""
        if self._catalog_store is None:
            self._catalog_store = FormationCatalogStore(
                self.get_storage(), codec=self.get_roster_codec()
            )
            self._catalog_store.subscribe(self._drop_removed_editors)
        return self._catalog_store

    def get_background_saver(self) -> BackgroundSaver:
        """Get singleton background saver."""
        if self._saver is None:
            self._saver = BackgroundSaver(self.get_roster_codec())
        return self._saver

    def open_editor(self, formation: Formation) -> RosterEditor:
        """
        Get the roster editor for a formation, opening it on first use.

        Args:
            formation: Formation to edit

        Returns:
            Cached or newly opened RosterEditor
        """
        editor = self._editors.get(formation.id)
        if editor is None or editor.filename != formation.filename:
            editor = RosterEditor(self.get_catalog_store(), formation, self.get_background_saver())
            self._editors[formation.id] = editor
        return editor

    def remove_formations(self, indices: Iterable[int]) -> List[Formation]:
        """
        Remove formations by index once queued roster saves have landed.

        Flushing first keeps a late background save from recreating a
        roster file that the removal just deleted.
        """
        if self._saver is not None:
            self._saver.flush()
        return self.get_catalog_store().remove(indices)

    def remove_formation(self, formation_id: uuid.UUID) -> bool:
        """Remove one formation by id; see remove_formations."""
        index = self.get_catalog_store().index_of(formation_id)
        if index is None:
            return False
        return bool(self.remove_formations([index]))

    def shutdown(self) -> None:
        """Flush pending roster saves and stop the worker."""
        if self._saver is not None:
            self._saver.flush()
            self._saver.shutdown()
            self._saver = None
        self._editors.clear()

    def _drop_removed_editors(self, store: FormationCatalogStore) -> None:
        live = {f.id for f in store.formations}
        for formation_id in list(self._editors):
            if formation_id not in live:
                del self._editors[formation_id]
