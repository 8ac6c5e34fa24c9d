"""
Services package for the Formation Board application.

This package contains the storage, roster and catalog services that hold the
application's business logic, plus a factory wiring them together.
"""
from .storage import StorageLocation
from .roster_codec import RosterCodec
from .catalog_store import (
    FormationCatalogStore, FormationNameError, Subscription, validate_formation_name
)
from .background_saver import BackgroundSaver
from .roster_editor import RosterEditor
from .service_factory import ServiceFactory

__all__ = [
    "StorageLocation", "RosterCodec", "FormationCatalogStore", "FormationNameError",
    "Subscription", "validate_formation_name", "BackgroundSaver", "RosterEditor",
    "ServiceFactory"
]
