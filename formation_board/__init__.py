"""
Formation Board

Create, name and delete soccer formations, position an 11-player roster on
the pitch, name and photograph each player, and apply positional presets.

This package provides the persistence and layout-state model plus a Flask
JSON API for front ends.
"""
__version__ = "1.0.0"
__author__ = "Formation Board Development Team"

from .models import Formation, PlayerEntity, Offset
from .services import FormationCatalogStore, RosterCodec, RosterEditor, ServiceFactory
from .ui import create_app, run_web_app
from .utils import APP_TITLE

__all__ = [
    "Formation", "PlayerEntity", "Offset",
    "FormationCatalogStore", "RosterCodec", "RosterEditor", "ServiceFactory",
    "create_app", "run_web_app", "APP_TITLE"
]
