"""
Models package for the Formation Board application.

This package contains the core data models used throughout the application.
"""
from .player import PlayerEntity, Offset
from .formation import Formation, new_roster_filename
from .presets import PresetName, preset_names, preset_offsets, resolve_preset, is_known_preset

__all__ = [
    "PlayerEntity", "Offset", "Formation", "new_roster_filename",
    "PresetName", "preset_names", "preset_offsets", "resolve_preset", "is_known_preset"
]
