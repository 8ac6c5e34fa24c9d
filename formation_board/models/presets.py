"""Positional preset layouts for an 11-player roster."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple

from .player import Offset


class PresetName(Enum):
    """Known positional presets."""
    DEFAULT = "default"
    F_4_4_2 = "4-4-2"
    F_4_3_3 = "4-3-3"
    F_3_5_2 = "3-5-2"
    F_4_2_3_1 = "4-2-3-1"


# Goalkeeper first, then back to front, left to right.
# Origin is the pitch centre; positive height is towards the own goal.
_PRESET_LAYOUTS: Dict[PresetName, Tuple[Tuple[float, float], ...]] = {
    PresetName.DEFAULT: (
        (0, 250),
        (50, 150), (-50, 150), (125, 150), (-125, 150),
        (125, 50), (-50, 50), (-125, 50), (50, 50),
        (50, -50), (-50, -50),
    ),
    PresetName.F_4_4_2: (
        (0, 250),
        (-125, 150), (-50, 160), (50, 160), (125, 150),
        (-125, 30), (-50, 40), (50, 40), (125, 30),
        (-50, -100), (50, -100),
    ),
    PresetName.F_4_3_3: (
        (0, 250),
        (-125, 150), (-50, 160), (50, 160), (125, 150),
        (-90, 40), (0, 60), (90, 40),
        (-125, -90), (0, -120), (125, -90),
    ),
    PresetName.F_3_5_2: (
        (0, 250),
        (-90, 160), (0, 170), (90, 160),
        (-150, 30), (-70, 50), (0, 70), (70, 50), (150, 30),
        (-50, -100), (50, -100),
    ),
    PresetName.F_4_2_3_1: (
        (0, 250),
        (-125, 150), (-50, 160), (50, 160), (125, 150),
        (-50, 80), (50, 80),
        (-125, -20), (0, -20), (125, -20),
        (0, -120),
    ),
}


def preset_names() -> List[str]:
    """Get all preset names in table order."""
    return [preset.value for preset in _PRESET_LAYOUTS]


def resolve_preset(name: str) -> PresetName:
    """Resolve a preset name, falling back to the default layout when unknown."""
    try:
        return PresetName(name)
    except ValueError:
        return PresetName.DEFAULT


def is_known_preset(name: str) -> bool:
    """Check whether a name is in the preset table."""
    return name in preset_names()


def preset_offsets(name: str) -> List[Offset]:
    """Get the fixed offsets of a preset; unknown names give the default layout."""
    return [Offset(w, h) for w, h in _PRESET_LAYOUTS[resolve_preset(name)]]
