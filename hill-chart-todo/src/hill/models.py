"""Hill chart item model and color palette.

Colors are stored as 32-bit ARGB integers so tokens stay compact and match
what the first (Flutter) release of the app wrote into share links.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, Tuple


# red, green, orange, purple, teal, pink
PALETTE: Tuple[int, ...] = (
    0xFFF44336,
    0xFF4CAF50,
    0xFFFF9800,
    0xFF9C27B0,
    0xFF009688,
    0xFFE91E63,
)

PALETTE_NAMES: Dict[int, str] = {
    0xFFF44336: "red",
    0xFF4CAF50: "green",
    0xFFFF9800: "orange",
    0xFF9C27B0: "purple",
    0xFF009688: "teal",
    0xFFE91E63: "pink",
}


def new_item_id() -> str:
    return str(uuid.uuid4())


def color_hex(argb: int) -> str:
    """Render an ARGB integer as a CSS '#rrggbb' string (alpha dropped)."""
    return f"#{argb & 0xFFFFFF:06x}"


def next_free_color_index(used: Iterable[int], palette: Tuple[int, ...] = PALETTE) -> int:
    """First palette slot (from 0) whose color is not in ``used``; 0 if all are taken."""
    taken = set(used)
    for idx, color in enumerate(palette):
        if color not in taken:
            return idx
    return 0


@dataclass
class Item:
    id: str
    title: str
    progress: float
    color: int
    last_updated: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "progress": self.progress,
            "color": self.color,
            "lastUpdated": self.last_updated.isoformat(),
        }
