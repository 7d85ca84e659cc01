"""Pointer gesture handling for the hill chart.

The controller is a two-state machine built on the transitions library:

    idle --press(x, y)--> dragging     only if an item is under the pointer
    dragging --drag(x, y)--> dragging  moves the grabbed item horizontally
    dragging --release--> idle

Triggers that do not apply to the current state are ignored. The controller
never deletes; a release at progress 1.0 is reported so the app can ask.

Usage:
    controller = DragController(store, ChartGeometry(800, 320))
    controller.gesture_start(412, 130)
    controller.gesture_move(500, 140)
    release = controller.gesture_end()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from transitions import Machine

from .curve import ChartGeometry
from .errors import NotFoundError
from .models import Item
from .store import ItemStore

logger = logging.getLogger(__name__)

DEFAULT_HIT_RADIUS = 30.0

STATES = ["idle", "dragging"]

TRANSITIONS = [
    {
        "trigger": "press",
        "source": "idle",
        "dest": "dragging",
        "prepare": "_pick_candidate",
        "conditions": "_has_candidate",
        "after": "_grab",
    },
    # internal transition: stays in dragging without exit/enter callbacks
    {"trigger": "drag", "source": "dragging", "dest": None, "after": "_move"},
    {"trigger": "release", "source": "dragging", "dest": "idle", "before": "_let_go"},
]


@dataclass(frozen=True)
class Release:
    item_id: str
    progress: float

    @property
    def finished(self) -> bool:
        """True when the item was dropped at the very end of the hill."""
        return self.progress == 1.0


def find_closest(items: Sequence[Item], progress: float) -> Optional[Item]:
    """Item whose progress is nearest ``progress``; earliest wins ties."""
    best: Optional[Item] = None
    best_distance = 0.0
    for item in items:
        distance = abs(item.progress - progress)
        if best is None or distance < best_distance:
            best = item
            best_distance = distance
    return best


class DragController:
    def __init__(self, store: ItemStore, geometry: ChartGeometry, hit_radius: float = DEFAULT_HIT_RADIUS):
        self.store = store
        self.geometry = geometry
        self.hit_radius = float(hit_radius)
        self.dragging_id: Optional[str] = None
        self.last_release: Optional[Release] = None
        self._candidate: Optional[Item] = None
        self._progress: float = 0.0

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial="idle",
            auto_transitions=False,
            send_event=True,
            ignore_invalid_triggers=True,
            after_state_change="_log_transition",
        )

    # -------------------- public gesture API --------------------
    def gesture_start(self, x: float, y: float) -> bool:
        """Try to grab the item under (x, y). Returns True when one was grabbed."""
        return bool(self.trigger("press", x, y))

    def gesture_move(self, x: float, y: float) -> bool:
        """Move the grabbed item to the progress under ``x``; ``y`` is ignored."""
        return bool(self.trigger("drag", x, y))

    def gesture_end(self) -> Optional[Release]:
        """Drop the grabbed item. Returns None when nothing was being dragged."""
        if not self.trigger("release"):
            return None
        return self.last_release

    def hit_test(self, x: float, y: float) -> Optional[Item]:
        """The item a press at (x, y) would grab, without changing state."""
        closest = find_closest(self.store.list_items(), self.geometry.progress_at(x))
        if closest is None:
            return None
        if abs(y - self.geometry.height_at(closest.progress)) > self.hit_radius:
            return None
        return closest

    # -------------------- machine callbacks --------------------
    def _pick_candidate(self, event) -> None:
        x, y = event.args[:2]
        self._candidate = self.hit_test(x, y)

    def _has_candidate(self, event) -> bool:
        return self._candidate is not None

    def _grab(self, event) -> None:
        self.dragging_id = self._candidate.id
        self._progress = self._candidate.progress
        self._candidate = None
        logger.debug("Grabbed item %s at progress %.3f", self.dragging_id, self._progress)

    def _move(self, event) -> None:
        x = event.args[0]
        progress = self.geometry.progress_at(x)
        try:
            self._progress = self.store.update_progress(self.dragging_id, progress).progress
        except NotFoundError as e:
            logger.warning("Ignoring drag of vanished item: %s", e)

    def _let_go(self, event) -> None:
        self.last_release = Release(item_id=self.dragging_id, progress=self._progress)
        logger.debug("Released item %s at progress %.3f", self.dragging_id, self._progress)
        self.dragging_id = None

    def _log_transition(self, event) -> None:
        logger.debug("[drag] %s -> %s (%s)", event.transition.source, event.transition.dest, event.event.name)
