"""In-memory item store for one hill chart session.

Items keep insertion order; rendering and palette reconciliation rely on it.
Listeners registered with ``subscribe`` are called synchronously with a
snapshot of the items after every successful mutation.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from . import codec
from .curve import clamp_progress
from .errors import DecodeError, NotFoundError
from .models import PALETTE, Item, new_item_id, next_free_color_index

logger = logging.getLogger(__name__)

Listener = Callable[[List[Item]], None]


def _now() -> datetime:
    return datetime.now().astimezone()


class ItemStore:
    def __init__(
        self,
        palette: Tuple[int, ...] = PALETTE,
        clock: Callable[[], datetime] = _now,
    ):
        if not palette:
            raise ValueError("palette must not be empty")
        self.palette: Tuple[int, ...] = tuple(palette)
        self._clock = clock
        self._items: List[Item] = []
        self._color_index: int = 0
        self._listeners: List[Listener] = []

    # -------------------- observers --------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snapshot = self.list_items()
        for listener in list(self._listeners):
            listener(snapshot)

    # -------------------- queries --------------------
    def list_items(self) -> List[Item]:
        return [replace(item) for item in self._items]

    def get_item(self, item_id: str) -> Item:
        return replace(self._find(item_id))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    @property
    def color_index(self) -> int:
        return self._color_index

    def _find(self, item_id: str) -> Item:
        for item in self._items:
            if item.id == item_id:
                return item
        raise NotFoundError(item_id)

    # -------------------- mutations --------------------
    def add_item(self, title: str) -> Item:
        color = self.palette[self._color_index]
        self._color_index = (self._color_index + 1) % len(self.palette)
        item = Item(
            id=new_item_id(),
            title=title,
            progress=0.0,
            color=color,
            last_updated=self._clock(),
        )
        self._items.append(item)
        logger.debug("Added item %s (%r)", item.id, title)
        self._notify()
        return replace(item)

    def update_progress(self, item_id: str, progress: float) -> Item:
        item = self._find(item_id)
        item.progress = clamp_progress(progress)
        item.last_updated = self._clock()
        logger.debug("Item %s progress -> %.3f", item_id, item.progress)
        self._notify()
        return replace(item)

    def remove_item(self, item_id: str) -> None:
        item = self._find(item_id)
        self._items.remove(item)
        logger.debug("Removed item %s", item_id)
        self._notify()

    def load_items(self, items: Iterable[Item]) -> None:
        """Replace the whole collection, e.g. after decoding a token.

        The palette cursor moves to the first color no loaded item uses so the
        next ``add_item`` does not repeat a visible color when it can avoid it.
        """
        loaded = [replace(item) for item in items]
        ids = [item.id for item in loaded]
        if len(set(ids)) != len(ids):
            raise DecodeError("duplicate item ids in loaded state")
        self._items = loaded
        self._color_index = next_free_color_index((item.color for item in loaded), self.palette)
        logger.debug("Loaded %d items, next color slot %d", len(loaded), self._color_index)
        self._notify()

    def load_token(self, token: Optional[str]) -> int:
        """Decode ``token`` into the store; returns the number of items loaded.

        Malformed tokens load nothing (see ``codec.decode``) and leave the store empty.
        """
        self.load_items(codec.decode(token or ""))
        return len(self._items)

    def encode(self) -> str:
        return codec.encode(self._items)
