"""Exceptions raised by the hill chart core."""

from __future__ import annotations


class HillChartError(Exception):
    """Base class for hill chart errors."""


class NotFoundError(HillChartError, KeyError):
    """An operation referenced an item id that is not in the store."""

    def __init__(self, item_id: str):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"item {self.item_id!r} not found"


class DecodeError(HillChartError, ValueError):
    """An encoded state token could not be parsed."""


class DomainRangeError(DecodeError):
    """A decoded progress or color value lies outside its valid domain."""
