"""Hill chart core - curve geometry, item store, state token, staleness and drag handling.

This package has no Streamlit dependency; the app pages are thin glue on top.
"""

from .codec import decode, decode_strict, encode
from .config import HillChartConfig, get_config
from .curve import ChartGeometry, clamp_progress, height_at, progress_at
from .drag import DragController, Release, find_closest
from .errors import DecodeError, DomainRangeError, HillChartError, NotFoundError
from .models import PALETTE, Item, color_hex
from .staleness import business_days_between, is_stale, stale_item_ids
from .store import ItemStore

__all__ = [
    "ChartGeometry",
    "DecodeError",
    "DomainRangeError",
    "DragController",
    "HillChartConfig",
    "HillChartError",
    "Item",
    "ItemStore",
    "NotFoundError",
    "PALETTE",
    "Release",
    "business_days_between",
    "clamp_progress",
    "color_hex",
    "decode",
    "decode_strict",
    "encode",
    "find_closest",
    "get_config",
    "height_at",
    "is_stale",
    "progress_at",
    "stale_item_ids",
]
