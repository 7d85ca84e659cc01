"""Encoded state token: the whole item list as one URL-safe string.

Format: padded base64url over compact UTF-8 JSON, an array of
``{id, title, progress, color, lastUpdated}`` records. An empty collection
encodes to the empty string so callers can drop the query parameter.

``decode`` fails closed: anything malformed is logged and treated as "no
items". ``decode_strict`` raises instead and is what ``decode`` wraps.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import math
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Set

from .errors import DecodeError, DomainRangeError
from .models import PALETTE, Item

logger = logging.getLogger(__name__)


def encode(items: Iterable[Item]) -> str:
    records = [item.to_dict() for item in items]
    if not records:
        return ""
    text = json.dumps(records, separators=(",", ":"), ensure_ascii=False)
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def decode(token: str) -> List[Item]:
    try:
        return decode_strict(token)
    except DecodeError as e:
        size = f"{len(token)} chars" if isinstance(token, str) else type(token).__name__
        logger.warning("Discarding malformed state token (%s): %s", size, e)
        return []


def decode_strict(token: str) -> List[Item]:
    if not isinstance(token, str):
        raise DecodeError(f"token must be a string, got {type(token).__name__}")
    token = token.strip()
    if not token:
        return []

    raw = _b64decode(token)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"token is not UTF-8: {e}") from e
    try:
        payload = json.loads(text)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and over-long integer literals
        raise DecodeError(f"token is not JSON: {e}") from e
    if not isinstance(payload, list):
        raise DecodeError(f"expected a list of items, got {type(payload).__name__}")

    items: List[Item] = []
    seen: Set[str] = set()
    for index, record in enumerate(payload):
        item = _parse_record(record, index)
        if item.id in seen:
            raise DecodeError(f"duplicate item id {item.id!r}")
        seen.add(item.id)
        items.append(item)
    return items


def _b64decode(token: str) -> bytes:
    padded = token + "=" * (-len(token) % 4)
    try:
        return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError) as e:
        raise DecodeError(f"token is not base64url: {e}") from e


def _parse_record(record: Any, index: int) -> Item:
    if not isinstance(record, Mapping):
        raise DecodeError(f"item #{index} is not an object")

    item_id = record.get("id")
    if not isinstance(item_id, str) or not item_id:
        raise DecodeError(f"item #{index} has no id")

    title = record.get("title")
    if not isinstance(title, str):
        raise DecodeError(f"item #{index} has no title")

    # tokens from the first release call it "position"
    progress = record.get("progress", record.get("position"))
    if isinstance(progress, bool) or not isinstance(progress, (int, float)):
        raise DecodeError(f"item #{index} has no numeric progress")
    try:
        progress = float(progress)
    except OverflowError as e:
        raise DomainRangeError(f"item #{index} progress outside [0, 1]") from e
    if not math.isfinite(progress) or not 0.0 <= progress <= 1.0:
        raise DomainRangeError(f"item #{index} progress {progress!r} outside [0, 1]")

    color = record.get("color")
    if isinstance(color, bool) or not isinstance(color, int):
        raise DecodeError(f"item #{index} has no integer color")
    if color not in PALETTE:
        raise DomainRangeError(f"item #{index} color {color:#x} not in palette")

    stamp = record.get("lastUpdated")
    if not isinstance(stamp, str):
        raise DecodeError(f"item #{index} has no lastUpdated")
    try:
        last_updated = datetime.fromisoformat(stamp)
    except ValueError as e:
        raise DecodeError(f"item #{index} lastUpdated {stamp!r} is not ISO-8601") from e

    return Item(id=item_id, title=title, progress=progress, color=color, last_updated=last_updated)
