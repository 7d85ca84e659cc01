from __future__ import annotations

import math
import os
from typing import Optional


def env_str(name: str, default: str, *, strip: bool = True) -> str:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip() if strip else value


def env_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    """Integer env var; unparsable values give ``default``, small ones are raised to ``minimum``."""
    raw = os.environ.get(name)
    try:
        value = default if raw is None else int(raw.strip())
    except ValueError:
        value = default
    if minimum is not None:
        value = max(minimum, value)
    return value


def env_float(
    name: str,
    default: float,
    *,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> float:
    """Float env var. nan/inf and values outside [minimum, maximum] give ``default``."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        return default
    if not math.isfinite(value):
        return default
    if minimum is not None and value < minimum:
        return default
    if maximum is not None and value > maximum:
        return default
    return value
