"""Read/write the encoded hill chart state in the page URL.

The token lives in a single query parameter. Helpers are best-effort across
Streamlit versions and never clear parameters they do not own, since
Streamlit's page routing may keep its own state in the URL.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import streamlit as st

logger = logging.getLogger(__name__)


def _first(value: Any) -> Optional[str]:
    if isinstance(value, list):
        value = value[0] if value else None
    return None if value is None else str(value)


def _read_params() -> Mapping[str, Any]:
    """Current query parameters, from whichever API this Streamlit has."""
    try:
        return st.query_params  # type: ignore[attr-defined]
    except Exception as e:
        logger.debug("st.query_params unavailable (%s); falling back to experimental API", e)
    try:
        return st.experimental_get_query_params() or {}  # type: ignore[attr-defined]
    except Exception as e:
        logger.warning("Could not read query parameters: %s", e)
        return {}


def get_query_param(key: str) -> Optional[str]:
    return _first(_read_params().get(key))


def set_query_param(key: str, value: Optional[str]) -> None:
    """Set ``key`` to ``value``; ``None`` or an empty string removes it."""

    value = value or None
    try:
        qp = st.query_params  # type: ignore[attr-defined]
        if value is None:
            if key in qp:
                del qp[key]
        elif qp.get(key) != value:
            qp[key] = value
        return
    except Exception as e:
        logger.debug("st.query_params unavailable (%s); falling back to experimental API", e)

    try:
        existing = st.experimental_get_query_params()  # type: ignore[attr-defined]
        updated = {str(k): v for k, v in (existing or {}).items()}
        if value is None:
            updated.pop(key, None)
        else:
            updated[key] = [value]
        st.experimental_set_query_params(**updated)  # type: ignore[attr-defined]
    except Exception as e:
        logger.warning("Could not write %s to the URL: %s", key, e)


def share_link(key: str, token: str, base_url: str = "") -> str:
    """Relative (or absolute, given ``base_url``) link that restores ``token``."""
    if not token:
        return base_url or "?"
    return f"{base_url}?{key}={token}"
