"""Per-browser-session hill chart state and the glue between widgets and the core.

One ``HillSession`` lives in ``st.session_state``. It is restored from the
URL token the first time a session runs and writes the token back to the URL
after every store mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import streamlit as st

from src.hill import codec
from src.hill.config import HillChartConfig, get_config
from src.hill.curve import ChartGeometry
from src.hill.drag import DragController, Release
from src.hill.errors import NotFoundError
from src.hill.store import ItemStore
from src.hill_view import CURVE_ITEMS, CURVE_TARGETS
from src.url_state import get_query_param, set_query_param

logger = logging.getLogger(__name__)

SESSION_KEY = "hill_session"


@dataclass
class HillSession:
    config: HillChartConfig
    store: ItemStore
    controller: DragController
    pending_delete: Optional[str] = None
    last_selection: Optional[Tuple[Any, ...]] = None
    notices: list = field(default_factory=list)

    @property
    def geometry(self) -> ChartGeometry:
        return self.controller.geometry

    def sync_url(self) -> None:
        set_query_param(self.config.state_param, self.store.encode())


def create_session(config: HillChartConfig, token: Optional[str] = None) -> HillSession:
    store = ItemStore()
    # subscribe before loading so a rejected token is also cleared from the URL
    store.subscribe(lambda items: set_query_param(config.state_param, codec.encode(items)))
    loaded = store.load_token(token)
    geometry = ChartGeometry(config.chart_width, config.chart_height, config.amplitude_ratio)
    controller = DragController(store, geometry, hit_radius=config.hit_radius)
    session = HillSession(config=config, store=store, controller=controller)
    if token and not loaded:
        logger.info("Started with an empty chart; state token was unusable")
        session.notices.append("The shared link could not be read, starting with an empty chart.")
    return session


def get_session() -> HillSession:
    session = st.session_state.get(SESSION_KEY)
    if session is None:
        config = get_config()
        session = create_session(config, get_query_param(config.state_param))
        st.session_state[SESSION_KEY] = session
    return session


# -------------------- user actions --------------------
def add_item(session: HillSession, title: str) -> bool:
    title = (title or "").strip()
    if not title:
        return False
    session.store.add_item(title)
    return True


def remove_item(session: HillSession, item_id: str) -> bool:
    try:
        session.store.remove_item(item_id)
    except NotFoundError as e:
        logger.warning("Ignoring delete: %s", e)
        return False
    return True


def _point_signature(point: Mapping[str, Any]) -> Tuple[Any, ...]:
    return (
        point.get("curve_number"),
        point.get("point_index"),
        point.get("customdata"),
        round(float(point.get("x", 0.0)), 3),
        round(float(point.get("y", 0.0)), 3),
    )


def _after_release(session: HillSession, release: Optional[Release]) -> Optional[Release]:
    if release is not None and release.finished:
        session.pending_delete = release.item_id
    return release


def apply_selection(session: HillSession, points: Sequence[Mapping[str, Any]]) -> Optional[Release]:
    """Turn a chart click into gestures.

    Idle: the click is a gesture-start at the clicked point.
    Dragging: the click is a move to the clicked point followed by a release.
    Streamlit re-reports the current selection on every rerun, so a selection
    identical to the last one handled is ignored.
    """
    if not points:
        session.last_selection = None
        return None
    point = points[0]
    signature = _point_signature(point)
    if signature == session.last_selection:
        return None
    session.last_selection = signature

    if point.get("curve_number") not in (CURVE_ITEMS, CURVE_TARGETS):
        return None
    x = float(point.get("x", 0.0))
    y = float(point.get("y", 0.0))
    controller = session.controller
    if controller.state == "idle":
        controller.gesture_start(x, y)
        return None
    controller.gesture_move(x, y)
    return _after_release(session, controller.gesture_end())


def drop_at(session: HillSession, progress: float) -> Optional[Release]:
    """Move the dragged item to ``progress`` and release it."""
    controller = session.controller
    if controller.dragging_id is None:
        return None
    controller.gesture_move(progress * session.geometry.width, 0.0)
    return _after_release(session, controller.gesture_end())


def cancel_drag(session: HillSession) -> None:
    session.controller.gesture_end()


def selection_points(event: Any) -> Sequence[Dict[str, Any]]:
    """Points out of a ``st.plotly_chart(on_select=...)`` return value."""
    try:
        return list(event["selection"]["points"])
    except (KeyError, TypeError):
        pass
    try:
        return list(event.selection.points)
    except AttributeError:
        return []
