import html
import logging
from datetime import datetime

import streamlit as st

from src.theme import set_theme
from src.hill.config import get_config
from src.hill.errors import NotFoundError
from src.hill.staleness import stale_item_ids
from src.hill_view import build_figure, items_frame
from src import session as hill

set_theme()

config = get_config()
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

state = hill.get_session()
# navigation between pages can drop the query string; put the token back
state.sync_url()

for notice in state.notices:
    st.toast(notice)
state.notices.clear()


@st.dialog("Delete item?")
def confirm_delete(item_id: str) -> None:
    try:
        title = state.store.get_item(item_id).title
    except NotFoundError:
        st.info("That item is already gone.")
        return
    st.write(f"**{title}** reached the end of the hill. Do you want to remove it?")
    col_a, col_b = st.columns(2)
    with col_a:
        if st.button("Delete", type="primary", use_container_width=True):
            hill.remove_item(state, item_id)
            st.rerun()
    with col_b:
        if st.button("Keep", use_container_width=True):
            st.rerun()


def render_chart() -> None:
    now = datetime.now().astimezone()
    items = state.store.list_items()
    stale = stale_item_ids(items, now, config.stale_after_days)
    controller = state.controller
    fig = build_figure(items, state.geometry, stale_ids=stale, dragging_id=controller.dragging_id)

    event = st.plotly_chart(
        fig,
        use_container_width=True,
        key="hill_chart",
        on_select="rerun",
        selection_mode="points",
        config={"displayModeBar": False},
    )
    before = controller.state
    release = hill.apply_selection(state, hill.selection_points(event))
    if release is not None or controller.state != before:
        st.rerun()


st.markdown('<div class="hill-title">Hill Chart To-Do</div>', unsafe_allow_html=True)
st.markdown(
    '<div class="hill-subtitle">Click an item to pick it up, then click a spot on the hill to drop it.</div>',
    unsafe_allow_html=True,
)

if config.refresh_seconds and hasattr(st, "fragment"):
    st.fragment(run_every=config.refresh_seconds)(render_chart)()
else:
    render_chart()

dragging_id = state.controller.dragging_id
if dragging_id is not None and dragging_id in state.store:
    dragged = state.store.get_item(dragging_id)
    st.markdown(
        f'<div class="hill-status">Moving <b>{html.escape(dragged.title)}</b></div>',
        unsafe_allow_html=True,
    )
    target = st.slider("Progress", 0, 100, int(round(dragged.progress * 100)), format="%d%%")
    col_drop, col_cancel = st.columns(2)
    with col_drop:
        if st.button("Drop", type="primary", use_container_width=True):
            hill.drop_at(state, target / 100.0)
            st.rerun()
    with col_cancel:
        if st.button("Cancel", use_container_width=True):
            hill.cancel_drag(state)
            st.rerun()
elif dragging_id is not None:
    # the item vanished mid-drag
    hill.cancel_drag(state)

if state.pending_delete is not None:
    pending, state.pending_delete = state.pending_delete, None
    confirm_delete(pending)

with st.form("new_item", clear_on_submit=True):
    col_text, col_add = st.columns([5, 1])
    with col_text:
        title = st.text_input("New To-Do Item", label_visibility="collapsed", placeholder="New To-Do Item")
    with col_add:
        submitted = st.form_submit_button("Add", use_container_width=True)
if submitted and hill.add_item(state, title):
    st.rerun()

items = state.store.list_items()
if items:
    st.subheader("Items")
    st.dataframe(
        items_frame(items, datetime.now().astimezone(), config.stale_after_days),
        use_container_width=True,
        hide_index=True,
        column_config={"Progress": st.column_config.ProgressColumn("Progress", min_value=0, max_value=100, format="%d%%")},
    )
else:
    st.caption("No items yet. Add one with the form above to get started.")
