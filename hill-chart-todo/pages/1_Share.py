import streamlit as st

from src.theme import set_theme
from src.hill import codec
from src.hill.errors import DecodeError
from src.url_state import share_link
from src import session as hill

set_theme(page_title="Share - Hill Chart To-Do")

state = hill.get_session()
token = state.store.encode()

st.title("Share")
st.write(
    "The whole chart lives in the link below; there is no server-side storage. "
    "Anyone opening it gets their own copy of the items."
)

if not token:
    st.info("The chart is empty, so there is nothing to share yet.")
else:
    st.markdown('<div class="hill-share">', unsafe_allow_html=True)
    st.code(share_link(state.config.state_param, token), language=None)
    st.markdown('</div>', unsafe_allow_html=True)
    st.caption(f"{len(state.store)} item(s), {len(token)} characters. Append this to the app URL.")

st.divider()
restore = st.text_input("Load a state token", help="Replaces the current chart.")
if st.button("Load", disabled=not restore.strip()):
    try:
        loaded = codec.decode_strict(restore.strip())
    except DecodeError as e:
        st.error(f"That token could not be read: {e}")
    else:
        state.store.load_items(loaded)
        st.success(f"Loaded {len(loaded)} item(s).")
