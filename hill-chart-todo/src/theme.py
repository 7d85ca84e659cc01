import streamlit as st
import os

CSS_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'assets', 'custom_theme.css')


def set_theme(
    page_title: str = "Hill Chart To-Do",
    page_icon: str = "⛰️",
    layout: str = "centered",
    initial_sidebar_state: str = "auto",
):
    """Configure the Streamlit page & inject the app CSS.

    Parameters allow per-page override of title/icon. Safe to call once at the
    top of each page; Streamlit ignores repeated page_config calls but the CSS
    is (re)injected.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except Exception:
        # set_page_config can only be called once; ignore if already set.
        pass

    try:
        with open(CSS_FILE, 'r', encoding='utf-8') as f:
            st.markdown(f"<style>{f.read()}</style>", unsafe_allow_html=True)
    except FileNotFoundError:
        st.error(f"Theme file not found at {CSS_FILE}.")
