import os

import streamlit as st

from dashboard import actions
from dashboard.constants import USER_STORAGE_NAME
from dashboard.context import DashboardContext
from dashboard.data import api_client
from dashboard.header import render_global_header
from dashboard.logging_config import configure_logging
from dashboard.router import render_router
from dashboard.state.session_slices import SessionStateStorage
from dashboard.state.store import StateStore

configure_logging()
st.set_page_config(page_title="Habit Dashboard", layout="wide")


def get_secret(path, default=None):
    try:
        current = st.secrets
        for key in path:
            current = current[key]
        return current
    except Exception:
        return default


def open_user_session():
    session = StateStore(
        {"user_id": None},
        storage=SessionStateStorage(),
        name=USER_STORAGE_NAME,
        persist_keys=("user_id",),
    )
    session.open()
    if not session.get("user_id"):
        configured = (
            get_secret(("app", "DASHBOARD_USER_ID"))
            or get_secret(("DASHBOARD_USER_ID",))
            or os.getenv("DASHBOARD_USER_ID")
        )
        if configured:
            session.set(user_id=str(configured))
    return session


user_session = open_user_session()
api_client.configure(get_secret, lambda: user_session.get("user_id"))

if not api_client.is_enabled():
    st.error("API_BASE_URL is not configured.")
    st.stop()

if not user_session.get("user_id"):
    user_id = st.text_input("User id", key="session.user_id_input").strip()
    if not user_id:
        st.info("Enter your user id to load the dashboard.")
        st.stop()
    user_session.set(user_id=user_id)

with st.sidebar:
    st.caption(f"Signed in as {user_session.get('user_id')}")
    refresh_requested = st.button("Refresh", key="dashboard.refresh")
    if st.button("Switch user", key="session.switch_user"):
        user_session.clear_persisted()
        st.session_state.pop(actions.PAYLOAD_KEY, None)
        st.rerun()

if refresh_requested or actions.PAYLOAD_KEY not in st.session_state:
    with st.spinner("Loading your dashboard..."):
        actions.load_dashboard(refresh=refresh_requested)

context = DashboardContext(
    {
        "user_id": user_session.get("user_id"),
        "dashboard": st.session_state.get(actions.PAYLOAD_KEY) or {},
        "fetch_error": st.session_state.get(actions.FETCH_ERROR_KEY),
        "backend_error": bool(st.session_state.get(actions.FETCH_ERROR_KEY)),
    }
)

render_global_header(context)
render_router(context)
user_session.close()
