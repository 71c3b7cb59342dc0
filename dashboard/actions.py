import logging

import requests
import streamlit as st

from dashboard.constants import MSG_HABIT_FAILED, MSG_LOAD_FAILED, MSG_TODO_FAILED
from dashboard.data import api_client

logger = logging.getLogger(__name__)

PAYLOAD_KEY = "dashboard.payload"
FETCH_ERROR_KEY = "dashboard.fetch_error"


def load_dashboard(refresh=False):
    try:
        payload = api_client.refresh_dashboard() if refresh else api_client.get_dashboard()
    except (api_client.ApiError, requests.RequestException, RuntimeError) as exc:
        logger.warning("Dashboard fetch failed: %s", exc)
        st.session_state[FETCH_ERROR_KEY] = MSG_LOAD_FAILED
        return st.session_state.get(PAYLOAD_KEY)
    st.session_state.pop(FETCH_ERROR_KEY, None)
    st.session_state[PAYLOAD_KEY] = payload
    return payload


def _mutate(call, target_id, failure_message):
    try:
        result = call(target_id)
    except api_client.ApiError as exc:
        logger.warning("Completion of %s failed: %s", target_id, exc)
        st.toast(exc.message or failure_message, icon="⚠️")
        return
    except (requests.RequestException, RuntimeError) as exc:
        logger.warning("Completion of %s failed: %s", target_id, exc)
        st.toast(failure_message, icon="⚠️")
        return
    st.session_state[PAYLOAD_KEY] = result.get("dashboard")
    st.toast(result.get("message") or "Saved", icon="✅")


def complete_habit(habit_id):
    _mutate(api_client.complete_habit, habit_id, MSG_HABIT_FAILED)


def complete_todo(todo_id):
    _mutate(api_client.complete_todo, todo_id, MSG_TODO_FAILED)
