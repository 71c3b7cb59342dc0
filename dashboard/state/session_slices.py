import streamlit as st


PREFIX = "slice"


def _slice_key(name):
    return f"{PREFIX}.{name}"


class SessionStateStorage:
    """``KeyValueStorage`` kept in ``st.session_state`` for the current browser session."""

    def get(self, key):
        value = st.session_state.get(_slice_key(key))
        if value is None:
            return None
        return str(value)

    def set(self, key, value):
        st.session_state[_slice_key(key)] = value

    def delete(self, key):
        slice_key = _slice_key(key)
        if slice_key in st.session_state:
            del st.session_state[slice_key]
