import streamlit as st

from dashboard.tabs.habits_tab import render_habits_tab
from dashboard.tabs.stats_tab import render_progress_card, render_stats_tab
from dashboard.tabs.todos_tab import render_todos_tab

# Completion buttons change the whole snapshot, so sections render in a
# single pass instead of as independent fragments.
SECTIONS = [
    render_progress_card,
    render_habits_tab,
    render_todos_tab,
    render_stats_tab,
]


def render_router(ctx):
    if ctx.get("fetch_error"):
        st.error(ctx["fetch_error"])
    last_error = ctx.last_error
    if last_error:
        st.warning(last_error.get("message") or "Something went wrong.")

    for render_section in SECTIONS:
        with st.container(border=True):
            render_section(ctx)
