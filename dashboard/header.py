from datetime import date

import streamlit as st


def today_heading(day):
    return f"{day.strftime('%A')}, {day.strftime('%B')} {day.day}, {day.year}"


def render_global_header(ctx):
    today_iso = ctx.snapshot.get("today")
    today = date.fromisoformat(today_iso) if today_iso else date.today()

    st.markdown("<div class='sticky-header-wrap'>", unsafe_allow_html=True)
    st.title("Dashboard")
    st.caption(today_heading(today))
    if ctx.get("backend_error"):
        st.warning("Backend unavailable… data may take a moment to appear.")
    st.markdown("</div>", unsafe_allow_html=True)
