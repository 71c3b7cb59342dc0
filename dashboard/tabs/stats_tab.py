import streamlit as st

from dashboard.visualizations import ProgressRing, render_progress_ring


def progress_rings(stats):
    today_completed = int(stats.get("today_habits_completed", 0) or 0)
    today_total = int(stats.get("today_habits_total", 0) or 0)
    weekly_percent = float(stats.get("weekly_percent", 0) or 0)
    completed_todos = int(stats.get("completed_todos", 0) or 0)
    return [
        (
            "Daily Habits",
            ProgressRing(value=float(stats.get("today_percent", 0) or 0), size="lg"),
            f"{today_completed}/{today_total}",
        ),
        (
            "Weekly Progress",
            ProgressRing(value=weekly_percent, size="lg"),
            f"{int(round(weekly_percent))}%",
        ),
        (
            "Tasks Done",
            ProgressRing(value=float(stats.get("todo_percent", 0) or 0), size="lg"),
            str(completed_todos),
        ),
    ]


def render_progress_card(ctx):
    rings = progress_rings(ctx.stats)
    st.subheader("Today's Progress")
    cols = st.columns(len(rings))
    for col, (title, ring, label) in zip(cols, rings):
        with col:
            st.markdown(render_progress_ring(ring, label), unsafe_allow_html=True)
            st.markdown(f"<div style='text-align:center;font-weight:500;'>{title}</div>", unsafe_allow_html=True)


def render_stats_tab(ctx):
    stats = ctx.stats
    categories = ctx.snapshot.get("categories") or []

    st.subheader("Quick Stats")
    cols = st.columns(2)
    cols[0].metric("Pending tasks", int(stats.get("pending_todos", 0) or 0))
    cols[1].metric("Categories", len(categories))
