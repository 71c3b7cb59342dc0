import html

import streamlit as st

from dashboard import actions
from dashboard.constants import DEFAULT_HABIT_COLOR, TODAY_HABITS_PREVIEW
from dashboard.metrics import frequency_label


def _habit_badge(habit):
    category = habit.get("category") or {}
    color = category.get("color_code") or DEFAULT_HABIT_COLOR
    return (
        f"<span style='display:inline-block;width:10px;height:10px;border-radius:3px;"
        f"background:{html.escape(color)};margin-right:8px;'></span>"
    )


def empty_habits_message(snapshot):
    if not snapshot.get("habits"):
        return "No habits found. Create your first habit!"
    if not snapshot.get("today_habits"):
        return "No habits scheduled for today."
    return None


def render_habits_tab(ctx):
    today_habits = ctx.snapshot.get("today_habits") or []

    st.subheader("Today's Habits")
    empty_message = empty_habits_message(ctx.snapshot)
    if empty_message:
        st.caption(empty_message)
        return

    for item in today_habits[:TODAY_HABITS_PREVIEW]:
        habit = item.get("habit") or {}
        completed = bool(item.get("completed"))
        cols = st.columns([6, 1.4])
        with cols[0]:
            st.markdown(
                (
                    f"{_habit_badge(habit)}<strong>{html.escape(habit.get('name') or '')}</strong>"
                    f"<div class='small-label'>{frequency_label(habit.get('frequency'))}</div>"
                ),
                unsafe_allow_html=True,
            )
        with cols[1]:
            st.button(
                "Done" if completed else "Complete",
                key=f"habits.complete.{habit.get('id')}",
                disabled=completed,
                type="secondary" if completed else "primary",
                on_click=actions.complete_habit,
                args=(habit.get("id"),),
            )

    remaining = len(today_habits) - TODAY_HABITS_PREVIEW
    if remaining > 0:
        st.caption(f"See more: {remaining} other habit(s) due today.")
