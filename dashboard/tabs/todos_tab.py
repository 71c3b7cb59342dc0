import html
from datetime import datetime

import streamlit as st

from dashboard import actions
from dashboard.constants import DEFAULT_TODO_COLOR, UPCOMING_TODOS_PREVIEW


def format_due_label(due_date):
    if not due_date:
        return ""
    value = due_date if isinstance(due_date, datetime) else datetime.fromisoformat(str(due_date))
    return f"Due: {value.strftime('%b')} {value.day}, {value.year}"


def render_todos_tab(ctx):
    todos = ctx.snapshot.get("todos") or []

    st.subheader("Upcoming Tasks")
    if not todos:
        st.caption("No upcoming tasks.")
        return

    for todo in todos[:UPCOMING_TODOS_PREVIEW]:
        category = todo.get("category") or {}
        color = category.get("color_code") or DEFAULT_TODO_COLOR
        cols = st.columns([6, 1.4])
        with cols[0]:
            st.markdown(
                (
                    f"<span style='display:inline-block;width:10px;height:10px;border-radius:3px;"
                    f"background:{html.escape(color)};margin-right:8px;'></span>"
                    f"<strong>{html.escape(todo.get('name') or '')}</strong>"
                    f"<div class='small-label'>{format_due_label(todo.get('due_date'))}</div>"
                ),
                unsafe_allow_html=True,
            )
        with cols[1]:
            st.button(
                "✓",
                key=f"todos.complete.{todo.get('id')}",
                help="Mark task complete",
                on_click=actions.complete_todo,
                args=(todo.get("id"),),
            )

    remaining = len(todos) - UPCOMING_TODOS_PREVIEW
    if remaining > 0:
        st.caption(f"See more: {remaining} other task(s).")
