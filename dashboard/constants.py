import calendar
from enum import Enum


class Frequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
DAY_TO_INDEX = {name: idx for idx, name in enumerate(DAY_NAMES)}
DEFAULT_WEEK_START = calendar.SUNDAY

HABIT_LOG_WINDOW = 7
PENDING_TODO_LIMIT = 5
DAYS_PER_WEEK = 7

TODAY_HABITS_PREVIEW = 3
UPCOMING_TODOS_PREVIEW = 4

CATEGORY_TYPES = ["HABIT", "TODO", "BOTH"]

RING_DIAMETERS = {
    "sm": 60,
    "md": 80,
    "lg": 100,
    "xl": 120,
}
RING_THICKNESS = {
    "sm": 6,
    "md": 8,
    "lg": 10,
    "xl": 12,
}
RING_COLOR = "#3772A6"
RING_TRACK_COLOR = "#E5E5E5"
DEFAULT_HABIT_COLOR = "#8FB6D9"
DEFAULT_TODO_COLOR = "#B8B8B8"

MSG_LOAD_FAILED = "Error loading dashboard data"
MSG_HABIT_DONE = "Habit marked as complete"
MSG_HABIT_FAILED = "Error updating habit"
MSG_TODO_DONE = "Task completed!"
MSG_TODO_FAILED = "Error updating task"
MSG_TODO_PARTIAL = "Task marked complete, but its log entry could not be saved"

USER_STORAGE_NAME = "user-storage"
