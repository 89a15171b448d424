from typing import TypedDict

SavedSettings = TypedDict(
    "SavedSettings",
    {
        "focusDuration": int,
        "breakDuration": int,
        "longBreakDuration": int,
        "longBreakInterval": int,
    },
)

SavedTaskID = str

SavedTask = TypedDict(
    "SavedTask",
    {
        "id": SavedTaskID,
        "title": str,
        "estimatedPomodoros": int,
        "actualPomodoros": int,
        "completed": bool,
        # POSIX timestamp
        "createdAt": float,
    },
)

SavedDailyStat = TypedDict(
    "SavedDailyStat",
    {
        "date": str,
        "focusTime": int,
        "pomodorosCompleted": int,
    },
)

SavedProgress = TypedDict(
    "SavedProgress",
    {
        "totalFocusTime": int,
        "totalPomodorosCompleted": int,
        "currentStreak": int,
        "lastActiveDate": str | None,
        "dailyStats": list[SavedDailyStat],
    },
)

SavedWeeklyProgress = TypedDict(
    "SavedWeeklyProgress",
    {
        "weekStartDate": str,
        "completedTasks": list[SavedTaskID],
    },
)
