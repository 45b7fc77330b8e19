from __future__ import annotations

from pathlib import Path

APP_NAME = "SchoolDesk"

WORKSPACE_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = WORKSPACE_ROOT / "data"
SETTINGS_JSON_PATH = WORKSPACE_ROOT / "settings.json"
ERROR_LOG_PATH = WORKSPACE_ROOT / "error_log.txt"

STUDENTS_KEY = "students"
TEACHERS_KEY = "teachers"
CLASSES_KEY = "classes"
SUBJECTS_KEY = "subjects"
ATTENDANCE_KEY = "attendance"
FEES_KEY = "fees"
EXPENSES_KEY = "expenses"
NOTICES_KEY = "notices"
SYLLABUS_KEY = "syllabus"
SALARY_KEY = "salary"
ACTIVITY_KEY = "activity_log"

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

ATTENDANCE_STATUSES = ("present", "absent", "late", "excused")
FEE_TYPES = ("tuition", "books", "uniform", "diary", "transport", "library", "laboratory", "examination", "other")
FEE_STATUSES = ("pending", "paid", "overdue", "partial")
EXPENSE_CATEGORIES = (
    "classes",
    "books",
    "uniform",
    "notebooks",
    "diary",
    "stationary",
    "transport",
    "utilities",
    "maintenance",
    "other",
)
EXPENSE_STATUSES = ("pending", "approved", "paid", "rejected")
NOTICE_PRIORITIES = ("low", "medium", "high", "urgent")
NOTICE_AUDIENCES = ("all", "students", "teachers", "parents")
SYLLABUS_STATUSES = ("planned", "in-progress", "completed", "delayed")
SALARY_STATUSES = ("paid", "pending", "overdue")
