from __future__ import annotations

import re
import threading
import time
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from .constants import (
    ATTENDANCE_STATUSES,
    EXPENSE_CATEGORIES,
    EXPENSE_STATUSES,
    FEE_STATUSES,
    FEE_TYPES,
    NOTICE_AUDIENCES,
    NOTICE_PRIORITIES,
    SALARY_STATUSES,
    SYLLABUS_STATUSES,
)

_id_lock = threading.Lock()
_last_id = 0


def new_id() -> str:
    """Millisecond timestamp id, bumped so ids stay unique within the process."""

    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
    return str(candidate)


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _safe_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _safe_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce(type_name: str, value: Any) -> Any:
    if type_name == "str":
        return "" if value is None else str(value)
    if type_name == "float":
        return _safe_float(value)
    if type_name == "int":
        return _safe_int(value)
    if type_name == "bool":
        if isinstance(value, str):
            return value.strip().lower() not in ("", "0", "false", "no", "off")
        return bool(value)
    if type_name.startswith("list"):
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return []
    return value


class ValidationError(ValueError):
    def __init__(self, entity: str, problems: list[str]):
        self.entity = entity
        self.problems = problems
        super().__init__(f"Invalid {entity}: {'; '.join(problems)}")


@dataclass
class Record:
    """Base for every stored entity.

    JSON keys are the camelCase form of the field names. Keys this version does
    not know about are parked in ``extra`` and written back untouched.
    """

    id: str = ""
    created_at: str = ""
    updated_at: str = ""
    extra: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    REQUIRED: ClassVar[tuple[str, ...]] = ()
    CHOICES: ClassVar[dict[str, tuple[str, ...]]] = {}
    ENTITY: ClassVar[str] = "record"

    @classmethod
    def from_dict(cls, d: dict[str, Any]):
        known = {}
        seen = set()
        for f in fields(cls):
            if f.name == "extra":
                continue
            key = to_camel(f.name)
            seen.add(key)
            if key in d:
                known[f.name] = _coerce(str(f.type), d[key])
        extra = {k: v for k, v in d.items() if k not in seen}
        return cls(**known, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            out[to_camel(f.name)] = list(value) if isinstance(value, list) else value
        for k, v in self.extra.items():
            out.setdefault(k, v)
        return out

    def validate(self) -> list[str]:
        problems = []
        for name in self.REQUIRED:
            if not getattr(self, name):
                problems.append(f"{to_camel(name)} is required")
        for name, allowed in self.CHOICES.items():
            value = getattr(self, name)
            if value and value not in allowed:
                problems.append(f"{to_camel(name)} must be one of {', '.join(allowed)}")
        return problems


@dataclass
class Student(Record):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    date_of_birth: str = ""
    class_id: str = ""
    class_name: str = ""
    section: str = ""
    parent_name: str = ""
    parent_phone: str = ""
    parent_email: str = ""
    admission_date: str = ""
    roll_number: str = ""
    blood_group: str = ""

    REQUIRED: ClassVar[tuple[str, ...]] = ("name", "roll_number", "class_id", "section")
    ENTITY: ClassVar[str] = "student"


@dataclass
class Teacher(Record):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    date_of_birth: str = ""
    qualification: str = ""
    experience: str = ""
    subjects: list[str] = field(default_factory=list)
    classes: list[str] = field(default_factory=list)
    joining_date: str = ""
    employee_id: str = ""
    salary: float = 0.0

    REQUIRED: ClassVar[tuple[str, ...]] = ("name", "employee_id", "email")
    ENTITY: ClassVar[str] = "teacher"


@dataclass
class SchoolClass(Record):
    name: str = ""
    grade: str = ""
    sections: list[str] = field(default_factory=list)
    capacity: int = 0
    class_teacher_id: str = ""
    subjects: list[str] = field(default_factory=list)

    REQUIRED: ClassVar[tuple[str, ...]] = ("name", "grade", "capacity")
    ENTITY: ClassVar[str] = "class"


@dataclass
class Subject(Record):
    name: str = ""
    code: str = ""
    description: str = ""
    teacher_id: str = ""
    class_ids: list[str] = field(default_factory=list)
    credit_hours: int = 0

    REQUIRED: ClassVar[tuple[str, ...]] = ("name", "code", "credit_hours")
    ENTITY: ClassVar[str] = "subject"


@dataclass
class AttendanceRecord(Record):
    student_id: str = ""
    class_id: str = ""
    date: str = ""  # YYYY-MM-DD
    status: str = "present"
    marked_by: str = ""
    remarks: str = ""

    REQUIRED: ClassVar[tuple[str, ...]] = ("student_id", "class_id", "date", "status")
    CHOICES: ClassVar[dict[str, tuple[str, ...]]] = {"status": ATTENDANCE_STATUSES}
    ENTITY: ClassVar[str] = "attendance record"


@dataclass
class FeeRecord(Record):
    student_id: str = ""
    student_name: str = ""
    class_name: str = ""
    fee_type: str = "tuition"
    amount: float = 0.0
    paid_amount: float = 0.0
    due_date: str = ""
    month: str = ""  # month name, e.g. "January"
    year: int = 0
    status: str = "pending"
    payment_method: str = ""
    payment_date: str = ""
    receipt_number: str = ""
    collected_by: str = ""
    description: str = ""

    REQUIRED: ClassVar[tuple[str, ...]] = ("student_id", "amount", "due_date", "month")
    CHOICES: ClassVar[dict[str, tuple[str, ...]]] = {"fee_type": FEE_TYPES, "status": FEE_STATUSES}
    ENTITY: ClassVar[str] = "fee record"

    @property
    def outstanding(self) -> float:
        if self.status == "paid":
            return 0.0
        return max(self.amount - self.paid_amount, 0.0)


@dataclass
class Expense(Record):
    title: str = ""
    description: str = ""
    category: str = "other"
    amount: float = 0.0
    date: str = ""
    month: str = ""
    year: int = 0
    spent_by: str = ""
    approved_by: str = ""
    payment_method: str = "cash"
    recipient_type: str = "school"
    student_grade: str = ""
    student_class: str = ""
    vendor: str = ""
    receipt_number: str = ""
    status: str = "pending"

    REQUIRED: ClassVar[tuple[str, ...]] = ("title", "amount", "date", "spent_by")
    CHOICES: ClassVar[dict[str, tuple[str, ...]]] = {
        "category": EXPENSE_CATEGORIES,
        "payment_method": ("cash", "bank", "online", "cheque"),
        "recipient_type": ("school", "student", "teacher", "vendor"),
        "status": EXPENSE_STATUSES,
    }
    ENTITY: ClassVar[str] = "expense"


@dataclass
class Notice(Record):
    title: str = ""
    content: str = ""
    priority: str = "medium"
    target_audience: str = "all"
    is_published: bool = True
    publish_date: str = ""
    expiry_date: str = ""
    attachments: list[str] = field(default_factory=list)
    created_by: str = ""

    REQUIRED: ClassVar[tuple[str, ...]] = ("title", "content")
    CHOICES: ClassVar[dict[str, tuple[str, ...]]] = {
        "priority": NOTICE_PRIORITIES,
        "target_audience": NOTICE_AUDIENCES,
    }
    ENTITY: ClassVar[str] = "notice"


@dataclass
class Syllabus(Record):
    title: str = ""
    description: str = ""
    subject_id: str = ""
    teacher_id: str = ""
    class_ids: list[str] = field(default_factory=list)
    grade: str = ""
    target_type: str = "weekly"
    start_date: str = ""
    end_date: str = ""
    topics: list[str] = field(default_factory=list)
    learning_objectives: list[str] = field(default_factory=list)
    assessment_methods: list[str] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)
    status: str = "planned"
    progress_percentage: int = 0

    REQUIRED: ClassVar[tuple[str, ...]] = ("title", "subject_id", "teacher_id", "grade", "start_date", "end_date")
    CHOICES: ClassVar[dict[str, tuple[str, ...]]] = {
        "target_type": ("weekly", "monthly"),
        "status": SYLLABUS_STATUSES,
    }
    ENTITY: ClassVar[str] = "syllabus"

    def validate(self) -> list[str]:
        problems = super().validate()
        if not 0 <= self.progress_percentage <= 100:
            problems.append("progressPercentage must be between 0 and 100")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            problems.append("endDate must not be before startDate")
        return problems


@dataclass
class SalaryRecord(Record):
    teacher_id: str = ""
    month: str = ""  # YYYY-MM
    basic_salary: float = 0.0
    allowances: float = 0.0
    deductions: float = 0.0
    total_salary: float = 0.0
    status: str = "pending"
    paid_date: str = ""
    payment_method: str = ""
    remarks: str = ""

    REQUIRED: ClassVar[tuple[str, ...]] = ("teacher_id", "month", "basic_salary")
    CHOICES: ClassVar[dict[str, tuple[str, ...]]] = {"status": SALARY_STATUSES}
    ENTITY: ClassVar[str] = "salary record"

    def compute_total(self) -> float:
        return self.basic_salary + self.allowances - self.deductions

    def validate(self) -> list[str]:
        problems = super().validate()
        if self.month and not re.fullmatch(r"\d{4}-\d{2}", self.month):
            problems.append("month must look like YYYY-MM")
        return problems
