from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Generic, TypeVar

from .constants import (
    ATTENDANCE_KEY,
    CLASSES_KEY,
    EXPENSES_KEY,
    FEES_KEY,
    MONTHS,
    NOTICES_KEY,
    SALARY_KEY,
    STUDENTS_KEY,
    SUBJECTS_KEY,
    SYLLABUS_KEY,
    TEACHERS_KEY,
)
from .logger import now_ts
from .models import (
    AttendanceRecord,
    Expense,
    FeeRecord,
    Notice,
    Record,
    SalaryRecord,
    SchoolClass,
    Student,
    Subject,
    Syllabus,
    Teacher,
    ValidationError,
    new_id,
)
from .storage import RecordStore

T = TypeVar("T", bound=Record)


class CollectionService(Generic[T]):
    """Typed view of one collection in a :class:`RecordStore`."""

    key: str = ""
    model: type[T]

    def __init__(self, store: RecordStore):
        self.store = store

    def _load(self, rows: list[dict[str, Any]]) -> list[T]:
        return [self.model.from_dict(r) for r in rows]

    def _check(self, record: T) -> None:
        problems = record.validate()
        if problems:
            raise ValidationError(record.ENTITY, problems)

    def prepare(self, record: T) -> T:
        """Hook for derived fields, applied before validation on add and update."""
        return record

    def get_all(self) -> list[T]:
        return self._load(self.store.get_all(self.key))

    def set_all(self, records: list[T]) -> bool:
        return self.store.set_all(self.key, [r.to_dict() for r in records])

    def add(self, record: T) -> T | None:
        """Store a new record, filling in id and timestamps when blank.

        Returns the record as stored, or ``None`` when the write was dropped.
        Raises :class:`ValidationError` for missing or invalid fields.
        """

        now = now_ts()
        record = replace(
            record,
            id=record.id or new_id(),
            created_at=record.created_at or now,
            updated_at=record.updated_at or now,
        )
        record = self.prepare(record)
        self._check(record)
        if not self.store.add(self.key, record.to_dict()):
            return None
        return record

    def update(self, record_id: str, record: T) -> bool:
        """Replace the stored record with ``record`` (full replace, not a patch)."""

        existing = self.store.find_by_id(self.key, record_id)
        if existing is None:
            return False
        record = replace(
            record,
            id=record_id,
            created_at=str(existing.get("createdAt") or record.created_at or now_ts()),
            updated_at=now_ts(),
        )
        record = self.prepare(record)
        self._check(record)
        return self.store.update(self.key, record_id, record.to_dict())

    def delete(self, record_id: str) -> bool:
        return self.store.delete(self.key, record_id)

    def find_by_id(self, record_id: str) -> T | None:
        row = self.store.find_by_id(self.key, record_id)
        return None if row is None else self.model.from_dict(row)

    def filter_by(self, **criteria: Any) -> list[T]:
        """Exact-match filter on loaded field values, e.g. ``filter_by(class_id="3")``."""

        return [r for r in self.get_all() if all(getattr(r, k) == v for k, v in criteria.items())]

    def count(self) -> int:
        return len(self.store.get_all(self.key))

    def is_empty(self) -> bool:
        return self.count() == 0


class StudentService(CollectionService[Student]):
    key = STUDENTS_KEY
    model = Student

    def get_by_class(self, class_id: str) -> list[Student]:
        return self.filter_by(class_id=class_id)

    def search(self, term: str) -> list[Student]:
        term = term.strip().lower()
        if not term:
            return self.get_all()
        return [
            s
            for s in self.get_all()
            if term in s.name.lower() or term in s.roll_number.lower() or term in s.email.lower()
        ]


class TeacherService(CollectionService[Teacher]):
    key = TEACHERS_KEY
    model = Teacher

    def find_by_employee_id(self, employee_id: str) -> Teacher | None:
        matches = self.filter_by(employee_id=employee_id)
        return matches[0] if matches else None


class ClassService(CollectionService[SchoolClass]):
    key = CLASSES_KEY
    model = SchoolClass

    def find_by_grade(self, grade: str) -> list[SchoolClass]:
        return self.filter_by(grade=grade)


class SubjectService(CollectionService[Subject]):
    key = SUBJECTS_KEY
    model = Subject

    def get_by_class(self, class_id: str) -> list[Subject]:
        return [s for s in self.get_all() if class_id in s.class_ids]

    def get_by_teacher(self, teacher_id: str) -> list[Subject]:
        return self.filter_by(teacher_id=teacher_id)


class AttendanceService(CollectionService[AttendanceRecord]):
    key = ATTENDANCE_KEY
    model = AttendanceRecord

    def get_by_date(self, day: str) -> list[AttendanceRecord]:
        return self.filter_by(date=day)

    def get_by_student(self, student_id: str) -> list[AttendanceRecord]:
        return self.filter_by(student_id=student_id)

    def get_by_class(self, class_id: str) -> list[AttendanceRecord]:
        return self.filter_by(class_id=class_id)

    def mark(
        self,
        student_id: str,
        class_id: str,
        day: str,
        status: str,
        marked_by: str = "Admin",
        remarks: str = "",
    ) -> AttendanceRecord | None:
        """Record one student's status for a day, replacing an earlier mark."""

        existing = self.filter_by(student_id=student_id, class_id=class_id, date=day)
        if existing:
            current = existing[0]
            updated = replace(current, status=status, marked_by=marked_by, remarks=remarks or current.remarks)
            if not self.update(current.id, updated):
                return None
            return self.find_by_id(current.id)
        return self.add(
            AttendanceRecord(
                student_id=student_id,
                class_id=class_id,
                date=day,
                status=status,
                marked_by=marked_by,
                remarks=remarks,
            )
        )


def _month_name(day: str) -> tuple[str, int] | None:
    try:
        parsed = date.fromisoformat(day)
    except ValueError:
        return None
    return MONTHS[parsed.month - 1], parsed.year


class ExpenseService(CollectionService[Expense]):
    key = EXPENSES_KEY
    model = Expense

    def prepare(self, record: Expense) -> Expense:
        derived = _month_name(record.date) if record.date else None
        if derived is None:
            return record
        month, year = derived
        return replace(record, month=record.month or month, year=record.year or year)

    def get_by_month(self, month_name: str) -> list[Expense]:
        return self.filter_by(month=month_name)

    def get_by_category(self, category: str) -> list[Expense]:
        return self.filter_by(category=category)

    def get_by_status(self, status: str) -> list[Expense]:
        return self.filter_by(status=status)


class FeeService(CollectionService[FeeRecord]):
    key = FEES_KEY
    model = FeeRecord

    def get_by_student(self, student_id: str) -> list[FeeRecord]:
        return self.filter_by(student_id=student_id)

    def get_by_status(self, status: str) -> list[FeeRecord]:
        return self.filter_by(status=status)

    def mark_paid(
        self,
        fee_id: str,
        payment_method: str = "cash",
        payment_date: str | None = None,
        collected_by: str = "",
    ) -> bool:
        fee = self.find_by_id(fee_id)
        if fee is None:
            return False
        paid = replace(
            fee,
            status="paid",
            paid_amount=fee.amount,
            payment_method=payment_method,
            payment_date=payment_date or date.today().isoformat(),
            collected_by=collected_by or fee.collected_by,
            receipt_number=fee.receipt_number or f"RCP{fee.id[-6:]}",
        )
        return self.update(fee_id, paid)


class SalaryService(CollectionService[SalaryRecord]):
    key = SALARY_KEY
    model = SalaryRecord

    def prepare(self, record: SalaryRecord) -> SalaryRecord:
        return replace(record, total_salary=record.compute_total())

    def get_by_teacher(self, teacher_id: str) -> list[SalaryRecord]:
        return self.filter_by(teacher_id=teacher_id)

    def get_by_month(self, month: str) -> list[SalaryRecord]:
        return self.filter_by(month=month)

    def mark_paid(self, salary_id: str, paid_date: str | None = None, payment_method: str = "bank_transfer") -> bool:
        record = self.find_by_id(salary_id)
        if record is None:
            return False
        paid = replace(
            record,
            status="paid",
            paid_date=paid_date or date.today().isoformat(),
            payment_method=record.payment_method or payment_method,
        )
        return self.update(salary_id, paid)


class NoticeService(CollectionService[Notice]):
    key = NOTICES_KEY
    model = Notice

    def get_by_audience(self, audience: str) -> list[Notice]:
        return [n for n in self.get_all() if n.target_audience in (audience, "all")]

    def get_active(self, on_date: date | None = None) -> list[Notice]:
        """Published notices whose publish date has come and expiry has not passed."""

        day = (on_date or date.today()).isoformat()
        active = []
        for n in self.get_all():
            if not n.is_published:
                continue
            if n.publish_date and n.publish_date[:10] > day:
                continue
            if n.expiry_date and n.expiry_date[:10] < day:
                continue
            active.append(n)
        return active


class SyllabusService(CollectionService[Syllabus]):
    key = SYLLABUS_KEY
    model = Syllabus

    def get_by_class(self, class_id: str) -> list[Syllabus]:
        return [s for s in self.get_all() if class_id in s.class_ids]

    def get_by_subject(self, subject_id: str) -> list[Syllabus]:
        return self.filter_by(subject_id=subject_id)

    def get_by_status(self, status: str) -> list[Syllabus]:
        return self.filter_by(status=status)


class Services:
    """All typed collections over one store."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.students = StudentService(store)
        self.teachers = TeacherService(store)
        self.classes = ClassService(store)
        self.subjects = SubjectService(store)
        self.attendance = AttendanceService(store)
        self.fees = FeeService(store)
        self.expenses = ExpenseService(store)
        self.notices = NoticeService(store)
        self.syllabus = SyllabusService(store)
        self.salary = SalaryService(store)

    def all(self) -> list[CollectionService]:
        return [
            self.students,
            self.teachers,
            self.classes,
            self.subjects,
            self.attendance,
            self.fees,
            self.expenses,
            self.notices,
            self.syllabus,
            self.salary,
        ]
