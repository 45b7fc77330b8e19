from __future__ import annotations

import logging
import random
from datetime import date, timedelta

from .constants import MONTHS
from .logger import now_ts
from .models import (
    Expense,
    FeeRecord,
    Notice,
    SalaryRecord,
    SchoolClass,
    Student,
    Subject,
    Teacher,
    _safe_int,
)
from .services import Services

FIRST_NAMES = [
    "Aarav", "Vivaan", "Aditya", "Ishaan", "Kabir", "Arjun", "Reyansh", "Sai",
    "Ananya", "Diya", "Saanvi", "Aadhya", "Myra", "Kiara", "Anika", "Meera",
    "Rohan", "Priya", "Neha", "Rahul", "Sara", "Zoya", "Imran", "Farah",
]
LAST_NAMES = [
    "Sharma", "Verma", "Gupta", "Patel", "Reddy", "Iyer", "Khan", "Singh",
    "Das", "Mehta", "Nair", "Joshi", "Kapoor", "Chopra", "Rao", "Bose",
]
STREETS = ["MG Road", "Park Street", "Lake View", "Station Road", "Civil Lines", "Hill Road"]
CITIES = ["Delhi", "Mumbai", "Pune", "Jaipur", "Lucknow", "Chennai"]
BLOOD_GROUPS = ["A+", "A-", "B+", "B-", "O+", "O-", "AB+", "AB-"]
QUALIFICATIONS = ["B.Ed", "M.Sc, B.Ed", "M.A, B.Ed", "M.Ed", "Ph.D"]

SUBJECT_FIXTURES = [
    ("1", "Mathematics", "MATH", 4),
    ("2", "English", "ENG", 4),
    ("3", "Science", "SCI", 3),
    ("4", "Social Studies", "SST", 3),
    ("5", "Computer Science", "CS", 2),
]

CLASS_COUNT = 5

# fee type -> amount; tuition uses the configured monthly fee
FEE_AMOUNTS = {"transport": 1500.0, "other": 800.0, "library": 300.0, "laboratory": 500.0}
SAMPLE_FEE_TYPES = ["tuition", "transport", "other", "library", "laboratory"]


def sample_classes(ts: str) -> list[SchoolClass]:
    return [
        SchoolClass(
            id=str(grade),
            name=f"Grade {grade}",
            grade=str(grade),
            sections=["A", "B"],
            capacity=30,
            subjects=[],
            created_at=ts,
            updated_at=ts,
        )
        for grade in range(1, CLASS_COUNT + 1)
    ]


def sample_subjects(ts: str, class_ids: list[str]) -> list[Subject]:
    return [
        Subject(
            id=sid,
            name=name,
            code=code,
            description=f"{name} for primary grades",
            class_ids=list(class_ids),
            credit_hours=hours,
            created_at=ts,
            updated_at=ts,
        )
        for sid, name, code, hours in SUBJECT_FIXTURES
    ]


def _person_name(rng: random.Random) -> str:
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"


def _email(name: str, domain: str, n: int) -> str:
    return f"{name.lower().replace(' ', '.')}{n}@{domain}"


def _phone(rng: random.Random) -> str:
    return f"+91 9{rng.randint(100000000, 999999999)}"


def _address(rng: random.Random) -> str:
    return f"{rng.randint(1, 250)} {rng.choice(STREETS)}, {rng.choice(CITIES)}"


def _random_day(rng: random.Random, start: date, span_days: int) -> str:
    return (start + timedelta(days=rng.randint(0, span_days))).isoformat()


def sample_teachers(
    ts: str,
    rng: random.Random,
    count: int,
    subject_ids: list[str],
    class_ids: list[str],
    prefix: str = "TCH-",
    base_salary: float = 30000.0,
) -> list[Teacher]:
    teachers = []
    for n in range(1, count + 1):
        name = _person_name(rng)
        teachers.append(
            Teacher(
                id=f"{prefix}{n:03d}",
                name=name,
                email=_email(name, "school.edu", n),
                phone=_phone(rng),
                address=_address(rng),
                date_of_birth=_random_day(rng, date(1970, 1, 1), 365 * 25),
                qualification=rng.choice(QUALIFICATIONS),
                experience=f"{rng.randint(1, 20)} years",
                subjects=rng.sample(subject_ids, k=min(2, len(subject_ids))),
                classes=rng.sample(class_ids, k=min(2, len(class_ids))),
                joining_date=_random_day(rng, date(2010, 1, 1), 365 * 12),
                employee_id=f"EMP{n:03d}",
                salary=base_salary + rng.randint(0, 10) * 1000,
                created_at=ts,
                updated_at=ts,
            )
        )
    return teachers


def sample_students(
    ts: str,
    rng: random.Random,
    count: int,
    classes: list[SchoolClass],
    prefix: str = "STU-",
) -> list[Student]:
    if not classes:
        return []
    students = []
    roll_counters: dict[str, int] = {}
    for n in range(1, count + 1):
        cls = rng.choice(classes)
        section = rng.choice(cls.sections or ["A"])
        roll_counters[cls.id] = roll_counters.get(cls.id, 0) + 1
        name = _person_name(rng)
        parent = f"{rng.choice(FIRST_NAMES)} {name.split()[-1]}"
        age = 5 + max(_safe_int(cls.grade, 1), 1)
        students.append(
            Student(
                id=f"{prefix}{n:03d}",
                name=name,
                email=_email(name, "students.school.edu", n),
                phone=_phone(rng),
                address=_address(rng),
                date_of_birth=_random_day(rng, date(date.today().year - age, 1, 1), 364),
                class_id=cls.id,
                class_name=cls.name,
                section=section,
                parent_name=parent,
                parent_phone=_phone(rng),
                parent_email=_email(parent, "mail.com", n),
                admission_date=_random_day(rng, date(2020, 4, 1), 365 * 3),
                roll_number=f"{cls.grade}{section}{roll_counters[cls.id]:02d}",
                blood_group=rng.choice(BLOOD_GROUPS),
                created_at=ts,
                updated_at=ts,
            )
        )
    return students


def sample_notices(ts: str) -> list[Notice]:
    today = date.today()
    return [
        Notice(
            id="1",
            title="Annual Sports Day",
            content="The annual sports day will be held next month. All students are requested "
            "to participate in various sports activities. Parents are welcome to attend.",
            priority="high",
            target_audience="all",
            publish_date=today.isoformat(),
            expiry_date=(today + timedelta(days=30)).isoformat(),
            created_by="Principal",
            created_at=ts,
            updated_at=ts,
        ),
        Notice(
            id="2",
            title="Parent-Teacher Meeting",
            content="Parent-teacher meetings are scheduled for this Saturday. "
            "Please check with your class teacher for specific timings.",
            priority="medium",
            target_audience="parents",
            publish_date=today.isoformat(),
            created_by="Academic Coordinator",
            created_at=ts,
            updated_at=ts,
        ),
        Notice(
            id="3",
            title="Library Books Return Reminder",
            content="All students who have borrowed books from the library are requested to return "
            "them by Friday. Late fees will be applicable after the due date.",
            priority="low",
            target_audience="students",
            publish_date=today.isoformat(),
            created_by="Librarian",
            created_at=ts,
            updated_at=ts,
        ),
    ]


def sample_expenses(ts: str) -> list[Expense]:
    return [
        Expense(
            id="1",
            title="Mathematics Books Purchase",
            description="Textbooks for Grade 5 students",
            category="books",
            amount=1500.0,
            date="2024-01-15",
            month="January",
            year=2024,
            spent_by="John Admin",
            approved_by="Principal Smith",
            payment_method="bank",
            recipient_type="student",
            student_grade="5",
            student_class="Grade 5-A",
            vendor="Educational Books Ltd",
            receipt_number="INV-2024-001",
            status="paid",
            created_at=ts,
            updated_at=ts,
        ),
        Expense(
            id="2",
            title="Classroom Maintenance",
            description="Repair and painting of Grade 3 classrooms",
            category="maintenance",
            amount=2500.0,
            date="2024-01-20",
            month="January",
            year=2024,
            spent_by="Maintenance Team",
            payment_method="cash",
            recipient_type="vendor",
            vendor="City Contractors",
            status="approved",
            created_at=ts,
            updated_at=ts,
        ),
        Expense(
            id="3",
            title="Stationary Supplies",
            description="Notebooks, pens, pencils for all grades",
            category="stationary",
            amount=1200.0,
            date="2024-02-10",
            month="February",
            year=2024,
            spent_by="Office Manager",
            payment_method="bank",
            recipient_type="school",
            status="paid",
            created_at=ts,
            updated_at=ts,
        ),
    ]


def sample_fees(ts: str, rng: random.Random, students: list[Student], tuition: float, limit: int = 20) -> list[FeeRecord]:
    today = date.today()
    due = (today.replace(day=1) + timedelta(days=32)).replace(day=15)
    fees = []
    for n, student in enumerate(students[:limit], start=1):
        fee_type = SAMPLE_FEE_TYPES[(n - 1) % len(SAMPLE_FEE_TYPES)]
        amount = tuition if fee_type == "tuition" else FEE_AMOUNTS[fee_type]
        is_paid = rng.random() > 0.3
        is_overdue = not is_paid and rng.random() > 0.7
        fees.append(
            FeeRecord(
                id=str(n),
                student_id=student.id,
                student_name=student.name,
                class_name=student.class_name,
                fee_type=fee_type,
                amount=amount,
                paid_amount=amount if is_paid else 0.0,
                due_date=due.isoformat(),
                month=MONTHS[due.month - 1],
                year=due.year,
                status="paid" if is_paid else "overdue" if is_overdue else "pending",
                payment_method=rng.choice(["cash", "bank", "online"]) if is_paid else "",
                payment_date=(today - timedelta(days=rng.randint(0, 30))).isoformat() if is_paid else "",
                receipt_number=f"RCP{n:04d}" if is_paid else "",
                created_at=ts,
                updated_at=ts,
            )
        )
    return fees


def sample_salaries(ts: str, rng: random.Random, teachers: list[Teacher]) -> list[SalaryRecord]:
    today = date.today()
    month = f"{today.year}-{today.month:02d}"
    records = []
    for teacher in teachers:
        record = SalaryRecord(
            id=f"salary-{teacher.id}-{month}",
            teacher_id=teacher.id,
            month=month,
            basic_salary=teacher.salary or 30000.0,
            allowances=5000.0,
            deductions=2000.0,
            status="pending" if rng.random() > 0.7 else "paid",
            payment_method="bank_transfer",
            created_at=ts,
            updated_at=ts,
        )
        record.total_salary = record.compute_total()
        if record.status == "paid":
            record.paid_date = today.isoformat()
        records.append(record)
    return records


def initialize_sample_data(
    services: Services,
    rng: random.Random | None = None,
    student_count: int = 25,
    teacher_count: int = 6,
    student_prefix: str = "STU-",
    teacher_prefix: str = "TCH-",
    base_salary: float = 30000.0,
    tuition_fee: float = 5000.0,
) -> dict[str, int]:
    """Seed every empty collection with demo records.

    Collections that already hold data are left alone, so calling this on every
    start is safe. Returns the number of records written per collection key.
    """

    rng = rng or random.Random()
    ts = now_ts()
    seeded: dict[str, int] = {}

    def seed(service, records) -> None:
        if not records or not service.is_empty():
            return
        if service.set_all(records):
            seeded[service.key] = len(records)
            logging.info(f"Seeded {len(records)} {service.key}")

    seed(services.classes, sample_classes(ts))
    classes = services.classes.get_all()
    class_ids = [c.id for c in classes]

    seed(services.subjects, sample_subjects(ts, class_ids))
    subject_ids = [s.id for s in services.subjects.get_all()]

    if services.teachers.is_empty():
        seed(
            services.teachers,
            sample_teachers(ts, rng, teacher_count, subject_ids, class_ids, teacher_prefix, base_salary),
        )
    if services.students.is_empty():
        seed(services.students, sample_students(ts, rng, student_count, classes, student_prefix))
    if services.fees.is_empty():
        seed(services.fees, sample_fees(ts, rng, services.students.get_all(), tuition_fee))
    if services.salary.is_empty():
        seed(services.salary, sample_salaries(ts, rng, services.teachers.get_all()))

    seed(services.notices, sample_notices(ts))
    seed(services.expenses, sample_expenses(ts))
    return seeded
