from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .models import AttendanceRecord, SalaryRecord, Teacher
from .services import Services


@dataclass
class DashboardStats:
    total_students: int = 0
    total_teachers: int = 0
    total_classes: int = 0
    total_subjects: int = 0
    today_attendance_rate: int = 0
    monthly_attendance_rate: int = 0
    total_fees_collected: float = 0.0
    pending_fees: float = 0.0
    overdue_notices: int = 0
    active_syllabus: int = 0
    unpaid_salaries: int = 0
    students_present: int = 0
    students_absent: int = 0


def parse_day(value: str) -> date | None:
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        logging.debug(f"Skipping unparseable date: {value!r}")
        return None


def attendance_rate(records: list[AttendanceRecord]) -> int:
    """Percentage of records marked present, rounded; 0 when there are none."""

    if not records:
        return 0
    present = sum(1 for r in records if r.status == "present")
    return round(present / len(records) * 100)


def dashboard_stats(services: Services, today: date | None = None) -> DashboardStats:
    today = today or date.today()
    today_iso = today.isoformat()
    window_start = today - timedelta(days=30)

    attendance = services.attendance.get_all()
    today_records = [a for a in attendance if a.date == today_iso]
    recent = []
    for a in attendance:
        day = parse_day(a.date)
        if day is not None and day >= window_start:
            recent.append(a)

    fees = services.fees.get_all()
    collected = sum(f.paid_amount or f.amount for f in fees if f.status == "paid")
    collected += sum(f.paid_amount for f in fees if f.status == "partial")
    pending = sum(f.outstanding for f in fees)

    overdue_notices = 0
    for n in services.notices.get_all():
        expiry = parse_day(n.expiry_date) if n.expiry_date else None
        if expiry is not None and expiry < today:
            overdue_notices += 1

    return DashboardStats(
        total_students=services.students.count(),
        total_teachers=services.teachers.count(),
        total_classes=services.classes.count(),
        total_subjects=services.subjects.count(),
        today_attendance_rate=attendance_rate(today_records),
        monthly_attendance_rate=attendance_rate(recent),
        total_fees_collected=collected,
        pending_fees=pending,
        overdue_notices=overdue_notices,
        active_syllabus=len(services.syllabus.get_by_status("in-progress")),
        unpaid_salaries=sum(1 for s in services.salary.get_all() if s.status != "paid"),
        students_present=sum(1 for a in today_records if a.status == "present"),
        students_absent=sum(1 for a in today_records if a.status == "absent"),
    )


def fee_summary(services: Services) -> dict[str, float]:
    fees = services.fees.get_all()
    total = sum(f.amount for f in fees)
    paid = sum(f.amount for f in fees if f.status == "paid")
    return {
        "total": total,
        "paid": paid,
        "pending": total - paid,
        "overdue_count": sum(1 for f in fees if f.status == "overdue"),
    }


def expense_summary(services: Services, month_name: str | None = None) -> dict[str, float]:
    """Totals over all expenses; ``this_month`` covers ``month_name`` (default: current month)."""

    month_name = month_name or date.today().strftime("%B")
    expenses = services.expenses.get_all()
    return {
        "total": sum(e.amount for e in expenses),
        "paid": sum(e.amount for e in expenses if e.status == "paid"),
        "pending": sum(e.amount for e in expenses if e.status == "pending"),
        "this_month": sum(e.amount for e in expenses if e.month == month_name),
    }


def salary_summary(services: Services, month: str | None = None) -> dict[str, float]:
    records = services.salary.get_by_month(month) if month else services.salary.get_all()
    return {
        "paid": sum(r.total_salary for r in records if r.status == "paid"),
        "pending": sum(r.total_salary for r in records if r.status == "pending"),
        "records": len(records),
    }


def _money(amount: float, currency: str) -> str:
    return f"{currency}{amount:,.0f}" if float(amount).is_integer() else f"{currency}{amount:,.2f}"


def render_payslip(record: SalaryRecord, teacher: Teacher | None, currency: str = "₹") -> str:
    name = teacher.name if teacher else "Unknown Teacher"
    employee_id = teacher.employee_id if teacher and teacher.employee_id else "N/A"
    lines = [
        f"PAYSLIP FOR {record.month}",
        "============================",
        f"Employee: {name}",
        f"Employee ID: {employee_id}",
        f"Month: {record.month}",
        "",
        "EARNINGS:",
        f"Basic Salary: {_money(record.basic_salary, currency)}",
        f"Allowances: {_money(record.allowances, currency)}",
        "",
        "DEDUCTIONS:",
        f"Deductions: {_money(record.deductions, currency)}",
        "",
        f"NET SALARY: {_money(record.total_salary, currency)}",
        f"Status: {record.status.upper()}",
    ]
    if record.paid_date:
        lines.append(f"Paid Date: {record.paid_date}")
    return "\n".join(lines) + "\n"


def payslip_filename(record: SalaryRecord, teacher: Teacher | None) -> str:
    name = teacher.name if teacher else "Unknown Teacher"
    safe_name = re.sub(r"\s+", "_", name)
    return f"Payslip_{safe_name}_{record.month}.txt"
