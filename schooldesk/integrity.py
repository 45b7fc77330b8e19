from __future__ import annotations

from dataclasses import dataclass

from .services import Services


@dataclass
class DanglingReference:
    collection: str
    record_id: str
    field: str
    missing_id: str
    target: str


def find_dangling_references(services: Services) -> list[DanglingReference]:
    """List references that point at records which no longer exist.

    Deletes never cascade, so removing a class leaves its students pointing at
    a missing ``classId``. This only reports; nothing is repaired.
    """

    ids = {
        "students": {s.id for s in services.students.get_all()},
        "teachers": {t.id for t in services.teachers.get_all()},
        "classes": {c.id for c in services.classes.get_all()},
        "subjects": {s.id for s in services.subjects.get_all()},
    }
    found: list[DanglingReference] = []

    def check(collection: str, record_id: str, field: str, value: str, target: str) -> None:
        if value and value not in ids[target]:
            found.append(DanglingReference(collection, record_id, field, value, target))

    for s in services.students.get_all():
        check("students", s.id, "classId", s.class_id, "classes")
    for c in services.classes.get_all():
        check("classes", c.id, "classTeacherId", c.class_teacher_id, "teachers")
    for sub in services.subjects.get_all():
        check("subjects", sub.id, "teacherId", sub.teacher_id, "teachers")
        for cid in sub.class_ids:
            check("subjects", sub.id, "classIds", cid, "classes")
    for a in services.attendance.get_all():
        check("attendance", a.id, "studentId", a.student_id, "students")
        check("attendance", a.id, "classId", a.class_id, "classes")
    for f in services.fees.get_all():
        check("fees", f.id, "studentId", f.student_id, "students")
    for sal in services.salary.get_all():
        check("salary", sal.id, "teacherId", sal.teacher_id, "teachers")
    for syl in services.syllabus.get_all():
        check("syllabus", syl.id, "subjectId", syl.subject_id, "subjects")
        check("syllabus", syl.id, "teacherId", syl.teacher_id, "teachers")
        for cid in syl.class_ids:
            check("syllabus", syl.id, "classIds", cid, "classes")
    return found
