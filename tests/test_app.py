"""
Tests for application start-up wiring
"""
import random

import pytest

from schooldesk.app import SchoolDesk
from schooldesk.logger import ErrorLogger
from schooldesk.models import Student
from schooldesk.ports import MemoryPort
from schooldesk.settings_store import Settings, SettingsStore


@pytest.fixture
def settings_store(tmp_path):
    store = SettingsStore(tmp_path / "settings.json")
    store.save(Settings(data_dir=str(tmp_path / "data"), sample_student_count=8, sample_teacher_count=2))
    return store


def make_app(settings_store, tmp_path, port=None):
    return SchoolDesk(
        settings_store=settings_store,
        port=port,
        err_logger=ErrorLogger(tmp_path / "error_log.txt"),
        rng=random.Random(3),
    )


class TestSchoolDesk:
    def test_start_seeds_empty_store(self, settings_store, tmp_path):
        """Test the first start fills the data directory with demo records"""
        app = make_app(settings_store, tmp_path)

        assert app.seeded["students"] == 8
        assert app.services.teachers.count() == 2
        assert (tmp_path / "data" / "classes.json").exists()

    def test_restart_keeps_data(self, settings_store, tmp_path):
        """Test a second start reads the same data and seeds nothing"""
        first = make_app(settings_store, tmp_path)
        added = first.services.students.add(Student(name="New Kid", roll_number="1A99", class_id="1", section="A"))

        second = make_app(settings_store, tmp_path)

        assert second.seeded == {}
        assert second.services.students.find_by_id(added.id) == added
        assert second.services.students.get_all()[0].id == added.id

    def test_seeding_can_be_disabled(self, tmp_path):
        store = SettingsStore(tmp_path / "settings.json")
        store.save(Settings(seed_sample_data=False))

        app = make_app(store, tmp_path, port=MemoryPort())

        assert app.seeded == {}
        assert app.services.classes.count() == 0

    def test_save_settings_switches_add_order(self, settings_store, tmp_path):
        app = make_app(settings_store, tmp_path, port=MemoryPort())
        app.save_settings(Settings(data_dir=app.settings.data_dir, new_records_first=False))

        added = app.services.students.add(Student(name="Last", roll_number="9", class_id="1", section="A"))

        assert app.services.students.get_all()[-1].id == added.id
        assert settings_store.load().new_records_first is False

    def test_payslip(self, settings_store, tmp_path):
        app = make_app(settings_store, tmp_path, port=MemoryPort())
        record = app.services.salary.get_all()[0]
        teacher = app.services.teachers.find_by_id(record.teacher_id)

        filename, text = app.payslip(record.id)

        assert filename == f"Payslip_{teacher.name.replace(' ', '_')}_{record.month}.txt"
        assert f"Employee: {teacher.name}" in text
        assert "NET SALARY: \u20b9" in text
        assert app.payslip("missing") is None

    def test_activity_log(self, settings_store, tmp_path):
        app = make_app(settings_store, tmp_path, port=MemoryPort())

        assert app.log_event("add", "student", "STU-001", "Added Aarav") is True
        assert app.log_event("delete", "student", "STU-001") is True

        events = app.list_events()
        assert [e["action"] for e in events] == ["delete", "add"]
        assert events[1]["details"] == "Added Aarav"
        assert app.list_events(limit=1)[0]["action"] == "delete"


class TestMain:
    def test_prints_stats_and_exports(self, settings_store, tmp_path, monkeypatch, capsys):
        """Test the module entry point reports figures and writes the workbook"""
        import schooldesk.__main__ as entry

        monkeypatch.setattr(entry, "configure_logging", lambda: None)
        monkeypatch.setattr(entry, "SchoolDesk", lambda: make_app(settings_store, tmp_path, port=MemoryPort()))

        assert entry.main([str(tmp_path / "export.xlsx")]) == 0

        out = capsys.readouterr().out
        assert "total students: 8" in out
        assert (tmp_path / "export.xlsx").exists()
