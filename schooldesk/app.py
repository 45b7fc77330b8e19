from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any

from .bootstrap import initialize_sample_data
from .constants import ACTIVITY_KEY, APP_NAME
from .logger import AppEvent, ErrorLogger, now_ts
from .models import new_id
from .ports import JsonDirectoryPort, StoragePort
from .reports import payslip_filename, render_payslip
from .settings_store import Settings, SettingsStore
from .services import Services
from .storage import RecordStore


class SchoolDesk:
    """Everything the screens need, wired from the saved settings.

    On construction the settings are loaded (and created on first run), the
    record store is opened over the storage port, and empty collections are
    seeded with demo data when ``seed_sample_data`` is on.
    """

    def __init__(
        self,
        settings_store: SettingsStore | None = None,
        port: StoragePort | None = None,
        err_logger: ErrorLogger | None = None,
        rng: random.Random | None = None,
    ):
        self.err_logger = err_logger or ErrorLogger()
        self.settings_store = settings_store or SettingsStore()
        self.settings: Settings = self.settings_store.load()

        self.port = port if port is not None else JsonDirectoryPort(Path(self.settings.data_dir))
        self.store = RecordStore(self.port, self.settings.new_records_first, self.err_logger)
        self.services = Services(self.store)

        self.seeded: dict[str, int] = {}
        if self.settings.seed_sample_data:
            self.seeded = self.seed(rng)
        logging.info(f"{APP_NAME} started with data in {self.settings.data_dir}")

    def seed(self, rng: random.Random | None = None) -> dict[str, int]:
        s = self.settings
        return initialize_sample_data(
            self.services,
            rng=rng,
            student_count=s.sample_student_count,
            teacher_count=s.sample_teacher_count,
            student_prefix=s.student_id_prefix,
            teacher_prefix=s.teacher_id_prefix,
            base_salary=s.default_teacher_salary,
            tuition_fee=s.default_student_fee,
        )

    def payslip(self, salary_id: str) -> tuple[str, str] | None:
        """Return ``(filename, text)`` for a salary record, or ``None`` if it is gone."""

        record = self.services.salary.find_by_id(salary_id)
        if record is None:
            return None
        teacher = self.services.teachers.find_by_id(record.teacher_id)
        return payslip_filename(record, teacher), render_payslip(record, teacher, self.settings.currency_symbol)

    def save_settings(self, settings: Settings) -> None:
        self.settings_store.save(settings)
        self.settings = settings
        self.store.new_records_first = settings.new_records_first

    def log_event(self, action: str, entity_type: str, entity_id: str, details: str = "") -> bool:
        event = AppEvent(now_ts(), action, entity_type, entity_id, details)
        return self.store.add(ACTIVITY_KEY, {"id": new_id(), **event.to_dict()})

    def list_events(self, limit: int = 500) -> list[dict[str, Any]]:
        events = self.store.get_all(ACTIVITY_KEY)
        if self.store.new_records_first:
            return events[:limit]
        return events[-limit:]
