from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .constants import DATA_DIR, SETTINGS_JSON_PATH


@dataclass
class Settings:
    data_dir: str = str(DATA_DIR)
    seed_sample_data: bool = True
    new_records_first: bool = True  # prepend on add; False appends
    sample_student_count: int = 25
    sample_teacher_count: int = 6
    student_id_prefix: str = "STU-"
    teacher_id_prefix: str = "TCH-"
    default_student_fee: float = 5000.0  # Monthly tuition fee
    default_teacher_salary: float = 30000.0  # Monthly basic salary
    currency_symbol: str = "₹"

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Settings":
        defaults = Settings()
        try:
            students = int(d.get("sample_student_count", defaults.sample_student_count))
        except Exception:
            students = defaults.sample_student_count
        try:
            teachers = int(d.get("sample_teacher_count", defaults.sample_teacher_count))
        except Exception:
            teachers = defaults.sample_teacher_count
        # Negative counts would make the bootstrap silently skip a collection.
        students = max(students, 0)
        teachers = max(teachers, 0)
        try:
            student_fee = float(d.get("default_student_fee", defaults.default_student_fee))
        except Exception:
            student_fee = defaults.default_student_fee
        try:
            teacher_salary = float(d.get("default_teacher_salary", defaults.default_teacher_salary))
        except Exception:
            teacher_salary = defaults.default_teacher_salary
        return Settings(
            data_dir=str(d.get("data_dir", defaults.data_dir)),
            seed_sample_data=bool(d.get("seed_sample_data", True)),
            new_records_first=bool(d.get("new_records_first", True)),
            sample_student_count=students,
            sample_teacher_count=teachers,
            student_id_prefix=str(d.get("student_id_prefix", "STU-")),
            teacher_id_prefix=str(d.get("teacher_id_prefix", "TCH-")),
            default_student_fee=student_fee,
            default_teacher_salary=teacher_salary,
            currency_symbol=str(d.get("currency_symbol", defaults.currency_symbol)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_dir": self.data_dir,
            "seed_sample_data": self.seed_sample_data,
            "new_records_first": self.new_records_first,
            "sample_student_count": self.sample_student_count,
            "sample_teacher_count": self.sample_teacher_count,
            "student_id_prefix": self.student_id_prefix,
            "teacher_id_prefix": self.teacher_id_prefix,
            "default_student_fee": self.default_student_fee,
            "default_teacher_salary": self.default_teacher_salary,
            "currency_symbol": self.currency_symbol,
        }


class SettingsStore:
    def __init__(self, path: Path = SETTINGS_JSON_PATH):
        self.path = path

    def load(self) -> Settings:
        if not self.path.exists():
            settings = Settings()
            self.save(settings)
            return settings

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.error(f"Failed to load settings: {e}")
            return Settings()
        return Settings.from_dict(data if isinstance(data, dict) else {})

    def save(self, settings: Settings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
            f.write("\n")
