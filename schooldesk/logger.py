from __future__ import annotations

import logging
import traceback
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from .constants import ERROR_LOG_PATH

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass
class AppEvent:
    timestamp: str
    action: str
    entity_type: str
    entity_id: str
    details: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ErrorLogger:
    def __init__(self, path: Path = ERROR_LOG_PATH):
        self.path = path

    def log_exception(self, exc: BaseException, context: str = "") -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        ts = now_ts()
        with self.path.open("a", encoding="utf-8") as f:
            f.write(f"[{ts}] {context}\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
            f.write("\n")


def configure_logging(path: Path = ERROR_LOG_PATH, level: int = logging.INFO) -> None:
    """Send application log records to a plain text file next to the data."""

    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(filename=str(path), level=level, format=LOG_FORMAT, encoding="utf-8")


def now_ts() -> str:
    return datetime.now().isoformat(timespec="seconds")
