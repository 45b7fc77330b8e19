from __future__ import annotations

import json
import logging
from typing import Any, Callable

from .logger import ErrorLogger
from .ports import StoragePort


class RecordStore:
    """Collections of JSON records kept under one key each in a storage port.

    Every operation reads the whole collection, works on the list and writes
    the whole list back. Failures never propagate: they are logged and reported
    through the return value (empty list, ``False`` or ``None``).
    """

    def __init__(
        self,
        port: StoragePort,
        new_records_first: bool = True,
        err_logger: ErrorLogger | None = None,
    ):
        self.port = port
        self.new_records_first = new_records_first
        self.err_logger = err_logger

    def _report(self, exc: BaseException, context: str) -> None:
        logging.error(f"{context}: {exc}")
        if self.err_logger is not None:
            try:
                self.err_logger.log_exception(exc, context)
            except OSError as e:
                logging.error(f"Failed to write error log: {e}")

    def get_all(self, key: str) -> list[dict[str, Any]]:
        try:
            raw = self.port.get(key)
        except (OSError, UnicodeDecodeError) as e:
            self._report(e, f"Error reading {key} from storage")
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            self._report(e, f"Error parsing {key} from storage")
            return []
        if not isinstance(data, list):
            logging.error(f"Ignoring {key}: stored value is {type(data).__name__}, not a list")
            return []
        rows = [r for r in data if isinstance(r, dict)]
        if len(rows) != len(data):
            logging.error(f"Dropping {len(data) - len(rows)} non-object entries from {key}")
        return rows

    def set_all(self, key: str, records: list[dict[str, Any]]) -> bool:
        try:
            raw = json.dumps(list(records), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            self._report(e, f"Error serializing {key}")
            return False
        try:
            self.port.set(key, raw)
        except OSError as e:
            self._report(e, f"Error saving {key} to storage")
            return False
        return True

    @staticmethod
    def _index_of(records: list[dict[str, Any]], record_id: str) -> int | None:
        for idx, r in enumerate(records):
            if r.get("id") == record_id:
                return idx
        return None

    def add(self, key: str, record: dict[str, Any]) -> bool:
        records = self.get_all(key)
        record_id = record.get("id")
        if record_id and self._index_of(records, record_id) is not None:
            logging.error(f"Not adding to {key}: id {record_id} already exists")
            return False
        if self.new_records_first:
            records.insert(0, record)
        else:
            records.append(record)
        return self.set_all(key, records)

    def update(self, key: str, record_id: str, record: dict[str, Any]) -> bool:
        records = self.get_all(key)
        idx = self._index_of(records, record_id)
        if idx is None:
            logging.debug(f"Update skipped, {record_id} not found in {key}")
            return False
        # Ids are never reassigned by an update.
        records[idx] = {**record, "id": record_id}
        return self.set_all(key, records)

    def delete(self, key: str, record_id: str) -> bool:
        records = self.get_all(key)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            logging.debug(f"Delete skipped, {record_id} not found in {key}")
            return False
        return self.set_all(key, remaining)

    def find_by_id(self, key: str, record_id: str) -> dict[str, Any] | None:
        records = self.get_all(key)
        idx = self._index_of(records, record_id)
        return None if idx is None else records[idx]

    def query(self, key: str, predicate: Callable[[dict[str, Any]], bool]) -> list[dict[str, Any]]:
        return [r for r in self.get_all(key) if predicate(r)]

    def clear(self, key: str) -> bool:
        return self.set_all(key, [])
