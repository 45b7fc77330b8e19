import random

import pytest

from schooldesk.logger import ErrorLogger
from schooldesk.ports import MemoryPort
from schooldesk.services import Services
from schooldesk.storage import RecordStore


@pytest.fixture
def port():
    return MemoryPort()


@pytest.fixture
def err_logger(tmp_path):
    return ErrorLogger(tmp_path / "error_log.txt")


@pytest.fixture
def store(port, err_logger):
    return RecordStore(port, new_records_first=True, err_logger=err_logger)


@pytest.fixture
def services(store):
    return Services(store)


@pytest.fixture
def rng():
    return random.Random(1234)
