from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

# Make the portal package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portal.core import config as core_config  # noqa: E402
from portal.repositories import json_storage  # noqa: E402
from portal.services.client_service import ClientService  # noqa: E402

FIXED_TODAY = date(2026, 10, 18)


@pytest.fixture()
def data_file(tmp_path, monkeypatch):
    """Point CLIENTS_DATA_FILE at a temporary document and reset cached settings."""
    path = tmp_path / "clients.json"
    monkeypatch.setenv("CLIENTS_DATA_FILE", str(path))
    monkeypatch.setenv("APP_ENV", "test")
    core_config.get_settings.cache_clear()
    yield path
    core_config.get_settings.cache_clear()


@pytest.fixture()
def seed(data_file):
    """Write raw records to the temporary document."""

    def _seed(records):
        json_storage.save(records, data_file)
        return records

    return _seed


@pytest.fixture()
def today():
    return FIXED_TODAY


@pytest.fixture()
def service(data_file):
    return ClientService(data_file, today=lambda: FIXED_TODAY)


@pytest.fixture()
def http(data_file):
    from fastapi.testclient import TestClient

    from portal.app import create_app

    with TestClient(create_app()) as client:
        yield client
