from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "add_client.py"


@pytest.fixture()
def add_client():
    spec = importlib.util.spec_from_file_location("add_client", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_adds_client_to_given_document(add_client, tmp_path, capsys, data_file):
    target = tmp_path / "other.json"

    code = add_client.main(["--name", "Ada Lovelace", "--email", "ada@example.com", "--risk", "high", "--data-file", str(target)])

    assert code == 0
    stored = json.loads(target.read_text(encoding="utf-8"))
    assert [(c["id"], c["riskCategory"]) for c in stored] == [(1, "High")]
    assert "OK: client registered" in capsys.readouterr().out


def test_defaults_to_configured_document(add_client, data_file):
    assert add_client.main(["--name", "Ada", "--email", "ada@example.com"]) == 0
    assert json.loads(data_file.read_text(encoding="utf-8"))[0]["riskCategory"] == "Low"


def test_reports_validation_errors(add_client, data_file, capsys):
    code = add_client.main(["--name", "Ada", "--email", "not-an-email"])

    assert code == 1
    assert "Error: Email format is invalid." in capsys.readouterr().err
    assert not data_file.exists()
