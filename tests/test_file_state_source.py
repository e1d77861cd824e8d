# tests/test_file_state_source.py
from __future__ import annotations

import json

import pytest

from taskstate.adapters.system.file_state_source import FileStateSource
from tests.fakes import sample_state


def test_loads_json_document(tmp_path):
    p = tmp_path / "state.json"
    p.write_text(json.dumps(sample_state()), encoding="utf-8")
    doc = FileStateSource(str(p)).load()
    assert doc["leader"] == "master@10.0.0.1:5050"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileStateSource(str(tmp_path / "nope.json")).load()


def test_non_object_document(tmp_path):
    p = tmp_path / "state.json"
    p.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        FileStateSource(str(p)).load()
