from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

import project_config


@pytest.fixture
def toggle_document() -> Dict[str, Any]:
    """Two mutually activating switches: A follows B and B follows A."""

    return {
        "name": "toggle",
        "species": [
            {"name": "B", "max": 1, "regulators": ["A"], "rules": [{"when": [0], "target": 0}, {"when": [1], "target": 1}]},
            {"name": "A", "max": 1, "regulators": ["B"], "rules": [{"when": [0], "target": 0}, {"when": [1], "target": 1}]},
        ],
    }


@pytest.fixture
def write_model(tmp_path: Path) -> Callable[..., Path]:
    def _write(document: Dict[str, Any], filename: str = "model.json") -> Path:
        path = tmp_path / filename
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch):
    for key in (
        "REGNET_CONFIG",
        "REGNET_OUTPUT_DIR",
        "REGNET_TRACE_LEVEL",
        "REGNET_VALIDATION_PROFILE",
        "REGNET_EVENTS_ENABLED",
        "REGNET_EVENTS_DIR",
    ):
        monkeypatch.delenv(key, raising=False)
    project_config.reload()
    yield
    project_config.reload()
