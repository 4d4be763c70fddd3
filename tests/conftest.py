# tests/conftest.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import pytest


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """
    Keep the developer's own config out of tests: no TEAFORGE_* overrides and an
    empty XDG config home.
    """
    monkeypatch.delenv("TEAFORGE_CONFIG", raising=False)
    monkeypatch.delenv("TEAFORGE_LOG_LEVEL", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    yield


@pytest.fixture
def write_log(tmp_path: Path):
    """Write records (dicts are JSON-encoded, strings written verbatim) as a .jsonl log."""

    def _write(lines: Iterable[Any], name: str = "session.jsonl") -> Path:
        p = tmp_path / name
        out = []
        for rec in lines:
            out.append(rec if isinstance(rec, str) else json.dumps(rec))
        p.write_text("\n".join(out) + "\n", encoding="utf-8")
        return p

    return _write


@pytest.fixture
def sample_records():
    """A short session: init, two updates (one via modelDiff), a subscription change."""
    return [
        {"strings": {"1": "Counter.Increment", "2": "Http.get"}},
        {"type": "init", "timestamp": 1000, "model": {"count": 0, "items": []}},
        {
            "type": "update",
            "timestamp": 1010,
            "message": {"name": "@1", "payload": {"by": 1}},
            "model": {"count": 1, "items": []},
            "effects": [{"name": "@2", "data": {"url": "/api/items"}}],
        },
        {
            "type": "update",
            "timestamp": 1020,
            "message": {"name": "GotItems", "payload": {"items": ["a", "b"]}},
            "modelDiff": [{"op": "add", "path": "/items/-", "value": "a"}, {"op": "add", "path": "/items/-", "value": "b"}],
        },
        {
            "type": "subscriptionChange",
            "timestamp": 1030,
            "started": [{"name": "Time.every", "data": {"interval": 1000}}],
            "stopped": [],
        },
    ]
