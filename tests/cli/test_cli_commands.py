from __future__ import annotations

import json

import pytest

from teaforge.cli.main import main


def _json_lines(text: str):
    return [json.loads(line) for line in text.splitlines() if line.strip()]


@pytest.fixture
def log(write_log, sample_records, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)  # no ./configs/config.yaml to discover
    return str(write_log(sample_records + ["{broken"]))


def test_no_subcommand_prints_help(capsys):
    assert main([]) == 2
    assert "usage: teaforge" in capsys.readouterr().err


def test_replay_lists_every_entry(log, capsys):
    assert main(["replay", log, "--json"]) == 0
    rows = _json_lines(capsys.readouterr().out)
    assert [r["kind"] for r in rows] == ["init", "update", "update", "subscriptionChange", "error"]
    assert rows[1]["label"] == "Counter.Increment"
    assert rows[3]["label"] == "+Time.every"


def test_replay_applies_filters(log, capsys):
    flt = json.dumps({"status": "enabled", "filter": {"kind": "message-name", "query": "gotit"}})
    assert main(["replay", log, "--json", "--filter", flt]) == 0
    rows = _json_lines(capsys.readouterr().out)
    # init and error entries are never filtered out
    assert [(r["index"], r["kind"]) for r in rows] == [(0, "init"), (2, "update"), (4, "error")]


def test_replay_change_counts(log, capsys):
    assert main(["replay", log, "--json", "--changes"]) == 0
    rows = _json_lines(capsys.readouterr().out)
    assert rows[1]["modified"] == 1
    assert rows[2]["added"] == 2


def test_replay_rejects_bad_filter(log, capsys):
    assert main(["replay", log, "--filter", "{not json"]) == 2
    assert "FilterError" in capsys.readouterr().err


def test_replay_table_output(log, capsys):
    assert main(["replay", log]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].split() == ["index", "kind", "timestamp", "label", "effects"]
    assert len(out) == 2 + 5


def test_diff_of_update(log, capsys):
    assert main(["diff", log, "--entry", "2", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["changes"] == {"items.0": "added", "items.1": "added"}
    assert payload["added"] == 2


def test_diff_rejects_non_update(log, capsys):
    assert main(["diff", log, "--entry", "0"]) == 2
    assert "only updates have a diff" in capsys.readouterr().err
    assert main(["diff", log, "--entry", "99"]) == 2


def test_search_defaults_to_last_model(log, capsys):
    assert main(["search", log, "items", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["match_count"] == 1
    assert payload["matches"] == [{"path": "items", "value": "[...]"}]
    assert payload["expand"] == [""]


def test_search_specific_entry(log, capsys):
    assert main(["search", log, "1", "--entry", "1", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["matches"] == [{"path": "count", "value": "1"}]


def test_missing_log_is_user_error(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["replay", str(tmp_path / "nope.jsonl")]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_explicit_missing_config(log, tmp_path, capsys):
    assert main(["--config", str(tmp_path / "nope.yaml"), "replay", log]) == 2
    assert "Config error" in capsys.readouterr().err


def test_config_filters_apply(log, tmp_path, capsys):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("filters:\n  - filter: {kind: has-effects}\n", encoding="utf-8")
    assert main(["--config", str(cfg), "replay", log, "--json"]) == 0
    rows = _json_lines(capsys.readouterr().out)
    assert [r["index"] for r in rows] == [0, 1, 4]


def test_invalid_config_is_user_error(log, tmp_path, capsys):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("bogus: 1\n", encoding="utf-8")
    assert main(["--config", str(cfg), "replay", log]) == 2
    assert "bogus unknown key" in capsys.readouterr().err


def test_verbose_reports_config_choice(log, capsys):
    assert main(["replay", log, "--verbose"]) == 0
    assert "[teaforge] config: none (from none)" in capsys.readouterr().err


def test_replay_survives_invalid_utf8(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    p = tmp_path / "bad.jsonl"
    p.write_bytes(b'{"type": "init", "timestamp": 0, "model": {}}\n\xff{\n')
    assert main(["replay", str(p), "--json"]) == 0
    rows = _json_lines(capsys.readouterr().out)
    assert [r["kind"] for r in rows] == ["init", "error"]
