from __future__ import annotations

from pathlib import Path

from teaforge.cli._config import ConfigChoice, find_config


def _touch(p: Path) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text("# yaml\n", encoding="utf-8")
    return p


def test_explicit_wins_even_if_others_exist(tmp_path):
    cwd_cfg = _touch(tmp_path / "configs" / "config.yaml")
    xdg = tmp_path / "xdg"
    _touch(xdg / "teaforge" / "config.yaml")

    choice = find_config(str(cwd_cfg), tmp_path, {"XDG_CONFIG_HOME": str(xdg)})
    assert choice == ConfigChoice(cwd_cfg.resolve(), "explicit")
    assert choice.error is None


def test_explicit_missing_is_an_error(tmp_path):
    missing = tmp_path / "nope.yaml"
    _touch(tmp_path / "configs" / "config.yaml")
    choice = find_config(str(missing), tmp_path, {})
    assert choice.missing
    assert choice.path == missing
    assert choice.error == f"{missing} not found"


def test_env_points_to_dir(tmp_path):
    d = tmp_path / "dir"
    cfg = _touch(d / "config.yaml")
    choice = find_config(None, tmp_path, {"TEAFORGE_CONFIG": str(d)})
    assert (choice.path, choice.source) == (cfg.resolve(), "env")


def test_missing_env_target_falls_through(tmp_path):
    cwd_cfg = _touch(tmp_path / "configs" / "config.yaml")
    choice = find_config(None, tmp_path, {"TEAFORGE_CONFIG": str(tmp_path / "gone")})
    assert (choice.path, choice.source, choice.missing) == (cwd_cfg.resolve(), "cwd", False)


def test_cwd_then_xdg(tmp_path):
    xdg = tmp_path / "xdg"
    xdg_cfg = _touch(xdg / "teaforge" / "config.yaml")
    env = {"XDG_CONFIG_HOME": str(xdg)}
    choice = find_config(None, tmp_path, env)
    assert (choice.path, choice.source) == (xdg_cfg.resolve(), "xdg")

    cwd_cfg = _touch(tmp_path / "configs" / "config.yaml")
    choice = find_config(None, tmp_path, env)
    assert (choice.path, choice.source) == (cwd_cfg.resolve(), "cwd")


def test_nothing_found(tmp_path):
    choice = find_config(None, tmp_path, {"XDG_CONFIG_HOME": str(tmp_path / "x")})
    assert choice == ConfigChoice(None, "none")
    assert choice.breadcrumb() == "[teaforge] config: none (from none)"


def test_breadcrumb_names_file_and_source():
    choice = ConfigChoice(Path("/etc/teaforge.yaml"), "explicit")
    assert choice.breadcrumb() == "[teaforge] config: /etc/teaforge.yaml (from explicit)"
