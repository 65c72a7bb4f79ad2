from __future__ import annotations

import json
from pathlib import Path

import pytest

from sesh.core.config import SessionConfig, load_config


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.json")
    assert config == SessionConfig()
    assert config.prep_sec == 5
    assert config.tick_sec == 1.0


def test_load_config_overrides_and_paths(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"prep_sec": 10, "catalog_path": "~/catalog.json"}), encoding="utf-8"
    )

    config = load_config(path)

    assert config.prep_sec == 10
    assert config.catalog_path == Path("~/catalog.json").expanduser()


def test_unknown_keys_and_bad_values_raise(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"volume": 3}), encoding="utf-8")
    with pytest.raises(ValueError, match="volume"):
        load_config(path)

    path.write_text(json.dumps({"tick_sec": 0}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_with_overrides_ignores_none() -> None:
    config = SessionConfig().with_overrides(prep_sec=None, tick_sec=0.5)
    assert config.prep_sec == 5
    assert config.tick_sec == 0.5

    with pytest.raises(ValueError):
        SessionConfig().with_overrides(prep_sec=-1)
