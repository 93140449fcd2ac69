from pathlib import Path

import pytest

from rainet.session import MatchConfig, load_match_config

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_defaults_without_file(tmp_path):
    assert load_match_config(None) == MatchConfig()
    assert load_match_config(tmp_path / "missing.yaml") == MatchConfig()


def test_bundled_config_loads():
    config = load_match_config(REPO_ROOT / "configs" / "match_default.yaml")
    assert config.player_names == ("P1", "P2")
    assert config.check_invariants is True


def test_top_level_keys(tmp_path):
    path = tmp_path / "match.yaml"
    path.write_text("player_names: [north, south]\n", encoding="utf-8")
    config = load_match_config(path)
    assert config.player_names == ("north", "south")
    assert config.check_invariants is False


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_match_config(path) == MatchConfig()


def test_unknown_keys_rejected():
    with pytest.raises(ValueError):
        MatchConfig.from_dict({"board_size": 9})


def test_player_names_need_two_entries():
    with pytest.raises(ValueError):
        MatchConfig.from_dict({"player_names": ["solo"]})
