import datetime

import pytest

from ffboard import config
from ffboard.config import clear_settings_cache, get_settings, load_settings, min_interval_from_env

CONFIG = """
season: "2025"
season_start: 2025-09-04
leagues:
  - key: ppr-1
    name: PPR League 1
    type: PPR
    league_id: "111"
  - key: chop
    name: Chopping Block
    format: Guillotine
    league_id: 222
pools:
  - key: pickem
    name: Pick Em
    format: pickem
    league_id: "333"
tuning:
  cache_ttl_sec: 120
  rotation_sec: 20
probability:
  floor: 0.05
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("FFBOARD_CONFIG", "SLEEPER_BASE_URL", "SLEEPER_RPM_LIMIT", "SLEEPER_MIN_INTERVAL_MS"):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


def _write(tmp_path, text=CONFIG):
    path = tmp_path / "leagues.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_settings_from_yaml(tmp_path):
    s = load_settings(_write(tmp_path))
    assert s.season_start == datetime.date(2025, 9, 4)
    assert [lg.key for lg in s.leagues] == ["ppr-1", "chop"]
    assert s.leagues[0].format == "h2h"
    assert s.leagues[1].format == "guillotine"
    assert s.leagues[1].league_id == "222"
    assert s.allowed_league_ids == {"111", "222", "333"}
    assert s.cache_ttl_sec == 120.0 and s.rotation_sec == 20.0
    assert s.load_timeout_sec == 10.0
    assert s.probability == {"floor": 0.05}
    assert s.by_key("pickem").league_id == "333"
    assert s.by_league_id("111").name == "PPR League 1"
    assert s.by_key("missing") is None


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("FFBOARD_CONFIG", str(_write(tmp_path)))
    monkeypatch.setenv("SLEEPER_BASE_URL", "http://localhost:9999/v1")
    monkeypatch.setenv("SLEEPER_RPM_LIMIT", "600")
    s = get_settings()
    assert s.base_url == "http://localhost:9999/v1"
    assert s.min_interval_sec == pytest.approx(0.1)
    assert get_settings() is s


def test_min_interval_larger_wins(monkeypatch):
    assert min_interval_from_env(0.05) == 0.05
    monkeypatch.setenv("SLEEPER_RPM_LIMIT", "600")
    monkeypatch.setenv("SLEEPER_MIN_INTERVAL_MS", "250")
    assert min_interval_from_env() == pytest.approx(0.25)
    monkeypatch.setenv("SLEEPER_MIN_INTERVAL_MS", "junk")
    assert min_interval_from_env() == pytest.approx(0.1)


def test_invalid_config(tmp_path):
    with pytest.raises(ValueError):
        load_settings(_write(tmp_path, "- just\n- a list\n"))
    with pytest.raises(ValueError):
        load_settings(_write(tmp_path, "season_start: 2025-09-04\nleagues:\n  - name: no id\n"))
    with pytest.raises(ValueError):
        load_settings(_write(tmp_path, "leagues: []\n"))
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")


def test_packaged_default_config():
    s = load_settings(config.DEFAULT_CONFIG_PATH)
    assert len(s.leagues) == 6
    assert {lg.format for lg in s.leagues} == {"h2h", "guillotine"}
    assert {p.format for p in s.pools} == {"pickem", "survivor"}
