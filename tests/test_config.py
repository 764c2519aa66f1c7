import pytest

from fixture_feed.config import ConfigError, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("FIXTURE_FEED_CONFIG", raising=False)
    monkeypatch.delenv("FIXTURE_FEED_OUTPUT", raising=False)


def test_packaged_defaults_load():
    cfg = load_config()
    assert cfg.timezone == "America/Bahia"
    assert cfg.lookahead_days == 7
    assert cfg.competition_label("bra.1") == "Brasileirão Série A"
    assert cfg.competition_label("nope") == ""
    assert cfg.fallback.tournament_id == 325
    assert cfg.output.layout == "buckets"


def test_placeholder_national_ids_are_unresolved():
    cfg = load_config()
    by_name = {t.canonical_name: t for t in cfg.national_teams}
    assert by_name["Brazil"].resolved
    assert by_name["Brazil"].localized_name == "Brasil"
    assert not by_name["Italy"].resolved
    assert not by_name["Netherlands"].resolved


def test_env_overrides(monkeypatch, tmp_path):
    cfg_file = tmp_path / "c.yaml"
    cfg_file.write_text("lookahead_days: 3\n", encoding="utf-8")
    monkeypatch.setenv("FIXTURE_FEED_CONFIG", str(cfg_file))
    monkeypatch.setenv("FIXTURE_FEED_OUTPUT", str(tmp_path / "out.json"))
    cfg = load_config()
    assert cfg.lookahead_days == 3
    assert cfg.output.path == str(tmp_path / "out.json")


def test_invalid_config_raises(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("lookahead_days: -2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(bad)
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml")
