import pytest

from vitrine.config.loader import (
    DEFAULT_CONFIG,
    ConfigError,
    get_config_value,
    load_config,
    merge_defaults,
)


@pytest.mark.unit
def test_load_config_fills_defaults(tmp_path):
    config_path = tmp_path / "vitrine.yaml"
    config_path.write_text(
        """
app:
  name: Arcade
  language: es
mame:
  romset_types:
    '0.281': merged
"""
    )

    cfg = load_config(str(config_path))

    assert cfg["app"]["name"] == "Arcade"
    assert cfg["app"]["language"] == "es"
    # Untouched keys of a partially given section keep their defaults
    assert cfg["app"]["database"] == "all"
    assert cfg["paths"]["output"] == "public"
    assert cfg["mame"]["romset_types"] == {"0.281": "merged"}
    assert cfg["filters"] == {"load": "all", "publish": "all"}


@pytest.mark.unit
def test_load_config_empty_file_gives_defaults(tmp_path):
    config_path = tmp_path / "vitrine.yaml"
    config_path.write_text("")

    assert load_config(str(config_path)) == DEFAULT_CONFIG


@pytest.mark.unit
def test_load_config_defaults_to_cwd(tmp_path, monkeypatch):
    (tmp_path / "vitrine.yaml").write_text("app:\n  database: favorites\n")
    monkeypatch.chdir(tmp_path)

    assert load_config()["app"]["database"] == "favorites"


@pytest.mark.unit
def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "does-not-exist.yaml"))


@pytest.mark.unit
def test_load_config_invalid_yaml(tmp_path):
    config_path = tmp_path / "vitrine.yaml"
    config_path.write_text("invalid: [unclosed")

    with pytest.raises(ConfigError):
        load_config(str(config_path))


@pytest.mark.unit
def test_load_config_rejects_non_mapping(tmp_path):
    config_path = tmp_path / "vitrine.yaml"
    config_path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError, match="dictionary"):
        load_config(str(config_path))


@pytest.mark.unit
def test_merge_defaults_does_not_modify_defaults():
    merged = merge_defaults({"app": {"name": "Changed"}})
    merged["paths"]["source"] = "/elsewhere"

    assert DEFAULT_CONFIG["app"]["name"] == "Vitrine"
    assert DEFAULT_CONFIG["paths"]["source"] == "."


@pytest.mark.unit
def test_get_config_value_dot_path():
    cfg = merge_defaults({"mame": {"preferred_version": "0.281"}})

    assert get_config_value(cfg, "mame.preferred_version") == "0.281"
    assert get_config_value(cfg, "mame.missing", "fallback") == "fallback"
    assert get_config_value(cfg, "app.name.deeper") is None
