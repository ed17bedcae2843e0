import json

import pytest

import config


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    d = tmp_path / "configs"
    monkeypatch.setattr(config, "CONFIG_DIR", d)
    monkeypatch.setattr(config, "LAST_FILE", d / "last.txt")
    config.refresh_index()
    yield d
    config.refresh_index()


def test_defaults_when_nothing_saved():
    cfg = config.load_config()
    assert cfg["world"] == {"width": 48, "height": 48}
    assert cfg["reaction"]["feed_rate"] == 0.055
    assert cfg["seed_circle"] == {"center": [12.0, 20.0], "radius": 3.0}
    assert cfg["filter_mode"] == "bilinear"
    assert config.get_last_config() is None


def test_missing_path_gives_defaults(config_dir):
    assert config.load_config(config_dir / "nope.json") == config._default_config()


def test_save_load_roundtrip_and_index():
    cfg = config._default_config()
    cfg["reaction"]["kill_rate"] = 0.06
    cfg["world"]["width"] = 64
    path = config.save_config(cfg, "My spots!")
    assert path.name == "My_spots.json"
    assert config.get_last_config() == "My_spots"
    assert config.config_exists("My spots")
    assert config.list_configs() == ["My_spots"]

    loaded = config.load_config()
    assert loaded["reaction"]["kill_rate"] == 0.06
    assert loaded["world"]["width"] == 64
    assert loaded["config_name"] == "My_spots"


def test_refresh_index_reads_disk(config_dir):
    config_dir.mkdir(parents=True)
    (config_dir / "b.json").write_text("{}")
    (config_dir / "A.json").write_text("{}")
    config.refresh_index()
    assert config.list_configs() == ["A", "b"]


def test_delete_clears_last(config_dir):
    config.save_config(config._default_config(), "gone")
    config.delete_config("gone")
    assert not config.config_exists("gone")
    assert not (config_dir / "gone.json").exists()
    assert config.get_last_config() is None


def test_invalid_json_falls_back_to_defaults(config_dir, caplog):
    config_dir.mkdir(parents=True)
    bad = config_dir / "bad.json"
    bad.write_text("{not json")
    with caplog.at_level("WARNING", logger="config"):
        cfg = config.load_config(bad)
    assert cfg == config._default_config()
    assert "could not read config" in caplog.text


def test_partial_sections_merge_with_defaults(config_dir):
    config_dir.mkdir(parents=True)
    p = config_dir / "partial.json"
    p.write_text(json.dumps({"reaction": {"feed_rate": 0.03}, "filter_mode": "wobbly"}))
    cfg = config.load_config(p)
    assert cfg["reaction"]["feed_rate"] == 0.03
    assert cfg["reaction"]["kill_rate"] == 0.062
    assert cfg["filter_mode"] == "bilinear"


def test_display_preset_resolves_relative_center():
    cfg = config.apply_preset("display")
    assert cfg["world"] == {"width": 256, "height": 256}
    assert cfg["filter_mode"] == "point"
    center, radius = config.seed_from_config(cfg)
    assert center == pytest.approx((256 / 6, 64.0))
    assert radius == 20.0


def test_simulation_preset_matches_defaults():
    cfg = config.apply_preset("simulation")
    assert config.seed_from_config(cfg) == ((12.0, 20.0), 3.0)


def test_unknown_preset():
    with pytest.raises(KeyError):
        config.apply_preset("nope")


def test_engine_from_config():
    cfg = config._default_config()
    cfg["reaction"]["feed_rate"] = 0.04
    cfg["world"] = {"width": 20, "height": 16}
    cfg["workers"] = 2
    eng = config.engine_from_config(cfg)
    try:
        assert eng.shape == (16, 20)
        assert eng.params.feed_rate == 0.04
        assert eng.workers == 2
        assert eng.cell(12, 19) == (0.0, 1.0)
        eng.run(3)
    finally:
        eng.close()
