"""Tests for touch configuration loading."""

import pytest
import yaml

from touch_gestures.config import (
    CONFIG_ENV_VAR,
    ViewConfiguration,
    get_config,
    load_config,
    save_config,
    set_config,
)


@pytest.fixture(autouse=True)
def reset_global_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    set_config(None)
    yield
    set_config(None)


class TestViewConfiguration:
    def test_defaults(self):
        cfg = ViewConfiguration()
        assert cfg.touch_slop == 8.0
        assert cfg.maximum_fling_velocity == 8000.0
        assert cfg.scaled_touch_slop == 8.0

    def test_density_scales(self):
        cfg = ViewConfiguration(density=2.5)
        assert cfg.scaled_touch_slop == 20.0
        assert cfg.scaled_maximum_fling_velocity == 20000.0

    def test_from_dict_ignores_unknown(self):
        cfg = ViewConfiguration.from_dict({"touch_slop": 4, "colour": "red"})
        assert cfg.touch_slop == 4.0
        assert cfg.density == 1.0


class TestLoadConfig:
    def test_no_path_gives_defaults(self):
        assert load_config() == ViewConfiguration()

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "nope.yml") == ViewConfiguration()

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "touch.yml"
        path.write_text("touch_slop: 12\ndensity: 2\n")
        cfg = load_config(path)
        assert cfg.scaled_touch_slop == 24.0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "touch.yml"
        path.write_text("")
        assert load_config(path) == ViewConfiguration()

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "touch.yml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_malformed_yaml_raises(self, tmp_path):
        path = tmp_path / "touch.yml"
        path.write_text("touch_slop: [1, 2\n")
        with pytest.raises(yaml.YAMLError):
            load_config(path)

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "touch.yml"
        path.write_text("maximum_fling_velocity: 500\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert get_config().maximum_fling_velocity == 500.0

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "out" / "touch.yml"
        save_config(ViewConfiguration(touch_slop=3, density=1.5), path)
        assert load_config(path) == ViewConfiguration(touch_slop=3, density=1.5)


class TestGlobalConfig:
    def test_cached(self):
        assert get_config() is get_config()

    def test_set_config(self):
        cfg = ViewConfiguration(touch_slop=1)
        set_config(cfg)
        assert get_config() is cfg
