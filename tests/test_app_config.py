from pathlib import Path

import pytest

from dcm.app_config import AppConfig, load_app_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("DCM_DIR", "DCM_PROJECT", "DCM_CONFIG_FILE", "DCM_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    load_app_config.cache_clear()
    yield
    load_app_config.cache_clear()


def test_defaults(tmp_path):
    config = AppConfig()

    assert config.dir == Path.cwd()
    assert config.project == "bean"
    assert config.file == config.dir / "bean.yml"
    assert config.srv == config.dir / "srv" / "bean"
    assert config.config_path == config.file
    assert config.log_level == "WARNING"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DCM_DIR", "/test/dcm/dir")
    monkeypatch.setenv("DCM_PROJECT", "testproj")

    config = AppConfig()

    assert config.dir == Path("/test/dcm/dir")
    assert config.file == Path("/test/dcm/dir/testproj.yml")
    assert config.srv == Path("/test/dcm/dir/srv/testproj")


def test_config_file_override(monkeypatch, tmp_path):
    manifest = tmp_path / "other.yml"
    monkeypatch.setenv("DCM_CONFIG_FILE", str(manifest))

    config = AppConfig()

    assert config.config_path == manifest
    assert config.file == config.dir / "bean.yml"


def test_relative_dir_is_made_absolute(tmp_path):
    config = AppConfig(dir=Path("project"))

    assert config.dir == Path.cwd() / "project"


def test_load_app_config_is_cached():
    assert load_app_config() is load_app_config()
