from __future__ import annotations

import pytest

from erpclean_client import ConfigurationError
from erpclean_cli import config


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    for name in (config.ENV_TOKEN, config.ENV_USER_TOKEN, config.ENV_ENVIRONMENT):
        monkeypatch.delenv(name, raising=False)


def test_missing_file_gives_defaults() -> None:
    cfg = config.load_config()
    assert cfg.environment == ""
    assert cfg.auth.token == ""
    assert cfg.timeout_s == config.DEFAULT_TIMEOUT_S


def test_save_and_load_round_trip(tmp_path) -> None:
    cfg = config.default_config()
    cfg.environment = "dusk"
    cfg.auth.token = "tok"
    cfg.auth.user_token = "usr"
    cfg.timeout_s = 12.5
    cfg.debug = True
    cfg.base_urls = {"local": "http://127.0.0.1:8000/api"}

    path = config.save_config(cfg)
    assert path.endswith("config.toml")
    assert (tmp_path / "config.toml").exists()

    loaded = config.load_config()
    assert loaded == cfg


def test_from_toml_normalizes_and_skips_bad_values() -> None:
    cfg = config.from_toml(
        {
            "environment": "3",
            "timeout_s": -1,
            "debug": "yes",
            "base_urls": {"Production": "https://prod.test/api/", "staging": "https://x", "dusk": ""},
        }
    )
    assert cfg.environment == "sandbox"
    assert cfg.timeout_s == config.DEFAULT_TIMEOUT_S
    assert cfg.debug is False
    assert cfg.base_urls == {"production": "https://prod.test/api"}


def test_unknown_environment_in_file_is_dropped() -> None:
    assert config.from_toml({"environment": "staging"}).environment == ""


def test_env_overrides_file(monkeypatch) -> None:
    cfg = config.default_config()
    cfg.environment = "sandbox"
    cfg.auth.token = "file-token"
    config.save_config(cfg)

    monkeypatch.setenv(config.ENV_TOKEN, "env-token")
    monkeypatch.setenv(config.ENV_ENVIRONMENT, "PRODUCTION")

    loaded = config.load_config()
    assert loaded.auth.token == "env-token"
    assert loaded.environment == "production"

    raw = config.load_config(with_env=False)
    assert raw.auth.token == "file-token"
    assert raw.environment == "sandbox"


def test_invalid_env_override_is_a_configuration_error(monkeypatch) -> None:
    monkeypatch.setenv(config.ENV_ENVIRONMENT, "staging")
    with pytest.raises(ConfigurationError):
        config.load_config()
