from pathlib import Path

import pytest

from rooguys.config import DEFAULT_BASE_URL, ClientConfig, ConfigError, load_config


def test_defaults() -> None:
    config = ClientConfig()

    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout_s == 10
    assert config.auto_retry is False
    assert config.max_retries == 3


def test_valid_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
        client:
          base_url: https://staging.rooguys.test/v1
          timeout_s: 5
          auto_retry: true
          max_retries: 2
        obs:
          log_jsonl: false
        """,
        encoding="utf-8",
    )

    loaded = load_config(config_path)

    assert loaded.config.client.base_url == "https://staging.rooguys.test/v1"
    assert loaded.config.client.auto_retry is True
    assert loaded.config.client.max_retries == 2
    assert loaded.config.obs.log_jsonl is False
    assert loaded.raw["client"]["timeout_s"] == 5


def test_invalid_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
        client:
          max_retries: -1
        """,
        encoding="utf-8",
    )

    with pytest.raises(ConfigError):
        load_config(config_path)


def test_unknown_keys_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("client:\n  retries: 3\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_path)


def test_missing_and_malformed_files(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config not found"):
        load_config(tmp_path / "absent.yaml")

    broken = tmp_path / "broken.yaml"
    broken.write_text("client: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(broken)

    scalar = tmp_path / "scalar.yaml"
    scalar.write_text("just a string", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(scalar)
