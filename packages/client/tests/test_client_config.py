"""Tests for client configuration loading."""

import pytest
import yaml
from pydantic import ValidationError

from taskboard_client.config import ClientConfig, load_config


def test_load_config_from_yaml(tmp_path):
    config_data = {
        "api": {"url": "https://tasks.example.com/api/v1", "verify_tls": False},
        "state": {"db_path": "/var/lib/taskboard/client.db"},
        "logging": {"level": "debug", "format": "json"},
    }
    path = tmp_path / "taskboard.yaml"
    path.write_text(yaml.dump(config_data))

    cfg = load_config(path)
    assert cfg.api.url == "https://tasks.example.com/api/v1"
    assert cfg.api.verify_tls is False
    assert cfg.api.request_timeout_seconds == 30
    assert cfg.state.db_path == "/var/lib/taskboard/client.db"
    assert cfg.logging.format == "json"


def test_load_config_defaults():
    cfg = ClientConfig()
    assert cfg.api.url == "http://localhost:3001/api/v1"
    assert cfg.state.db_path == "./data/taskboard_client.db"
    assert cfg.logging.level == "warning"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == ClientConfig()


def test_load_config_file_not_found():
    with pytest.raises(FileNotFoundError):
        load_config("/nonexistent/path.yaml")


def test_invalid_log_format_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.dump({"logging": {"format": "xml"}}))
    with pytest.raises(ValidationError):
        load_config(path)
