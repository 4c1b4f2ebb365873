"""
Configuration loading and validation.

Loads client configuration from a YAML file. The session token is never stored
here; it lives in the state database.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field


class APIConfig(BaseModel):
    url: str = "http://localhost:3001/api/v1"
    verify_tls: bool = True
    request_timeout_seconds: int = 30


class StateConfig(BaseModel):
    db_path: str = "./data/taskboard_client.db"


class LoggingConfig(BaseModel):
    level: str = "warning"
    format: Literal["json", "text"] = "text"


class ClientConfig(BaseModel):
    api: APIConfig = Field(default_factory=APIConfig)
    state: StateConfig = Field(default_factory=StateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path) -> ClientConfig:
    """Load and validate client configuration from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    return ClientConfig.model_validate(raw)
