"""Configuration for the dashboard and history generators.

Loads from YAML config file with environment variable overrides.
Pattern: CONFIG__{SECTION}__{KEY} overrides nested YAML keys.
Example: CONFIG__HISTORY__RETENTION=50
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

DEFAULT_CONFIG_PATH = "config/run-history.yml"


class PathsConfig(BaseModel):
    report_path: Path = Path("playwright-report/index.json")
    public_dir: Path = Path("public")
    dashboard_file: str = "index.html"
    summary_file: str = "test-summary.json"
    history_file: str = "history.json"
    history_page: str = "history.html"

    @property
    def dashboard_path(self) -> Path:
        return self.public_dir / self.dashboard_file

    @property
    def summary_path(self) -> Path:
        return self.public_dir / self.summary_file

    @property
    def history_path(self) -> Path:
        return self.public_dir / self.history_file

    @property
    def history_page_path(self) -> Path:
        return self.public_dir / self.history_page


class HistoryConfig(BaseModel):
    retention: int = Field(default=30, ge=1, description="Max runs kept in history.json")


class DisplayConfig(BaseModel):
    language: str = "pt-BR"
    report_link: str = "./report/index.html"
    history_report_link: str = "./report/"
    timestamp_format: str = "%d/%m/%Y %H:%M:%S"
    history_timestamp_format: str = "%d/%m/%Y %H:%M"


class Settings(BaseModel):
    paths: PathsConfig = PathsConfig()
    history: HistoryConfig = HistoryConfig()
    display: DisplayConfig = DisplayConfig()
    log_level: str = "INFO"


def _apply_env_overrides(config_dict: dict, prefix: str = "CONFIG") -> dict:
    """Apply environment variable overrides to config dict.

    Pattern: CONFIG__SECTION__KEY=value maps to config[section][key] = value
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}__"):
            continue
        parts = key[len(prefix) + 2 :].lower().split("__")
        target = config_dict
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        if value.lower() in ("true", "false"):
            value = value.lower() == "true"
        elif value.isdigit():
            value = int(value)
        target[parts[-1]] = value
    return config_dict


def load_config(config_path: Optional[str] = None) -> Settings:
    """Load configuration from YAML file with env overrides.

    Priority: env vars > YAML file > defaults
    """
    config_dict = {}

    if config_path is None:
        config_path = os.getenv("CONFIG_PATH", DEFAULT_CONFIG_PATH)
    path = Path(config_path)
    if path.exists():
        with open(path, encoding="utf-8") as f:
            config_dict = yaml.safe_load(f) or {}

    config_dict = _apply_env_overrides(config_dict)
    return Settings(**config_dict)


_config: Optional[Settings] = None


def get_config() -> Settings:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Optional[str] = None) -> Settings:
    global _config
    _config = load_config(config_path)
    return _config
