"""Application configuration utilities for Lineup."""
from __future__ import annotations

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List


DEFAULT_CONFIG_LOCATIONS = (
    Path("lineup.ini"),
    Path("config/lineup.ini"),
)

DEFAULT_LABELS = ["INBOX"]


@dataclass
class AppConfig:
    sender: str | None = None
    credentials_path: Path = Path("credentials.json")
    token_path: Path = Path("token.json")
    user_id: str = "me"
    label_ids: List[str] = field(default_factory=lambda: list(DEFAULT_LABELS))
    log_level: str = "INFO"
    structured_logging: bool = False
    config_source: Path | None = None


def _load_config_file(config_path: Path | None) -> Dict[str, Any]:
    if config_path is None:
        for candidate in DEFAULT_CONFIG_LOCATIONS:
            if candidate.exists():
                config_path = candidate
                break
    if config_path is None or not config_path.exists():
        return {}

    parser = configparser.ConfigParser()
    parser.read(config_path)
    data: Dict[str, Any] = {"__path__": config_path}
    if parser.has_section("gmail"):
        data["sender"] = parser.get("gmail", "sender", fallback=None)
        data["credentials_path"] = parser.get("gmail", "credentials", fallback=None)
        data["token_path"] = parser.get("gmail", "token", fallback=None)
        data["user_id"] = parser.get("gmail", "user_id", fallback=None)
        data["label_ids"] = parser.get("gmail", "labels", fallback=None)
    if parser.has_section("logging"):
        data["log_level"] = parser.get("logging", "level", fallback=None)
        structured = parser.get("logging", "structured", fallback=None)
        if structured is not None:
            data["structured_logging"] = parser.getboolean("logging", "structured", fallback=False)
    return data


def _normalize_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return None


def _split_labels(value: str | None) -> List[str]:
    if not value:
        return list(DEFAULT_LABELS)
    labels = [item.strip() for item in value.split(",") if item.strip()]
    return labels or list(DEFAULT_LABELS)


def load_settings(
    sender: str | None = None,
    *,
    credentials: str | None = None,
    token: str | None = None,
) -> AppConfig:
    """Resolve application configuration from config files, env vars, and overrides."""
    config_file_env = os.getenv("LINEUP_CONFIG_FILE")
    config_data = _load_config_file(Path(config_file_env)) if config_file_env else _load_config_file(None)

    resolved_sender = sender or os.getenv("TARGET_SENDER") or config_data.get("sender")
    credentials_path = (
        credentials
        or os.getenv("LINEUP_CREDENTIALS")
        or config_data.get("credentials_path")
        or "credentials.json"
    )
    token_path = token or os.getenv("LINEUP_TOKEN") or config_data.get("token_path") or "token.json"
    user_id = os.getenv("LINEUP_USER_ID") or config_data.get("user_id") or "me"
    label_ids = _split_labels(os.getenv("LINEUP_LABELS") or config_data.get("label_ids"))
    log_level = (
        os.getenv("LINEUP_LOG_LEVEL")
        or config_data.get("log_level")
        or "INFO"
    )
    structured_logging_env = _normalize_bool(os.getenv("LINEUP_STRUCTURED_LOGGING"))
    if structured_logging_env is None:
        structured_logging = bool(config_data.get("structured_logging", False))
    else:
        structured_logging = structured_logging_env

    return AppConfig(
        sender=resolved_sender or None,
        credentials_path=Path(credentials_path),
        token_path=Path(token_path),
        user_id=user_id,
        label_ids=label_ids,
        log_level=log_level.upper(),
        structured_logging=structured_logging,
        config_source=config_data.get("__path__") if config_data else None,
    )
