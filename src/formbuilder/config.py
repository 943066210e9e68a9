from __future__ import annotations

import os
from pathlib import Path
from typing import Any

BASE_DIR = Path(__file__).resolve().parent

STORAGE_BACKENDS = {"sqlite", "json"}
AUTH_MODES = {"header", "single"}


class Settings:
    def __init__(self, **overrides: Any) -> None:
        self.storage_backend = os.getenv("STORAGE_BACKEND", "sqlite").lower()
        self.sqlite_path = Path(os.getenv("SQLITE_PATH", "./data/app.db"))
        self.json_path = Path(os.getenv("JSON_PATH", "./data/jsonstore.json"))
        self.auth_mode = os.getenv("AUTH_MODE", "header").lower()
        self.auth_header = os.getenv("AUTH_HEADER", "X-User-Id")
        self.single_user_id = os.getenv("SINGLE_USER_ID", "local")
        self.host = os.getenv("HOST", "0.0.0.0")
        port_value = os.getenv("PORT", "8000")
        try:
            self.port = int(port_value)
        except ValueError:
            self.port = 8000
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise TypeError(f"unknown setting: {key}")
            if key in {"sqlite_path", "json_path"}:
                value = Path(value)
            setattr(self, key, value)

        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(f"unsupported storage backend: {self.storage_backend}")
        if self.auth_mode not in AUTH_MODES:
            raise ValueError(f"unsupported auth mode: {self.auth_mode}")


def ensure_dirs(settings: Settings) -> None:
    settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    settings.json_path.parent.mkdir(parents=True, exist_ok=True)
