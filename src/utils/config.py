"""
Application configuration management for Artemis.

Handles settings storage, the local user identity and practice preferences.
Settings are persisted to ~/.artemis/config.json.
"""

import json
import os
from pathlib import Path
from typing import Optional

from src.utils.constants import DEFAULT_ENDS_PER_ROUND


class Config:
    """Manages application settings with JSON file persistence."""

    _APP_DIR = Path.home() / ".artemis"
    _CONFIG_FILE = _APP_DIR / "config.json"
    _EXPORT_DIR = _APP_DIR / "exports"
    _DB_PATH = _APP_DIR / "artemis.db"

    _defaults = {
        "user_id": "local",
        "ends_per_round": DEFAULT_ENDS_PER_ROUND,
        "off_target_policy": "record",   # "record" (score 0) or "ignore"
        "mock_preset": "club_archer",
        "export_dir": "",                # empty = ~/.artemis/exports
    }

    _instance: Optional["Config"] = None
    _settings: dict

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._settings = {}
            cls._instance._load()
        return cls._instance

    def _load(self):
        """Load settings from disk, merging with defaults."""
        self._APP_DIR.mkdir(parents=True, exist_ok=True)

        if self._CONFIG_FILE.exists():
            try:
                with open(self._CONFIG_FILE) as f:
                    saved = json.load(f)
                # Merge: defaults first, then saved values override
                self._settings = {**self._defaults, **saved}
            except (json.JSONDecodeError, IOError):
                self._settings = dict(self._defaults)
        else:
            self._settings = dict(self._defaults)

    def save(self):
        """Persist current settings to disk."""
        self._APP_DIR.mkdir(parents=True, exist_ok=True)
        with open(self._CONFIG_FILE, "w") as f:
            json.dump(self._settings, f, indent=2)

    def get(self, key: str, default=None):
        """Get a setting value."""
        return self._settings.get(key, default)

    def set(self, key: str, value):
        """Set a setting value and save."""
        self._settings[key] = value
        self.save()

    @classmethod
    def get_user_id(cls) -> str:
        """Get the user whose rounds are read and written."""
        instance = cls()
        # Environment variable takes priority
        env_user = os.environ.get("ARTEMIS_USER", "")
        if env_user:
            return env_user
        return instance.get("user_id", "local")

    @classmethod
    def get_export_dir(cls) -> Path:
        """Get the directory CSV and JSON exports are written to."""
        instance = cls()
        configured = instance.get("export_dir", "")
        export_dir = Path(configured).expanduser() if configured else instance._EXPORT_DIR
        export_dir.mkdir(parents=True, exist_ok=True)
        return export_dir

    @classmethod
    def get_db_path(cls) -> Path:
        """Get the SQLite database file path."""
        return cls.get_app_dir() / cls._DB_PATH.name

    @classmethod
    def get_app_dir(cls) -> Path:
        """Get the application data directory."""
        instance = cls()
        instance._APP_DIR.mkdir(parents=True, exist_ok=True)
        return instance._APP_DIR
