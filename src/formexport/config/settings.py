"""
Application settings and configuration.

This module provides centralized access to application settings with automatic
persistence to disk. Settings are stored as JSON in a platform-specific location:

- Windows: %APPDATA%/LocalLow/formexport/settings.json
- macOS: ~/Library/Application Support/formexport/settings.json
- Linux: ~/.config/formexport/settings.json

Settings are automatically loaded on first access and saved when updated.

Example:
    from formexport.config.settings import get_settings, get_settings_manager

    # Get current settings
    settings = get_settings()
    print(settings.default_separator)

    # Update settings (auto-saves)
    manager = get_settings_manager()
    manager.update(default_separator=";")

    # Add recent form store (auto-saves)
    manager.add_recent_store("/path/to/forms.json")
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional

from ..infrastructure.paths import get_settings_file_path


@dataclass
class AppSettings:
    """Application-wide settings."""

    # Logging settings
    log_level: int = logging.INFO
    log_to_file: bool = True
    log_file_path: Optional[Path] = None

    # Export settings
    default_separator: str = ","
    hidden_field_types: list[str] = field(default_factory=list)
    output_directory: Optional[Path] = None

    # Recent form stores
    recent_stores: list[str] = field(default_factory=list)
    max_recent_items: int = 10


_PATH_SETTINGS = ('log_file_path', 'output_directory')


def _as_type_list(value) -> list[str]:
    """Coerce a stored hidden_field_types value to a list of type tags."""
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return []


class SettingsManager:
    """
    Manages loading and saving application settings.
    """

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize the settings manager.

        Args:
            config_file: Path to configuration file. If None, uses default location.
        """
        if config_file is None:
            config_file = get_settings_file_path()

        self.config_file = config_file
        self._settings = AppSettings()
        self._logger = logging.getLogger(__name__)

    def load(self) -> AppSettings:
        """
        Load settings from configuration file.

        Returns:
            The loaded settings object.
        """
        if not self.config_file.exists():
            self._logger.info(f"Settings file not found at {self.config_file}, using defaults")
            return self._settings

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            if not isinstance(data, dict):
                self._logger.error(
                    f"Settings file {self.config_file} does not hold an object. Using defaults."
                )
                return self._settings

            # Convert Path strings back to Path objects
            for key in _PATH_SETTINGS:
                if data.get(key):
                    data[key] = Path(data[key])

            if "hidden_field_types" in data:
                data["hidden_field_types"] = _as_type_list(data["hidden_field_types"])

            for key, value in data.items():
                if hasattr(self._settings, key):
                    setattr(self._settings, key, value)
                else:
                    self._logger.warning(f"Ignoring unknown setting: {key}")

            self._logger.info(f"Settings loaded from {self.config_file}")

        except json.JSONDecodeError as e:
            self._logger.error(f"Failed to parse settings file: {e}. Using defaults.")
        except OSError as e:
            self._logger.error(f"Failed to load settings: {e}. Using defaults.")

        return self._settings

    def save(self, settings: Optional[AppSettings] = None) -> None:
        """
        Save settings to configuration file.

        Args:
            settings: Settings object to save. If None, saves current settings.
        """
        if settings is not None:
            self._settings = settings

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            data = asdict(self._settings)

            # Paths are stored with forward slashes
            for key in _PATH_SETTINGS:
                if data.get(key):
                    data[key] = str(Path(data[key])).replace('\\', '/')

            # Atomic write: write to temp file, then rename
            temp_file = self.config_file.with_suffix('.tmp')
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            temp_file.replace(self.config_file)

            self._logger.info(f"Settings saved to {self.config_file}")

        except OSError as e:
            self._logger.error(f"Failed to save settings: {e}")

    def get(self) -> AppSettings:
        """
        Get the current settings.

        Returns:
            The current settings object.
        """
        return self._settings

    def update(self, **kwargs) -> None:
        """
        Update specific settings and auto-save.

        Args:
            **kwargs: Setting names and values to update.
        """
        for key, value in kwargs.items():
            if hasattr(self._settings, key):
                setattr(self._settings, key, value)
            else:
                self._logger.warning(f"Ignoring unknown setting: {key}")

        self.save()

    def add_recent_store(self, path: str) -> None:
        """
        Add a form store path to the recent stores list.

        Args:
            path: Path to the form store to add.
        """
        normalized_path = str(Path(path)).replace('\\', '/')

        if normalized_path in self._settings.recent_stores:
            self._settings.recent_stores.remove(normalized_path)

        self._settings.recent_stores.insert(0, normalized_path)

        if len(self._settings.recent_stores) > self._settings.max_recent_items:
            self._settings.recent_stores = self._settings.recent_stores[:self._settings.max_recent_items]

        self.save()

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values and save."""
        self._settings = AppSettings()
        self.save()


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings_manager() -> SettingsManager:
    """
    Get the global settings manager instance.

    Returns:
        The global SettingsManager.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
        _settings_manager.load()
    return _settings_manager


def get_settings() -> AppSettings:
    """
    Get the current application settings.

    Returns:
        The current AppSettings object.
    """
    return get_settings_manager().get()
