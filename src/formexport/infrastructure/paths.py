"""
Path utilities and constants.

This module provides helper functions for working with paths in the application.
"""

import platform
import re
import unicodedata
from pathlib import Path


APP_NAME = "formexport"


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory.

    Returns:
        The path (for chaining).

    Raises:
        IOError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError as e:
        raise IOError(f"Failed to create directory {path}: {e}")


def sanitize_filename(name: str) -> str:
    """
    Turn arbitrary text into a portable file name component.

    Accents are stripped, whitespace runs become single dashes, and
    characters other than letters, digits, '.', '-' and '_' are dropped.

    Args:
        name: Text to sanitize (e.g., a form title).

    Returns:
        The sanitized name, possibly empty.
    """
    normalized = unicodedata.normalize("NFKD", name)
    ascii_name = normalized.encode("ascii", "ignore").decode("ascii")
    dashed = re.sub(r"\s+", "-", ascii_name.strip())
    cleaned = re.sub(r"[^A-Za-z0-9._-]", "", dashed)
    cleaned = re.sub(r"-{2,}", "-", cleaned)
    return cleaned.strip(".-_")


def get_persistent_data_directory() -> Path:
    """
    Get the persistent data directory for the application (cross-platform).

    Returns:
        Path to the persistent data directory.

    Platform-specific locations:
        - Windows: %APPDATA%/LocalLow/formexport
        - macOS: ~/Library/Application Support/formexport
        - Linux: ~/.config/formexport
    """
    system = platform.system()

    if system == "Windows":
        base = Path.home() / "AppData" / "LocalLow"
    elif system == "Darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path.home() / ".config"

    data_dir = base / APP_NAME
    data_dir.mkdir(parents=True, exist_ok=True)

    return data_dir


def get_settings_file_path() -> Path:
    """
    Get the path to the settings file.

    Returns:
        Path to the settings.json file.
    """
    return get_persistent_data_directory() / "settings.json"


def get_log_file_path() -> Path:
    """
    Get the path to the main log file.

    Returns:
        Path to the log.txt file.
    """
    return get_persistent_data_directory() / "log.txt"


def get_old_log_file_path() -> Path:
    """
    Get the path to the old log file.

    Returns:
        Path to the log.old.txt file.
    """
    return get_persistent_data_directory() / "log.old.txt"
