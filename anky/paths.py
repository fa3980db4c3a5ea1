from __future__ import annotations

from pathlib import Path

SETTINGS_FILENAME = "anky.json"


def data_directory() -> Path:
    return Path.cwd()


def settings_path() -> Path:
    return data_directory() / SETTINGS_FILENAME


def writings_directory(configured: str | Path) -> Path:
    return _resolve(configured)


def asset_path(filename: str | Path) -> Path:
    """Relative asset names resolve against the working directory, like the writings."""
    return _resolve(filename)


def _resolve(value: str | Path) -> Path:
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return data_directory() / path
