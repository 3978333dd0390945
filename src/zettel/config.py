"""Configuration loading.

Settings live in a YAML file::

    notes_dir: ~/notes
    images_dir: images
    log_level: INFO
    log_file: ~/.cache/zettel/zettel.log

The file is looked up at the explicit path given, then ``$ZETTEL_CONFIG``,
then ``~/.config/zettel/config.yaml``; a missing file means defaults.

Environment variables (override the file):
    ZETTEL_CONFIG      – path of the YAML config file
    ZETTEL_NOTES_DIR   – notes folder
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from zettel.errors import ConfigError
from zettel.note import IMAGES_DIR

DEFAULT_CONFIG_PATH = Path("~/.config/zettel/config.yaml")
DEFAULT_NOTES_DIR = Path("~/zettel")


@dataclass
class ZettelConfig:
    notes_dir: Path = DEFAULT_NOTES_DIR.expanduser()
    images_dir: str = IMAGES_DIR
    log_level: str = "WARNING"
    log_file: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ZettelConfig":
        config = cls()
        if data.get("notes_dir"):
            config.notes_dir = Path(data["notes_dir"]).expanduser()
        if data.get("images_dir"):
            config.images_dir = str(data["images_dir"])
        if data.get("log_level"):
            config.log_level = str(data["log_level"]).upper()
        if data.get("log_file"):
            config.log_file = Path(data["log_file"]).expanduser()
        return config


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def load_config(path: Path | None = None) -> ZettelConfig:
    """Build a :class:`ZettelConfig` from file and environment."""
    if path is None:
        path = Path(os.getenv("ZETTEL_CONFIG") or DEFAULT_CONFIG_PATH)
    path = Path(path).expanduser()

    data = _read_yaml(path) if path.is_file() else {}
    config = ZettelConfig.from_dict(data)

    notes_dir = os.getenv("ZETTEL_NOTES_DIR")
    if notes_dir:
        config.notes_dir = Path(notes_dir).expanduser()
    return config
