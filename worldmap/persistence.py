from __future__ import annotations

"""Saving and loading grid snapshots as JSON files."""

import json
import logging
import shutil
import time
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

from .grid import Grid, LoadStatus
from .settings import GenerationSettings, adjust_settings

logger = logging.getLogger("worldmap.persistence")
logger.addHandler(logging.NullHandler())

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
SAVE_FILE: Path = Path("worldmap.json")
SAVE_VERSION = "1.0"


# -----------------------------------------------------------------------------
# Custom Exceptions
# -----------------------------------------------------------------------------
class GridSaveError(Exception):
    """Exception raised when saving a grid snapshot fails."""


class GridLoadError(Exception):
    """Exception raised when a grid snapshot file cannot be read."""


# -----------------------------------------------------------------------------
# Saving
# -----------------------------------------------------------------------------
def snapshot_document(grid: Grid, settings: Optional[GenerationSettings] = None) -> Dict[str, Any]:
    """JSON-serializable document wrapping ``grid.serialize()``."""
    return {
        "version": SAVE_VERSION,
        "timestamp": time.time(),
        "cols": grid.cols,
        "rows": grid.rows,
        "settings": asdict(settings) if settings is not None else {},
        "cells": grid.serialize(),
    }


def save_grid(
    grid: Grid,
    settings: Optional[GenerationSettings] = None,
    *,
    file_path: Optional[Path] = None,
) -> Path:
    """
    Persist the grid to disk in an atomic manner.

    Raises:
        GridSaveError: if writing or renaming fails.
    """
    path = Path(file_path) if file_path is not None else SAVE_FILE
    temp_file = path.with_suffix(".json.tmp")
    data = snapshot_document(grid, settings)

    # Write to a temporary file first
    try:
        with open(temp_file, "w", encoding="utf-8") as f:
            json.dump(data, f)
            f.flush()
    except OSError as e:
        raise GridSaveError(f"Failed to write to temporary save file: {e}") from e

    # Atomically move temp -> final
    try:
        shutil.move(str(temp_file), str(path))
    except OSError as e:
        try:
            temp_file.unlink(missing_ok=True)
        except OSError:
            pass
        raise GridSaveError(f"Failed to rename temporary save file to final: {e}") from e

    logger.info("Saved %dx%d grid to %s", grid.cols, grid.rows, path)
    return path


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------
def load_grid(grid: Grid, *, file_path: Optional[Path] = None, strict: bool = False) -> LoadStatus:
    """
    Replace ``grid``'s cells with a saved snapshot.

    Args:
        grid: The live grid; left untouched unless the snapshot is accepted.
        file_path: Save file to read; defaults to ``SAVE_FILE``.
        strict: If True, reject snapshots whose version differs from ``SAVE_VERSION``.

    Returns:
        LoadStatus from ``Grid.deserialize``.

    Raises:
        GridLoadError: if the file is missing, unreadable, or not a snapshot document.
    """
    path = Path(file_path) if file_path is not None else SAVE_FILE
    if not path.exists():
        raise GridLoadError(f"Save file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise GridLoadError(f"Failed to read or parse save file: {e}") from e

    if not isinstance(raw_data, dict) or "cells" not in raw_data:
        raise GridLoadError(f"Save file {path} does not contain a grid snapshot")

    version = raw_data.get("version", "0.0")
    if strict and version != SAVE_VERSION:
        raise GridLoadError(f"Unsupported save version: {version}. Expected {SAVE_VERSION}.")

    status = grid.deserialize(raw_data["cells"])
    if status:
        logger.info("Loaded %dx%d grid from %s", grid.cols, grid.rows, path)
    else:
        logger.warning("Save file %s rejected (%s); grid unchanged", path, status.value)
    return status


def load_settings(file_path: Optional[Path] = None) -> GenerationSettings:
    """Rebuild the ``GenerationSettings`` stored alongside a snapshot."""
    path = Path(file_path) if file_path is not None else SAVE_FILE
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise GridLoadError(f"Failed to read or parse save file: {e}") from e

    settings = GenerationSettings()
    raw_settings = raw_data.get("settings", {}) if isinstance(raw_data, dict) else {}
    if not isinstance(raw_settings, dict):
        logger.warning("'settings' in save file is not a dict; using defaults.")
        return settings
    for key, value in raw_settings.items():
        if not hasattr(settings, key):
            logger.warning("Skipping unknown setting in save file: %s", key)
            continue
        try:
            adjust_settings(settings, **{key: value})
        except TypeError as e:
            logger.warning("Ignoring saved setting %s: %s", key, e)
    return settings


__all__ = [
    "GridLoadError",
    "GridSaveError",
    "SAVE_FILE",
    "SAVE_VERSION",
    "load_grid",
    "load_settings",
    "save_grid",
    "snapshot_document",
]
