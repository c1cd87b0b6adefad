"""Load snapshots from local JSON or YAML files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from catalog_diff.errors import InvalidSnapshotError

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def load_snapshot(path: str | Path, side: str = "snapshot") -> dict[str, Any]:
    """Read a snapshot file, or merge every ``*.json`` file in a directory.

    Token catalogs are usually split over many files; a directory is read
    as one catalog whose entity names must be unique across its files.
    """
    path = Path(path)
    if path.is_dir():
        merged: dict[str, Any] = {}
        sources: dict[str, Path] = {}
        files = sorted(path.glob("*.json"))
        for file in files:
            for name, entity in _read_file(file, side).items():
                if name in merged:
                    raise InvalidSnapshotError(
                        side,
                        f"defined in both {sources[name].name} and {file.name}",
                        name=name,
                    )
                merged[name] = entity
                sources[name] = file
        logger.debug("loaded %d entities from %d files in %s", len(merged), len(files), path)
        return merged
    return _read_file(path, side)


def _read_file(path: Path, side: str) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidSnapshotError(side, f"cannot read {path}: {e}") from e

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidSnapshotError(side, f"cannot parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidSnapshotError(side, f"{path} must contain a mapping, got {type(data).__name__}")
    return data
