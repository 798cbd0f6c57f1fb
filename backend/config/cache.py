"""
YAML configuration cache with mtime-based invalidation.

Files are parsed once and re-read only when their modification time changes,
so template edits take effect without a restart.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

logger = logging.getLogger(__name__)

# path -> (mtime, parsed content)
_config_cache: Dict[Path, Tuple[float, Dict[str, Any]]] = {}


def get_cached_config(path: Path, force_reload: bool = False) -> Dict[str, Any]:
    """
    Load a YAML file, serving it from cache while the file is unchanged.

    Args:
        path: Path to the YAML file
        force_reload: Bypass the cache and re-read the file

    Returns:
        A deep copy of the parsed mapping (callers may mutate it freely)

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file does not contain a mapping at top level
    """
    path = Path(path)
    mtime = path.stat().st_mtime

    cached = _config_cache.get(path)
    if cached is not None and not force_reload and cached[0] == mtime:
        return copy.deepcopy(cached[1])

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at top level of {path.name}, got {type(data).__name__}")

    _config_cache[path] = (mtime, data)
    logger.debug(f"Loaded config {path.name} (mtime={mtime})")
    return copy.deepcopy(data)


def clear_config_cache() -> None:
    """Drop every cached file (useful for testing)."""
    _config_cache.clear()
