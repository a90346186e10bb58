"""
JSON storage implementation for day buckets.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from .base import DataStorage

logger = logging.getLogger(__name__)


class JsonStorage(DataStorage):
    """
    Stores dictionaries as indented, human-readable JSON files.

    Writes go to a temporary file in the target directory which is then
    renamed over the destination, so a crash mid-write never leaves a
    truncated bucket behind.
    """

    extension = "json"

    def __init__(self, indent: int = 2):
        self.indent = indent
        logger.debug(f"Initialized JsonStorage with indent: {indent}")

    def save_dict(self, data: Dict[str, Any], path: str) -> None:
        target = Path(path)
        tmp_name = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)

            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=self.indent, ensure_ascii=False)
            os.replace(tmp_name, target)
            tmp_name = None

            logger.debug(f"Saved dictionary data to {path}")

        except Exception as e:
            logger.error(f"Failed to save dictionary to {path}: {e}")
            raise
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def load_dict(self, path: str) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)

            logger.debug(f"Loaded dictionary data from {path}")
            return data

        except Exception as e:
            logger.error(f"Failed to load dictionary from {path}: {e}")
            raise

    def delete(self, path: str) -> None:
        Path(path).unlink()
        logger.debug(f"Deleted {path}")

    def list_files(self, directory: str) -> List[str]:
        return sorted(p.name for p in Path(directory).iterdir() if p.is_file())

    def file_exists(self, path: str) -> bool:
        return Path(path).exists()
