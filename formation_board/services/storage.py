"""
Storage helpers for the Formation Board application.

This module resolves the writable data directory and handles reading and
atomically writing JSON documents inside it.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional

from ..utils.constants import CORRUPT_SUFFIX
from ..utils.file_utils import is_bare_filename

logger = logging.getLogger(__name__)


class StorageLocation:
    """
    Resolves the per-app directory where catalog and roster files live.

    When the directory cannot be created the location is unavailable:
    callers treat reads as absent and drop writes.
    """

    def __init__(self, base_dir: Path | str):
        self.base_dir = Path(base_dir)
        self._write_lock = threading.Lock()

    def resolve(self) -> Optional[Path]:
        """
        Get the data directory, creating it when needed.

        Returns:
            Directory path, or None if it cannot be created
        """
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Storage directory %s unavailable: %s", self.base_dir, e)
            return None
        if not self.base_dir.is_dir():
            logger.warning("Storage path %s is not a directory", self.base_dir)
            return None
        return self.base_dir

    def path_for(self, filename: str) -> Optional[Path]:
        """Get the full path of a file, or None if storage is unavailable."""
        if not is_bare_filename(filename):
            raise ValueError(f"Invalid storage filename: {filename!r}")
        directory = self.resolve()
        if directory is None:
            return None
        return directory / filename

    def read_json(self, filename: str) -> Any:
        """
        Read a JSON document.

        Returns:
            Parsed document, or None if storage is unavailable or the file is missing

        Raises:
            json.JSONDecodeError: If the file contains invalid JSON
            OSError: If the file exists but cannot be read
        """
        path = self.path_for(filename)
        if path is None or not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def write_json(self, filename: str, payload: Any) -> bool:
        """
        Write a JSON document atomically.

        The document is written to a temporary file in the same directory and
        then swapped into place, so readers never see a partial file.

        Returns:
            True if written, False if storage is unavailable or writing failed
        """
        path = self.path_for(filename)
        if path is None:
            logger.warning("Dropping write of %s: storage unavailable", filename)
            return False

        try:
            text = json.dumps(payload, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.warning("Could not serialize %s: %s", filename, e)
            return False

        with self._write_lock:
            tmp_path = None
            try:
                fd, tmp_path = tempfile.mkstemp(
                    prefix=f".{filename}.", suffix=".tmp", dir=str(path.parent)
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(text)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
                tmp_path = None
            except OSError as e:
                logger.warning("Failed to write %s: %s", path, e)
                return False
            finally:
                if tmp_path is not None and os.path.exists(tmp_path):
                    os.remove(tmp_path)
        logger.debug("Wrote %s", path)
        return True

    def delete(self, filename: str) -> bool:
        """
        Delete a file. A missing file is not an error.

        Returns:
            False only when storage is unavailable or removal failed
        """
        path = self.path_for(filename)
        if path is None:
            logger.warning("Dropping delete of %s: storage unavailable", filename)
            return False
        try:
            path.unlink()
            logger.debug("Deleted %s", path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to delete %s: %s", path, e)
            return False
        return True

    def exists(self, filename: str) -> bool:
        """Check whether a file exists in the data directory."""
        path = self.path_for(filename)
        return path is not None and path.exists()

    def quarantine(self, filename: str) -> Optional[Path]:
        """
        Move an unreadable file aside so the next save does not overwrite it.

        An existing backup is never overwritten; a numeric suffix is appended.

        Returns:
            Path of the backup, or None if nothing was moved
        """
        path = self.path_for(filename)
        if path is None or not path.exists():
            return None
        backup = path.with_name(path.name + CORRUPT_SUFFIX)
        i = 1
        while backup.exists() and i < 100:
            backup = path.with_name(f"{path.name}{CORRUPT_SUFFIX}.{i}")
            i += 1
        try:
            os.replace(path, backup)
        except OSError as e:
            logger.warning("Could not move unreadable %s aside: %s", path, e)
            return None
        logger.warning("Moved unreadable %s to %s", path.name, backup.name)
        return backup
