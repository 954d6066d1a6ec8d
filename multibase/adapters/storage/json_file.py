"""JSON file key/value store.

Persists values to a single JSON document so an identity survives process
restarts. Layout:

    {"multibase_user_id": {"value": "...", "expires_at": "2027-01-01T00:00:00+00:00"}}

Writes go to a temporary sibling file that then replaces the original, so a
crash mid-write never leaves a truncated document behind.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

from multibase.core.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """File-backed implementation of the KeyValueStore protocol."""

    def __init__(self, path: Path, name: Optional[str] = None) -> None:
        """Initialize the store.

        Args:
            path: JSON document location. Parent directories are created on
                first write.
            name: Backend name used in log lines. Defaults to the file stem.
        """
        self._path = Path(path)
        self.name = name or self._path.stem

    @property
    def path(self) -> Path:
        """Location of the backing JSON document."""
        return self._path

    def get(self, key: str) -> Optional[str]:
        """Return the value for ``key``, or None if absent or expired.

        Raises:
            StorageUnavailableError: If the document exists but can't be read.
        """
        entry = self._load().get(key)
        if not isinstance(entry, dict):
            return None

        expires_at = entry.get("expires_at")
        if expires_at is not None:
            try:
                expired = datetime.fromisoformat(expires_at) <= datetime.now(timezone.utc)
            except (TypeError, ValueError):
                expired = True
            if expired:
                return None

        value = entry.get("value")
        return value if isinstance(value, str) and value else None

    def set(self, key: str, value: str, expiry_days: Optional[int] = None) -> None:
        """Persist ``value`` under ``key``.

        An unreadable or non-object document is replaced rather than
        preserved, so one corrupt file can't block every later write.

        Raises:
            StorageUnavailableError: If the document can't be written.
        """
        try:
            document = self._load()
        except StorageUnavailableError as e:
            logger.warning("Overwriting unreadable store document: %s", e.message)
            document = {}
        expires_at = None
        if expiry_days is not None:
            expires_at = (datetime.now(timezone.utc) + timedelta(days=expiry_days)).isoformat()
        document[key] = {"value": value, "expires_at": expires_at}
        self._dump(document)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self) -> dict[str, Any]:
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                document = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            raise StorageUnavailableError(self.name, f"Could not read {self._path}: {e}") from e

        if not isinstance(document, dict):
            raise StorageUnavailableError(self.name, f"{self._path} is not a JSON object")
        return document

    def _dump(self, document: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(document, fh)
                os.replace(tmp_path, self._path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageUnavailableError(self.name, f"Could not write {self._path}: {e}") from e
        logger.debug("Wrote %d key(s) to %s", len(document), self._path)
