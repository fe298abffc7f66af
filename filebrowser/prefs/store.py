"""Per-user key-value preference store."""

from pathlib import Path
from typing import Protocol

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from ..common.app import app_dirs

_PREFERENCES_ADAPTER = TypeAdapter(dict[str, str])


class PreferenceStore(Protocol):
    """String key-value storage that survives restarts."""

    def get(self, key: str, default: str = "") -> str:
        """Return the stored value for ``key`` or ``default``."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        ...

    def delete(self, key: str) -> None:
        """Forget ``key``; missing keys are ignored."""
        ...

    def flush(self) -> None:
        """Persist pending changes."""
        ...


class JsonPreferenceStore:
    """Preference store kept in a JSON object on disk.

    An unreadable or malformed file is logged and treated as empty, so a bad
    preferences file never stops the app from starting.
    """

    def __init__(self, path: Path | None = None):
        """Initialize the store and load existing values."""
        self.path = Path(path) if path is not None else app_dirs.preferences_path
        self._values: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            return _PREFERENCES_ADAPTER.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}

    def get(self, key: str, default: str = "") -> str:
        """Return the stored value for ``key`` or ``default``."""
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        self._values[key] = value

    def delete(self, key: str) -> None:
        """Forget ``key``; missing keys are ignored."""
        self._values.pop(key, None)

    def flush(self) -> None:
        """Write all values to disk, replacing the previous file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_bytes(_PREFERENCES_ADAPTER.dump_json(self._values, indent=2))
        tmp_path.replace(self.path)
