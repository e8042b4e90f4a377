"""Preference persistence: the key-value store behind theme and history."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from wiki_searcher.models import CONFIG_APP_NAME, DARK_MODE_KEY

logger = logging.getLogger(__name__)

# ============================================================================
# Preference Persistence
# ============================================================================
#
# The store is a flat JSON object. Every set()/delete() rewrites the file
# atomically before returning, so a crash right after a mutation never loses
# it. Read failures degrade to an empty store; write failures are logged and
# reported through the return value, never raised.
#
PREFERENCES_FILENAME = "preferences.json"


def get_config_path() -> Path:
    """Get the path to the preferences file.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/wiki-searcher/preferences.json
    - macOS: ~/Library/Application Support/wiki-searcher/preferences.json
    - Windows: %APPDATA%/wiki-searcher/preferences.json
    """
    config_dir = Path(user_config_dir(CONFIG_APP_NAME))
    return config_dir / PREFERENCES_FILENAME


def _read_preferences(path: Path) -> dict[str, Any]:
    """Read the preferences object, returning {} for missing or corrupt files."""
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.warning("Preferences file has invalid JSON, using defaults: %s", e)
        return {}
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read preferences file, using defaults: %s", e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Preferences file root is %s, not an object; using defaults", type(data))
        return {}
    return data


def _write_atomically(path: Path, data: Mapping[str, Any]) -> None:
    """Write JSON via tempfile + os.replace() so readers never see partial files."""
    path.parent.mkdir(parents=True, exist_ok=True)
    json_str = json.dumps(dict(data), indent=2, ensure_ascii=False)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix=".preferences-")
    closed = False
    try:
        os.write(fd, json_str.encode("utf-8"))
        os.close(fd)
        closed = True
        os.replace(tmp_path, path)
    except BaseException:
        if not closed:
            os.close(fd)
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


class PreferenceStore:
    """Synchronous JSON-file key-value store.

    The in-memory copy is authoritative for the session: a failed write
    keeps the new value in memory and returns False.
    """

    def __init__(self, path: Path | None = None, data: Mapping[str, Any] | None = None) -> None:
        self._path = path if path is not None else get_config_path()
        self._data: dict[str, Any] = dict(data) if data is not None else {}

    @classmethod
    def load(cls, path: Path | None = None) -> PreferenceStore:
        """Open the store at ``path`` (default: platform config dir)."""
        resolved = path if path is not None else get_config_path()
        return cls(resolved, _read_preferences(resolved))

    @property
    def path(self) -> Path:
        return self._path

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> bool:
        """Store ``value`` under ``key`` and flush to disk. Returns success."""
        self._data[key] = value
        return self._flush()

    def delete(self, key: str) -> bool:
        """Remove ``key`` if present and flush to disk. Returns success."""
        if key not in self._data:
            return True
        del self._data[key]
        return self._flush()

    def _flush(self) -> bool:
        try:
            _write_atomically(self._path, self._data)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save preferences to %s: %s", self._path, e)
            return False
        return True


# ============================================================================
# Theme Preference
# ============================================================================


def detect_system_dark_mode(environ: Mapping[str, str] | None = None) -> bool:
    """Guess whether the terminal uses a dark background.

    Reads the ``COLORFGBG`` hint ("fg;bg" or "fg;default;bg") that many
    terminals export. Background colors 0-6 and 8 are dark. Defaults to
    dark when the hint is absent or unparseable.
    """
    env = os.environ if environ is None else environ
    raw = env.get("COLORFGBG", "")
    if not raw:
        return True
    background = raw.split(";")[-1]
    try:
        bg = int(background)
    except ValueError:
        return True
    return bg in (0, 1, 2, 3, 4, 5, 6, 8)


def load_dark_mode(store: PreferenceStore, system_default: bool) -> bool:
    """Return the stored theme flag, or the system default if none was ever stored."""
    if DARK_MODE_KEY not in store:
        return system_default
    value = store.get(DARK_MODE_KEY)
    if not isinstance(value, bool):
        logger.warning("Ignoring non-boolean %s preference: %r", DARK_MODE_KEY, value)
        return system_default
    return value


def save_dark_mode(store: PreferenceStore, dark_mode: bool) -> bool:
    """Persist an explicit theme choice."""
    return store.set(DARK_MODE_KEY, dark_mode)


__all__ = [
    "CONFIG_APP_NAME",
    "PREFERENCES_FILENAME",
    "PreferenceStore",
    "detect_system_dark_mode",
    "get_config_path",
    "load_dark_mode",
    "save_dark_mode",
]
