"""Persistent JSON settings and state helpers.

Settings (``config.json``) hold user preferences: sort policy, watch toggle,
open targets, expand policy, and launch command. State (``state.json``) holds
the remembered workspaces folder and expanded tree folders.
All access is defensive: malformed or missing files fall back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

from ..workspace_model.types import SORT_NAME, SORT_POLICIES

logger = logging.getLogger(__name__)

APP_NAME = "wswizard"
CONFIG_FILENAME = "config.json"
STATE_FILENAME = "state.json"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))
CONFIG_PATH = CONFIG_DIR / CONFIG_FILENAME
STATE_PATH = CONFIG_DIR / STATE_FILENAME
LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / "wswizard.log"

EXPAND_COLLAPSED = "collapsed"
EXPAND_ALL = "all"
EXPAND_REMEMBER = "remember"
EXPAND_POLICIES: tuple[str, ...] = (EXPAND_COLLAPSED, EXPAND_ALL, EXPAND_REMEMBER)

SURFACE_TREE = "tree"
SURFACE_PICKER = "picker"
START_NONE = "none"
START_SURFACES: tuple[str, ...] = (SURFACE_PICKER, SURFACE_TREE, START_NONE)

KEY_WORKSPACES_FOLDER = "workspaces_folder"
KEY_EXPANDED_FOLDERS = "expanded_folders"


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of user settings plus the remembered root."""

    root: Path | None = None
    sort_policy: str = SORT_NAME
    watch_for_changes: bool = True
    watch_debounce_ms: int = 300
    tree_open_in_new_window: bool = False
    picker_open_in_new_window: bool = False
    expand_policy: str = EXPAND_COLLAPSED
    start_surface: str = SURFACE_PICKER
    launch_command: str = "code"
    style: str = "monokai"

    def open_in_new_window(self, surface: str) -> bool:
        """Return the default open target configured for ``surface``."""
        if surface == SURFACE_TREE:
            return self.tree_open_in_new_window
        return self.picker_open_in_new_window


DEFAULT_SETTINGS = Settings()


def _load_json(path: Path) -> dict[str, object]:
    """Load a JSON object, returning ``{}`` when missing or malformed."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.warning("Ignoring unreadable %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _save_json(path: Path, data: dict[str, object]) -> None:
    """Persist data as pretty-printed JSON.

    Filesystem/serialization errors are logged and otherwise ignored so a
    read-only config directory never breaks browsing.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.warning("Unable to write %s: %s", path, exc)


def load_config() -> dict[str, object]:
    """Load the raw settings object."""
    return _load_json(CONFIG_PATH)


def save_config(data: dict[str, object]) -> None:
    _save_json(CONFIG_PATH, data)


def config_signature() -> tuple[str, int, int]:
    """Return a cheap stat signature of ``config.json`` for change polling."""
    try:
        st = CONFIG_PATH.stat()
    except FileNotFoundError:
        return ("missing", 0, 0)
    except OSError:
        return ("error", 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size)


def load_state() -> dict[str, object]:
    """Load the raw persisted-state object."""
    return _load_json(STATE_PATH)


def save_state(data: dict[str, object]) -> None:
    _save_json(STATE_PATH, data)


def _coerce_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _coerce_choice(value: object, choices: tuple[str, ...], default: str) -> str:
    if isinstance(value, str) and value.strip() in choices:
        return value.strip()
    return default


def _coerce_positive_int(value: object, default: int) -> int:
    """Accept positive integers only; booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _coerce_nonempty_str(value: object, default: str) -> str:
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else default


def load_root() -> Path | None:
    """Return the remembered workspaces folder, or ``None`` when unset."""
    value = load_state().get(KEY_WORKSPACES_FOLDER)
    if not isinstance(value, str) or not value.strip():
        return None
    return Path(value)


def save_root(root: Path) -> None:
    state = load_state()
    state[KEY_WORKSPACES_FOLDER] = str(root)
    save_state(state)


def load_expanded_folders() -> set[Path]:
    """Return the remembered expanded tree folders; non-strings are dropped."""
    value = load_state().get(KEY_EXPANDED_FOLDERS)
    if not isinstance(value, list):
        return set()
    return {Path(item) for item in value if isinstance(item, str) and item}


def save_expanded_folders(expanded: set[Path]) -> None:
    state = load_state()
    state[KEY_EXPANDED_FOLDERS] = sorted(str(path) for path in expanded)
    save_state(state)


def load_settings() -> Settings:
    """Build a sanitized ``Settings`` snapshot from config and state files."""
    data = load_config()
    defaults = DEFAULT_SETTINGS
    return Settings(
        root=load_root(),
        sort_policy=_coerce_choice(data.get("sort_policy"), SORT_POLICIES, defaults.sort_policy),
        watch_for_changes=_coerce_bool(data.get("watch_for_changes"), defaults.watch_for_changes),
        watch_debounce_ms=_coerce_positive_int(data.get("watch_debounce_ms"), defaults.watch_debounce_ms),
        tree_open_in_new_window=_coerce_bool(
            data.get("tree_open_in_new_window"), defaults.tree_open_in_new_window
        ),
        picker_open_in_new_window=_coerce_bool(
            data.get("picker_open_in_new_window"), defaults.picker_open_in_new_window
        ),
        expand_policy=_coerce_choice(data.get("expand_policy"), EXPAND_POLICIES, defaults.expand_policy),
        start_surface=_coerce_choice(data.get("start_surface"), START_SURFACES, defaults.start_surface),
        launch_command=_coerce_nonempty_str(data.get("launch_command"), defaults.launch_command),
        style=_coerce_nonempty_str(data.get("style"), defaults.style),
    )


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "STATE_PATH",
    "LOG_PATH",
    "EXPAND_COLLAPSED",
    "EXPAND_ALL",
    "EXPAND_REMEMBER",
    "SURFACE_TREE",
    "SURFACE_PICKER",
    "START_NONE",
    "Settings",
    "DEFAULT_SETTINGS",
    "load_config",
    "save_config",
    "config_signature",
    "load_state",
    "save_state",
    "load_root",
    "save_root",
    "load_expanded_folders",
    "save_expanded_folders",
    "load_settings",
]
