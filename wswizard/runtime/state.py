from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class AppState:
    surface: str
    dirty: bool = True
    status_message: str = ""
    status_is_error: bool = False
    status_message_until: float = 0.0
    prompt_kind: str = ""
    prompt_text: str = ""
    prompt_parent: Path | None = None
    tree_start: int = 0
    busy_frame: int = 0
    detail_path: Path | None = None
    detail_text: str = ""
    quit: bool = False
