"""Picker-surface session: drill-down list with type-to-filter.

Listings are read on the background ``ListingScheduler`` and applied only
when they still match the engine position, so fast navigation never renders
a stale or duplicated directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..errors import NotConfigured, WorkspaceWizardError
from ..runtime.config import SURFACE_PICKER
from ..runtime.engine import BrowserEngine, ListingResult
from ..runtime.listing import ListingScheduler
from ..search import match_labels
from ..workspace_model import Node

PARENT_LABEL = ".."
DESCRIPTION_PARENT = "Parent"
DESCRIPTION_FOLDER = "Folder"
DESCRIPTION_WORKSPACE = "Workspace"


@dataclass(frozen=True)
class PickerItem:
    """One picker row; ``node`` is ``None`` for the parent (``..``) entry."""

    label: str
    description: str
    node: Node | None = None

    @property
    def is_parent(self) -> bool:
        return self.node is None


def build_picker_items(nodes: tuple[Node, ...], at_root: bool) -> list[PickerItem]:
    items: list[PickerItem] = []
    if not at_root:
        items.append(PickerItem(label=PARENT_LABEL, description=DESCRIPTION_PARENT))
    for node in nodes:
        description = DESCRIPTION_FOLDER if node.is_folder else DESCRIPTION_WORKSPACE
        items.append(PickerItem(label=node.name, description=description, node=node))
    return items


class PickerSession:
    """State for one open picker; discarded when the picker closes."""

    def __init__(self, engine: BrowserEngine, scheduler: ListingScheduler | None = None) -> None:
        self.engine = engine
        self.scheduler = scheduler if scheduler is not None else ListingScheduler(engine.list_children)
        self.items: list[PickerItem] = []
        self.matches: list[int] = []
        self.query = ""
        self.selected = 0
        self.list_start = 0
        self.error: WorkspaceWizardError | None = None
        self.loaded_directory: Path | None = None
        self.closed = False

    @property
    def busy(self) -> bool:
        return self.scheduler.busy

    def start(self) -> bool:
        """Request the first listing; ``False`` when no root is configured."""
        if self.engine.position is None:
            self.error = NotConfigured()
            return False
        self.request_listing()
        return True

    @property
    def loading(self) -> bool:
        """True until a listing of the current engine position has been applied."""
        return self.loaded_directory is None or self.loaded_directory != self.engine.position

    def request_listing(self, force: bool = False) -> bool:
        """Queue a listing of the engine position unless one is already pending.

        ``force`` re-reads even when a read of the same folder is in flight;
        refreshes after external changes need it.
        """
        position = self.engine.position
        if position is None:
            return False
        return self.scheduler.request(position, force=force) is not None

    def _clear_listing(self) -> None:
        self.items = []
        self.matches = []
        self.query = ""
        self.selected = 0
        self.list_start = 0
        self.error = None
        self.loaded_directory = None

    def poll(self) -> bool:
        """Apply finished listings for the current position; return whether any applied."""
        position = self.engine.position
        if position is None:
            return False
        completed = self.scheduler.drain_results(position)
        if not completed:
            return False
        self._apply(completed[-1].request.target, completed[-1].result)
        return True

    def _apply(self, directory: Path, result: object) -> None:
        if isinstance(result, ListingResult):
            nodes = result.nodes
            self.error = result.error
        else:
            nodes = ()
            self.error = result if isinstance(result, WorkspaceWizardError) else None

        navigation = self.engine.navigation
        at_root = navigation is None or directory == navigation.root
        same_directory = directory == self.loaded_directory
        previous = self.selected_item()
        self.items = build_picker_items(nodes, at_root)
        self.loaded_directory = directory
        if not same_directory:
            self.query = ""
        self._refilter()
        if same_directory and previous is not None:
            for match_pos, item_idx in enumerate(self.matches):
                if self.items[item_idx].label == previous.label:
                    self.selected = match_pos
                    break

    def _refilter(self) -> None:
        self.matches = match_labels(self.query, [item.label for item in self.items], limit=len(self.items) or 1)
        self.selected = 0
        self.list_start = 0

    def set_query(self, query: str) -> None:
        self.query = query
        self._refilter()

    def visible_items(self) -> list[PickerItem]:
        if self.loading:
            return []
        return [self.items[idx] for idx in self.matches]

    def selected_item(self) -> PickerItem | None:
        if not self.loading and 0 <= self.selected < len(self.matches):
            return self.items[self.matches[self.selected]]
        return None

    def move(self, delta: int) -> bool:
        if self.loading or not self.matches:
            return False
        target = max(0, min(len(self.matches) - 1, self.selected + delta))
        if target == self.selected:
            return False
        self.selected = target
        return True

    def go_back(self) -> bool:
        if not self.engine.back():
            return False
        self._clear_listing()
        self.request_listing()
        return True

    def activate(self, alternate: bool = False) -> str | None:
        """Resolve the selected row.

        ``..`` goes back, folders drill down, and workspaces open and close the
        picker. Nothing happens until the current folder's listing has landed.
        Returns a launch error message, if any.
        """
        item = self.selected_item()
        if item is None:
            return None
        if item.node is None:
            self.go_back()
            return None
        if item.node.is_folder:
            self.engine.resolve_selection(item.node, SURFACE_PICKER)
            self._clear_listing()
            self.request_listing()
            return None
        message = self.engine.resolve_selection(item.node, SURFACE_PICKER, alternate=alternate)
        self.closed = True
        return message

    def target_directory(self) -> Path | None:
        return self.engine.position


__all__ = [
    "PARENT_LABEL",
    "PickerItem",
    "build_picker_items",
    "PickerSession",
]
