"""Error taxonomy for browsing, navigation, and workspace creation.

Every error here is local and recoverable: callers surface it once (status
row or stderr) and leave browser state untouched.
"""

from __future__ import annotations

from pathlib import Path


class WorkspaceWizardError(Exception):
    """Base class for all workspace-wizard failures."""


class DirectoryUnreadable(WorkspaceWizardError):
    """A directory listing failed (missing path, permission denied, ...)."""

    def __init__(self, path: Path, error: BaseException) -> None:
        super().__init__(f"Unable to open {path}: {error}")
        self.path = path
        self.error = error


class CreateFailed(WorkspaceWizardError):
    """Creating a folder or workspace file failed."""

    def __init__(self, path: Path, error: BaseException) -> None:
        super().__init__(f"Unable to create {path}: {error}")
        self.path = path
        self.error = error


class NotConfigured(WorkspaceWizardError):
    """No workspaces root folder has been selected yet."""

    def __init__(self) -> None:
        super().__init__("Run 'wswizard select-root PATH' to choose a workspaces folder")


class OutOfBounds(WorkspaceWizardError):
    """A navigation target resolved outside the configured root."""

    def __init__(self, path: Path | str, root: Path) -> None:
        super().__init__(f"{path} is outside of {root}")
        self.path = path
        self.root = root


class AtRoot(WorkspaceWizardError):
    """Ascending was requested while already at the root."""

    def __init__(self, root: Path) -> None:
        super().__init__(f"Already at {root}")
        self.root = root


__all__ = [
    "WorkspaceWizardError",
    "DirectoryUnreadable",
    "CreateFailed",
    "NotConfigured",
    "OutOfBounds",
    "AtRoot",
]
