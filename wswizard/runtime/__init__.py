"""Public runtime orchestration entry points.

This package groups the browser engine, persisted configuration, and the
interactive session bootstrap (`run_browser`).
"""

from __future__ import annotations


def run_browser(*args, **kwargs):
    """Lazily import the session entrypoint to avoid package-import cycles."""
    from .app import run_browser as _run_browser

    return _run_browser(*args, **kwargs)


__all__ = ["run_browser"]
