"""Make the in-tree ``wswizard`` package importable without installing it.

The suites have no ``__init__.py`` files, so pytest's rootdir-relative
imports do not put the repository root on ``sys.path`` by themselves.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = str(Path(__file__).resolve().parent.parent)

if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)
