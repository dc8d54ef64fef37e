"""Shared pytest setup.

Tests import the `src.*` namespace straight from the checkout, so the repository root goes on
`sys.path` before collection.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))
