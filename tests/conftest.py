"""Test configuration shared across this project's pytest suite."""

from __future__ import annotations

import sys
from pathlib import Path


# The modules live at the repository root; make them importable without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
