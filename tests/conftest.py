"""Make the checkout importable when lazyfeed is not installed.

Running ``pytest`` from a fresh clone should exercise the local ``lazyfeed``
package rather than any installed copy.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = str(Path(__file__).resolve().parents[1])

if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)
