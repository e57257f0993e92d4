from __future__ import annotations

import sys
from pathlib import Path

def ensure_monorepo_paths() -> None:
    """Put every ``packages/*/src`` and ``services/*/src`` on sys.path.

    Lets ``python -m tv_gateway`` run from a checkout without an editable
    install; installed distributions already resolve and are left alone.
    """
    # packages/core_utils/src/core_utils/bootstrap.py -> repo root
    root = Path(__file__).resolve().parents[4]
    src_roots = [root] + sorted((root / "packages").glob("*/src")) + sorted((root / "services").glob("*/src"))
    for p in map(str, src_roots):
        if p not in sys.path:
            sys.path.insert(0, p)
