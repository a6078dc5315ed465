from __future__ import annotations

import json
from typing import Any


def freeze(value: Any) -> str:
    """Canonical JSON text of a cached value; equal documents give equal strings."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


def thaw(raw: str) -> Any:
    return json.loads(raw)
