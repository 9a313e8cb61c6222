from __future__ import annotations

import hashlib
import json
from typing import Any, Iterable, Tuple


def sha256_canonical(obj: Any) -> str:
    """Hash over canonical JSON (stable key ordering, no whitespace)."""
    data = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return "sha256:" + hashlib.sha256(data).hexdigest()


def fingerprint_points(points: Iterable[Tuple[float, float]]) -> str:
    # repr() round-trips floats exactly, so equal fingerprints mean bit-identical paths
    return sha256_canonical([[repr(float(x)), repr(float(y))] for x, y in points])
