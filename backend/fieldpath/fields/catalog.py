from __future__ import annotations

import pathlib
from typing import Any, Dict, List

import yaml

CATALOG_PATH = pathlib.Path(__file__).resolve().parent / "shape_catalog.yaml"


def load_shape_catalog() -> List[Dict[str, Any]]:
    with open(CATALOG_PATH, "r", encoding="utf-8") as f:
        doc = yaml.safe_load(f) or {}
    return doc.get("shapes", [])
