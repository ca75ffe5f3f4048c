"""Packaged resources for templater."""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from typing import Any, Dict

import yaml

__all__ = ["CATALOG_FILENAME", "load_catalog_descriptions", "packaged_catalog_descriptions", "templates_root"]

TEMPLATES_DIRNAME = "templates"
CATALOG_FILENAME = "index.yaml"


def templates_root() -> Traversable:
    """Directory holding the packaged ``*-template.tar.gz`` archives."""

    return resources.files(__name__) / TEMPLATES_DIRNAME


def load_catalog_descriptions(root: Any) -> Dict[str, str]:
    """Read ``index.yaml`` under ``root`` into a name -> description mapping.

    A missing catalog yields an empty mapping; archives are still discovered
    from their file names.
    """

    entry = root / CATALOG_FILENAME
    if not entry.is_file():
        return {}
    payload = yaml.safe_load(entry.read_text("utf-8")) or {}
    descriptions: Dict[str, str] = {}
    for item in payload.get("templates", []):
        if not isinstance(item, dict):
            continue
        name = str(item.get("name", "")).strip()
        if not name:
            continue
        descriptions[name] = str(item.get("description", "")).strip()
    return descriptions


@lru_cache(maxsize=1)
def packaged_catalog_descriptions() -> Dict[str, str]:
    return load_catalog_descriptions(templates_root())
