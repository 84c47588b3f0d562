# src/storage/layout.py — v2
"""Key layout of the artifact store inside the key-value store.

Defines the namespace tags for generated files, the manifest key and the
per-widget update-plan keys, plus canonical path resolution.
"""

from __future__ import annotations

import re
from typing import Literal

PlanKind = Literal["container", "types", "library"]

ARTIFACT_PREFIX = "generated_file_"
MANIFEST_KEY = "generated_files_manifest"

PLAN_PREFIXES: dict[PlanKind, str] = {
    "container": "widget_update_plan_",
    "types": "types_update_plan_",
    "library": "library_update_plan_",
}

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def canonical_path(logical_path: str, base_dir: str, root_prefix: str = "src/") -> str:
    """Resolve a plan path to its absolute store path.

    The project-root prefix is stripped once if present, then the remainder
    is joined to base_dir.
    """
    clean = logical_path
    if root_prefix and clean.startswith(root_prefix):
        clean = clean[len(root_prefix):]
    return f"{base_dir.rstrip('/')}/{clean.lstrip('/')}"


def artifact_key(path: str) -> str:
    """Key holding the content of the artifact at canonical path."""
    return f"{ARTIFACT_PREFIX}{_NON_ALNUM.sub('_', path)}"


def update_plan_key(kind: PlanKind, widget_type: str) -> str:
    """Key holding one update-plan record of a widget."""
    return f"{PLAN_PREFIXES[kind]}{widget_type}"
