# src/core/conventions.py — v1
"""Host project path and naming conventions.

Role classification (widget / service / generic) selects both the synthesis
prompt template and the validation rule set, so it lives in one place.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Literal

FileRole = Literal["widget", "service", "generic"]

WIDGETS_DIR = "widgets"
SERVICES_DIR = "services"
TYPES_DIR = "types"

SOURCE_EXTENSIONS = frozenset({".ts", ".tsx"})
COMPONENT_EXTENSION = ".tsx"

_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z]")


def _parts(path: str) -> PurePosixPath:
    return PurePosixPath(path.replace("\\", "/"))


def in_directory(path: str, name: str) -> bool:
    """True if any parent directory segment of path equals name."""
    return name in _parts(path).parent.parts


def extension(path: str) -> str:
    """Lower-cased file extension including the dot ('' if none)."""
    return _parts(path).suffix.lower()


def is_source_file(path: str) -> bool:
    return extension(path) in SOURCE_EXTENSIONS


def is_component_file(path: str) -> bool:
    return extension(path) == COMPONENT_EXTENSION


def classify_path(path: str) -> FileRole:
    """Classify a project path into a synthesis role by directory convention."""
    if in_directory(path, WIDGETS_DIR):
        return "widget"
    if in_directory(path, SERVICES_DIR):
        return "service"
    return "generic"


def widget_component_name(widget_title: str) -> str:
    """Exported component name for a widget title.

    "Moving Average Chart" -> "MovingAverageChartWidget".
    """
    return f"{_NON_IDENTIFIER.sub('', widget_title)}Widget"
