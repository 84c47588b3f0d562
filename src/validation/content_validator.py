# src/validation/content_validator.py — v1
"""Rule-based static gate applied to every synthesized file before storage.

Rules are evaluated in order and the first failing rule wins:
  1. Content must be non-blank.
  2. Source files outside types/ must export something.
  3. Widget components need a props contract and the React import.
  4. Service files must export and must not contain markup.
Files without a source-code extension only go through rule 1.
"""

from __future__ import annotations

from widgetsmith.core.conventions import (
    SERVICES_DIR,
    TYPES_DIR,
    WIDGETS_DIR,
    in_directory,
    is_component_file,
    is_source_file,
)
from widgetsmith.core.models import ValidationResult

EMPTY_CONTENT = "Empty file content"
MISSING_EXPORTS = "TypeScript file missing exports"
MISSING_PROPS = "Widget component missing proper props interface"
MISSING_REACT = "Widget component missing React import"
SERVICE_MARKUP = "Service file appears to contain JSX or missing exports"

_EXPORT_MARKER = "export"
_PROPS_MARKERS = ("WidgetProps", "interface")
_REACT_MARKER = "React"
_MARKUP_TOKEN = "<"

_VALID = ValidationResult(valid=True)


class ContentValidator:
    """Pure, deterministic validation of (path, content) pairs."""

    def validate(self, path: str, content: str) -> ValidationResult:
        if not content.strip():
            return _invalid(EMPTY_CONTENT)

        if not is_source_file(path):
            return _VALID

        has_export = _EXPORT_MARKER in content

        if not has_export and not in_directory(path, TYPES_DIR):
            return _invalid(MISSING_EXPORTS)

        if in_directory(path, WIDGETS_DIR) and is_component_file(path):
            if not any(marker in content for marker in _PROPS_MARKERS):
                return _invalid(MISSING_PROPS)
            if _REACT_MARKER not in content:
                return _invalid(MISSING_REACT)

        if in_directory(path, SERVICES_DIR):
            if not has_export or _MARKUP_TOKEN in content:
                return _invalid(SERVICE_MARKUP)

        return _VALID


def _invalid(reason: str) -> ValidationResult:
    return ValidationResult(valid=False, reason=reason)
