# src/pipeline/json_extraction.py — v1
"""Best-effort extraction of structured payloads from free-text model output.

JSON is located by scanning for the first balanced ``{...}`` span, then
validated strictly against a Pydantic model. A missing span, a JSON decode
error and a schema violation are all reported as MalformedModelOutput.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from widgetsmith.core.errors import MalformedModelOutput

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_CODE_FENCE = re.compile(r"```[\w.+#-]*[^\S\n]*\n(.*?)\n?```", re.DOTALL)


def _balanced_end(text: str, start: int) -> int | None:
    """Index just past the brace closing text[start], or None if unbalanced."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def find_json_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` span in text, or None."""
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            return text[start:end]
        start = text.find("{", start + 1)
    return None


def parse_model_output(text: str, model: type[ModelT], stage: str) -> ModelT:
    """Extract and strictly validate a JSON object from model output.

    Args:
        text: Raw completion text.
        model: Pydantic model describing the expected shape.
        stage: Stage name used in error messages ("analysis", "plan").

    Raises:
        MalformedModelOutput: No object found, invalid JSON or schema violation.
    """
    span = find_json_object(text)
    if span is None:
        raise MalformedModelOutput(stage, "response did not contain a JSON object")

    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise MalformedModelOutput(stage, f"invalid JSON: {e}") from e

    try:
        return model.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        logger.debug("Schema violation in %s output: %s", stage, problems)
        raise MalformedModelOutput(stage, problems) from e


def extract_code(text: str) -> str:
    """Return the body of the first fenced code block, else the trimmed text."""
    match = _CODE_FENCE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()
