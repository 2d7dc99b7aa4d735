import json
from typing import Any

from app.classification.exceptions import InvalidResponseError


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the first balanced ``{...}`` block in ``text`` that parses as an object.

    Providers often wrap the JSON in prose or code fences, so the text is
    scanned for brace-balanced candidates instead of parsed whole.

    Raises:
        InvalidResponseError: if no candidate parses as a JSON object.
    """
    start = text.find("{")
    while start != -1:
        end = _matching_brace(text, start)
        parsed: object = None
        if end is not None:
            try:
                parsed = json.loads(text[start : end + 1])
            except json.JSONDecodeError:
                parsed = None
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)
    raise InvalidResponseError("No valid JSON found in response")


def _matching_brace(text: str, start: int) -> int | None:
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None
