"""Shared helpers for the JSON input files."""

import json
from pathlib import Path
from typing import Any, List, Union

from battery_planner.errors import ParseError, ReadError


def read_json(path: Union[str, Path], what: str) -> Any:
    """Read and decode a JSON file, naming ``what`` in any error."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ReadError(f"Unable to read {what} file: {path}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"JSON parsing error in {what}") from exc


def records_under(data: Any, key: str, what: str) -> List[Any]:
    """Return the record list stored under ``key`` (or the document itself if it is a list)."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    raise ParseError(f"Expected a list of {what} under the '{key}' key")
