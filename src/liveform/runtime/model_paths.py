"""
Model path helpers.

Clients address nested prop values with either dotted (``registration.email``)
or bracketed (``registration[address][city]``) paths; both parse to the same
segments.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

_SEGMENT_RE = re.compile(r"[^.\[\]]+")


def parse_model_path(path: str) -> list[str]:
    """Split a dotted or bracketed path into segments."""
    segments = _SEGMENT_RE.findall(path)
    if not segments:
        raise ValueError(f"Empty model path: {path!r}")
    return segments


def set_by_path(target: dict[str, Any], segments: Sequence[str], value: Any) -> None:
    """Assign ``value`` at ``segments`` inside ``target``, creating dicts as needed."""
    node = target
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = value
