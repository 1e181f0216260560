# shapeforge/runtime/http.py
"""Minimal HTTP request/response values used by the reference runtime."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit


@dataclass(frozen=True)
class Request:
    """
    An incoming request.

    Examples:
        >>> Request("GET", "/cities/seattle?units=metric").path_segments
        ['cities', 'seattle']
    """

    method: str
    uri: str = "/"
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def path(self) -> str:
        return urlsplit(self.uri).path or "/"

    @property
    def path_segments(self) -> List[str]:
        return [s for s in self.path.split("/") if s]

    @property
    def query(self) -> List[Tuple[str, str]]:
        return parse_qsl(urlsplit(self.uri).query, keep_blank_values=True)

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


@dataclass(frozen=True)
class Response:
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


__all__ = ["Request", "Response"]
