# shapeforge/runtime/routing.py
"""
Request-matching specifications.

A RequestSpec is computed once per operation from its shape and the
protocol; routers match incoming requests against it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .http import Request


class SegmentKind(str, Enum):
    LITERAL = "literal"
    LABEL = "label"
    GREEDY = "greedy"


@dataclass(frozen=True)
class PathSegment:
    kind: SegmentKind
    value: str = ""

    @classmethod
    def parse(cls, raw: str) -> "PathSegment":
        if raw.startswith("{") and raw.endswith("}"):
            name = raw[1:-1]
            if name.endswith("+"):
                return cls(SegmentKind.GREEDY, name[:-1])
            return cls(SegmentKind.LABEL, name)
        return cls(SegmentKind.LITERAL, raw)


@dataclass(frozen=True)
class QuerySegment:
    key: str
    value: Optional[str] = None


@dataclass(frozen=True)
class RequestSpec:
    """
    HTTP binding match: method, path segments, required query literals and
    (for RPC protocols) a required header value.
    """

    method: str
    path: Tuple[PathSegment, ...] = ()
    query: Tuple[QuerySegment, ...] = ()
    header: Optional[Tuple[str, str]] = None

    @classmethod
    def from_uri(cls, method: str, uri: str) -> "RequestSpec":
        path_part, _, query_part = uri.partition("?")
        path = tuple(PathSegment.parse(s) for s in path_part.split("/") if s)
        query = []
        for item in (q for q in query_part.split("&") if q):
            key, eq, value = item.partition("=")
            query.append(QuerySegment(key, value if eq else None))
        return cls(method=method.upper(), path=path, query=tuple(query))

    @property
    def rank(self) -> int:
        """Specificity; routers try higher ranks first."""
        literals = sum(1 for s in self.path if s.kind == SegmentKind.LITERAL)
        greedy = any(s.kind == SegmentKind.GREEDY for s in self.path)
        return literals * 2 + len(self.path) + len(self.query) + (1 if self.header else 0) - (1 if greedy else 0)

    def matches(self, request: Request) -> bool:
        if request.method.upper() != self.method:
            return False
        if self.header is not None:
            name, value = self.header
            if request.header(name) != value:
                return False
        if not self._path_matches(request.path_segments):
            return False
        present = request.query
        for q in self.query:
            if q.value is None:
                if not any(k == q.key for k, _ in present):
                    return False
            elif (q.key, q.value) not in present:
                return False
        return True

    def _path_matches(self, segments: list) -> bool:
        index = 0
        for position, segment in enumerate(self.path):
            if segment.kind == SegmentKind.GREEDY:
                remaining_after = len(self.path) - position - 1
                available = len(segments) - index - remaining_after
                if available < 1:
                    return False
                index += available
                continue
            if index >= len(segments):
                return False
            if segment.kind == SegmentKind.LITERAL and segments[index] != segment.value:
                return False
            index += 1
        return index == len(segments)

    def __str__(self) -> str:
        parts = []
        for s in self.path:
            if s.kind == SegmentKind.LITERAL:
                parts.append(s.value)
            elif s.kind == SegmentKind.LABEL:
                parts.append(f"{{{s.value}}}")
            else:
                parts.append(f"{{{s.value}+}}")
        text = f"{self.method} /{'/'.join(parts)}"
        if self.query:
            text += "?" + "&".join(q.key if q.value is None else f"{q.key}={q.value}" for q in self.query)
        if self.header:
            text += f" [{self.header[0]}: {self.header[1]}]"
        return text


__all__ = ["SegmentKind", "PathSegment", "QuerySegment", "RequestSpec"]
