# shapeforge/runtime/service.py
"""
Reference runtime of a generated service.

This mirrors, in Python, the builder and router that ServerServiceGenerator
emits, so that their contract can be exercised directly:

- one slot per operation, Unset until a handler is registered
- build() fails with MissingOperationsError naming every missing operation
  and its setter
- build_unchecked() never fails; unset slots route to
  FailOnMissingOperation, which answers 500 at dispatch time

Usage:
    builder = ServiceBuilder("Weather", plan.bindings())
    service = builder.get_city(handle_get_city).build_unchecked()
    response = service.call(Request("GET", "/cities/seattle"))
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .http import Request, Response
from .routing import RequestSpec

Handler = Callable[[Request], Response]
Plugin = Callable[[str, Handler], Handler]

MISSING_HANDLER_STATUS = 500
UNKNOWN_OPERATION_STATUS = 404


@dataclass(frozen=True)
class OperationBinding:
    """
    One operation as seen by the builder.

    Attributes:
        name: Absolute operation shape id (``example.weather#GetCity``)
        field_name: Builder slot and setter name (``get_city``)
        spec: Request-matching specification of the operation
    """

    name: str
    field_name: str
    spec: RequestSpec

    @property
    def setter_name(self) -> str:
        return f".{self.field_name}()"


class FailOnMissingOperation:
    """Handler substituted for unset slots by ``build_unchecked``."""

    def __init__(self, operation: str):
        self.operation = operation

    def __call__(self, request: Request) -> Response:
        body = json.dumps({"message": f"no handler registered for operation {self.operation}"})
        return Response(
            status=MISSING_HANDLER_STATUS,
            headers={"content-type": "application/json"},
            body=body.encode("utf-8"),
        )


class MissingOperationsError(Exception):
    """
    ``build`` was called while one or more slots were unset.

    Attributes:
        operation_names2setter_methods: Missing operation id → setter name,
            in operation order
    """

    def __init__(self, service_name: str, builder_name: str, missing: Dict[str, str]):
        self.service_name = service_name
        self.builder_name = builder_name
        self.operation_names2setter_methods = dict(missing)
        super().__init__(self._message())

    @property
    def missing_operations(self) -> List[str]:
        return list(self.operation_names2setter_methods)

    @property
    def setter_names(self) -> List[str]:
        return list(self.operation_names2setter_methods.values())

    def _message(self) -> str:
        lines = [
            f"You must specify a handler for all operations attached to `{self.service_name}`.",
            "We are missing handlers for the following operations:",
        ]
        lines.extend(f"- {name}" for name in self.operation_names2setter_methods)
        lines.append("")
        lines.append(
            f"Use the dedicated methods on `{self.builder_name}` to register the missing handlers:"
        )
        lines.extend(f"- {setter}" for setter in self.operation_names2setter_methods.values())
        return "\n".join(lines)


@dataclass(frozen=True)
class Route:
    operation: str
    spec: RequestSpec
    handler: Handler

    @property
    def is_missing_handler(self) -> bool:
        return isinstance(self.handler, FailOnMissingOperation)


class Router:
    """
    Request spec → route table.

    The most specific spec wins; among equally specific specs the earlier
    route (operation order) wins.
    """

    def __init__(self, routes: Sequence[Route]):
        self._routes = list(routes)
        self._match_order = sorted(self._routes, key=lambda r: -r.spec.rank)

    @classmethod
    def from_iter(cls, pairs: Iterable[Tuple[RequestSpec, Route]]) -> "Router":
        return cls([route for _, route in pairs])

    @property
    def routes(self) -> List[Route]:
        return list(self._routes)

    def match(self, request: Request) -> Optional[Route]:
        for route in self._match_order:
            if route.spec.matches(request):
                return route
        return None

    def map(self, fn: Callable[[Route], Route]) -> "Router":
        return Router([fn(r) for r in self._routes])


class Service:
    """A built service: routes requests to handlers through its Router."""

    def __init__(self, name: str, routes: Sequence[Route]):
        self.name = name
        self.router = Router(routes)

    @property
    def routes(self) -> List[Route]:
        """Routes in operation order."""
        return self.router.routes

    def route_for(self, operation: str) -> Optional[Route]:
        for route in self.router.routes:
            if route.operation == operation:
                return route
        return None

    def call(self, request: Request) -> Response:
        route = self.router.match(request)
        if route is not None:
            return route.handler(request)
        return Response(
            status=UNKNOWN_OPERATION_STATUS,
            headers={"content-type": "application/json"},
            body=b'{"message":"unknown operation"}',
        )

    def layer(self, layer: Callable[[Handler], Handler]) -> "Service":
        """Apply ``layer`` uniformly to every route."""
        mapped = self.router.map(lambda r: Route(r.operation, r.spec, layer(r.handler)))
        return Service(self.name, mapped.routes)


class ServiceBuilder:
    """
    Builder with one slot per operation.

    Setters are available by field name, e.g. ``builder.get_city(handler)``
    or ``builder.get_city_operation(handler)``; both return the builder.

    Raises:
        ValueError: If a slot would shadow a builder member such as ``build``
    """

    def __init__(
        self,
        service_name: str,
        bindings: Sequence[OperationBinding],
        plugin: Optional[Plugin] = None,
    ):
        self.service_name = service_name
        self.builder_name = f"{service_name}Builder"
        self._bindings = list(bindings)
        shadowed = sorted(
            name
            for b in self._bindings
            for name in (b.field_name, f"{b.field_name}_operation")
            if hasattr(type(self), name)
        )
        if shadowed:
            raise ValueError(f"Operation slots of {self.builder_name} shadow builder members: {shadowed}")
        self._by_field = {b.field_name: b for b in self._bindings}
        self._handlers: Dict[str, Handler] = {}
        self._plugin = plugin

    # -------------------------------------------------------------------------
    # Slots
    # -------------------------------------------------------------------------

    def set_handler(self, field_name: str, handler: Handler) -> "ServiceBuilder":
        binding = self._by_field.get(field_name)
        if binding is None:
            raise KeyError(
                f"{self.builder_name} has no operation slot {field_name!r}. "
                f"Available: {list(self._by_field)}"
            )
        if self._plugin is not None:
            handler = self._plugin(binding.name, handler)
        self._handlers[field_name] = handler
        return self

    def __getattr__(self, name: str) -> Callable[[Handler], "ServiceBuilder"]:
        by_field = self.__dict__.get("_by_field", {})
        field_name = name[: -len("_operation")] if name.endswith("_operation") else name
        if field_name in by_field:
            return lambda handler: self.set_handler(field_name, handler)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def is_set(self, field_name: str) -> bool:
        return field_name in self._handlers

    def missing(self) -> Dict[str, str]:
        """Unset operations → setter names, in operation order."""
        return {
            b.name: b.setter_name for b in self._bindings if b.field_name not in self._handlers
        }

    # -------------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------------

    def build(self) -> Service:
        """
        Raises:
            MissingOperationsError: If any slot is unset
        """
        missing = self.missing()
        if missing:
            raise MissingOperationsError(self.service_name, self.builder_name, missing)
        return Service(
            self.service_name,
            [Route(b.name, b.spec, self._handlers[b.field_name]) for b in self._bindings],
        )

    def build_unchecked(self) -> Service:
        routes = []
        for b in self._bindings:
            handler = self._handlers.get(b.field_name)
            if handler is None:
                handler = FailOnMissingOperation(b.name)
            routes.append(Route(b.name, b.spec, handler))
        return Service(self.service_name, routes)


__all__ = [
    "Handler",
    "OperationBinding",
    "FailOnMissingOperation",
    "MissingOperationsError",
    "Route",
    "Router",
    "Service",
    "ServiceBuilder",
    "MISSING_HANDLER_STATUS",
    "UNKNOWN_OPERATION_STATUS",
]
