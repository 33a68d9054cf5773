"""Prefix route registration for redirect handlers.

Handlers depend on the ``RouteRegistrar`` capability rather than on a
concrete router, so anything with Starlette's ``add_route`` signature
(a FastAPI app, an ``APIRouter``, a bare ``starlette.routing.Router``)
can host them.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol
from urllib.parse import quote

from starlette.requests import Request
from starlette.responses import Response

from services.redirect_service import PATH_SAFE_CHARS, normalize_prefix

logger = logging.getLogger(__name__)

Endpoint = Callable[[Request], Awaitable[Response]]

REDIRECT_METHODS: tuple[str, ...] = ("GET", "HEAD")


class RouteRegistrar(Protocol):
    """Anything that can register a path route and dispatch to an endpoint."""

    def add_route(
        self,
        path: str,
        route: Endpoint,
        methods: list[str] | None = None,
        name: str | None = None,
        include_in_schema: bool = True,
    ) -> None: ...


def prefix_route_paths(prefix: str) -> list[str]:
    """Route patterns matching ``/prefix`` and any sub-path beneath it.

    ``/x`` and ``/x/{rest:path}`` match ``/x``, ``/x/`` and ``/x/y`` but
    never a sibling such as ``/xy``. An empty prefix matches every path.
    """
    prefix = normalize_prefix(prefix)
    if not prefix:
        return ["/{rest:path}"]
    return [f"/{prefix}", f"/{prefix}/{{rest:path}}"]


def register_prefix_routes(
    router: RouteRegistrar,
    prefix: str,
    endpoint: Endpoint,
    *,
    name: str,
    methods: Sequence[str] = REDIRECT_METHODS,
) -> list[str]:
    paths = prefix_route_paths(prefix)
    for path in paths:
        router.add_route(
            path,
            endpoint,
            methods=list(methods),
            name=f"{name}:{path}",
            include_in_schema=False,
        )
    logger.debug("redirect.routes_registered", extra={"name": name, "paths": paths})
    return paths


def request_url(request: Request) -> str:
    """Rebuild the request target (path and query) in percent-encoded form."""
    raw_path: bytes | None = request.scope.get("raw_path")
    if raw_path:
        # Some test transports leave the query string on raw_path
        path = quote(raw_path.split(b"?", 1)[0], safe=PATH_SAFE_CHARS)
    else:
        path = quote(request.scope["path"], safe=PATH_SAFE_CHARS.replace("%", ""))
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path
