"""Prefix redirect routes.

Each configured ``RedirectRule`` becomes a ``RedirectHandler`` that answers
every request under its prefix with a 301 to the rewritten destination.
"""

from __future__ import annotations

import logging

from fastapi.responses import RedirectResponse
from starlette import status
from starlette.requests import Request

from core.redirects import RouteRegistrar, register_prefix_routes, request_url
from schemas import RedirectRule
from services.redirect_service import build_rule, resolve_rule

logger = logging.getLogger(__name__)


class RedirectHandler:
    """Redirect ``/prefix/...`` to ``destination`` (301 Moved Permanently).

    Args:
        rule: The validated prefix/destination pair. Build one with
            ``RedirectHandler.from_config`` to validate raw strings.
    """

    def __init__(self, rule: RedirectRule) -> None:
        self.rule = rule

    @classmethod
    def from_config(cls, prefix: str, destination: str) -> RedirectHandler:
        """Raises ``pydantic.ValidationError`` for an unparseable destination."""
        return cls(build_rule(prefix, destination))

    @property
    def prefix(self) -> str:
        return self.rule.prefix

    def location_for(self, url: str) -> str:
        return resolve_rule(self.rule, url)

    async def handle(self, request: Request) -> RedirectResponse:
        location = self.location_for(request_url(request))
        logger.info(
            "redirect.issued",
            extra={
                "prefix": self.rule.prefix,
                "from_path": request.url.path,
                "to_url": location,
                "status_code": status.HTTP_301_MOVED_PERMANENTLY,
            },
        )
        return RedirectResponse(
            url=location, status_code=status.HTTP_301_MOVED_PERMANENTLY
        )

    def register(self, router: RouteRegistrar) -> list[str]:
        return register_prefix_routes(
            router, self.rule.prefix, self.handle, name="redirect"
        )
