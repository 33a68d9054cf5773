"""Legacy short-link redirect routes.

The old WordPress site handed out short links such as ``/b/1f`` where the
trailing segment is the post's legacy identifier. These routes look the
identifier up in a ``LegacyIndex`` built from the Jekyll ``_posts``
directory and redirect to the post's permalink.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi.responses import RedirectResponse, Response
from starlette import status
from starlette.requests import Request

from core.redirects import RouteRegistrar, register_prefix_routes
from services.legacy_index_service import LegacyIndex, build_legacy_index
from services.redirect_service import normalize_prefix, strip_prefix

logger = logging.getLogger(__name__)


class LegacyRedirectHandler:
    """Redirect ``/prefix/<legacy_id>`` to the matching post permalink.

    Unknown identifiers get a plain 404; they are an expected outcome once
    posts are removed, not an error.
    """

    def __init__(self, prefix: str, index: LegacyIndex) -> None:
        self.prefix = normalize_prefix(prefix)
        self.index = index

    @classmethod
    def from_directory(
        cls,
        prefix: str,
        content_dir: Path | str,
        id_field: str = "wordpress_id",
        posts_dir: str = "_posts",
    ) -> LegacyRedirectHandler:
        """Build the index from a Jekyll site; raises ``LegacyIndexError``."""
        return cls(prefix, build_legacy_index(content_dir, id_field, posts_dir))

    def legacy_id_for(self, path: str) -> str:
        return strip_prefix(self.prefix, path).strip("/")

    async def handle(self, request: Request) -> Response:
        path = request.url.path
        legacy_id = self.legacy_id_for(path)
        permalink = self.index.resolve(legacy_id) if legacy_id else None

        if permalink is None:
            logger.info(
                "legacy.not_found",
                extra={"path": path, "legacy_id": legacy_id},
            )
            return Response(status_code=status.HTTP_404_NOT_FOUND)

        logger.info(
            "legacy.redirect",
            extra={
                "legacy_id": legacy_id,
                "to_path": permalink,
                "status_code": status.HTTP_301_MOVED_PERMANENTLY,
            },
        )
        return RedirectResponse(
            url=permalink, status_code=status.HTTP_301_MOVED_PERMANENTLY
        )

    def register(self, router: RouteRegistrar) -> list[str]:
        return register_prefix_routes(
            router, self.prefix, self.handle, name="legacy_redirect"
        )
