"""Jekyll post permalinks derived from ``YYYY-MM-DD-slug.ext`` filenames."""

from __future__ import annotations

import re
from pathlib import PurePath

_post_filename_re = re.compile(
    r"^(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})-(?P<slug>.+)\.[^.]+$"
)


def parse_post_filename(filename: str) -> tuple[str, str, str, str] | None:
    """Split a post filename into ``(year, month, day, slug)``.

    Only the base name is considered. Date parts are returned verbatim
    (zero-padded); the slug loses its final extension only.
    """
    match = _post_filename_re.match(PurePath(filename).name)
    if not match:
        return None
    return match.group("year", "month", "day", "slug")


def permalink_from_parts(year: str, month: str, day: str, slug: str) -> str:
    return f"/{year}/{month}/{day}/{slug}.html"


def derive_permalink(filename: str) -> str | None:
    """``2014-05-28-test.md`` -> ``/2014/05/28/test.html``; None if ineligible."""
    parts = parse_post_filename(filename)
    if parts is None:
        return None
    return permalink_from_parts(*parts)
