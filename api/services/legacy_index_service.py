"""Legacy short-link index.

Maps the opaque legacy identifier recorded in a post's front matter
(``wordpress_id`` by default) to the post's permalink. The identifier is
matched verbatim against the incoming path segment; no numeric
transcoding is applied.

The index is built once at startup and is read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from core import get_logger
from schemas import ContentEntry
from services.content_service import iter_post_entries
from services.redirect_service import RedirectConfigError

logger = get_logger(__name__)


class LegacyIndexError(RedirectConfigError):
    """Raised when the legacy index cannot be built."""


class LegacyIdCollisionError(LegacyIndexError):
    """Raised when two posts declare the same legacy identifier."""

    def __init__(self, legacy_id: str, first_path: str, second_path: str) -> None:
        self.legacy_id = legacy_id
        self.first_path = first_path
        self.second_path = second_path
        super().__init__(
            f"Legacy id {legacy_id!r} is declared by both {first_path} "
            f"and {second_path}"
        )


class LegacyIndex(Mapping[str, str]):
    """Immutable ``legacy_id -> permalink`` mapping."""

    __slots__ = ("_permalinks",)

    def __init__(self, permalinks: Mapping[str, str] | None = None) -> None:
        self._permalinks = MappingProxyType(dict(permalinks or {}))

    def __getitem__(self, legacy_id: str) -> str:
        return self._permalinks[legacy_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._permalinks)

    def __len__(self) -> int:
        return len(self._permalinks)

    def __repr__(self) -> str:
        return f"LegacyIndex({len(self)} entries)"

    def resolve(self, legacy_id: str) -> str | None:
        return self._permalinks.get(legacy_id)


def index_entries(entries: Iterable[ContentEntry]) -> LegacyIndex:
    """Build a ``LegacyIndex`` from content entries.

    Entries without a legacy id are ignored.

    Raises:
        LegacyIdCollisionError: two entries share a legacy id.
    """
    permalinks: dict[str, str] = {}
    sources: dict[str, str] = {}
    for entry in entries:
        if entry.legacy_id is None:
            continue
        if entry.legacy_id in permalinks:
            raise LegacyIdCollisionError(
                entry.legacy_id, sources[entry.legacy_id], entry.source_path
            )
        permalinks[entry.legacy_id] = entry.permalink
        sources[entry.legacy_id] = entry.source_path
    return LegacyIndex(permalinks)


def build_legacy_index(
    content_dir: Path | str,
    id_field: str = "wordpress_id",
    posts_dir: str = "_posts",
) -> LegacyIndex:
    """Scan ``content_dir`` for posts and index them by legacy id.

    Raises:
        LegacyIndexError: ``content_dir`` is not a directory.
        LegacyIdCollisionError: two posts share a legacy id.
    """
    root = Path(content_dir)
    if not root.is_dir():
        raise LegacyIndexError(f"Content directory not found: {root}")

    index = index_entries(iter_post_entries(root, id_field, posts_dir))
    logger.info(
        "legacy_index.built",
        content_dir=str(root),
        id_field=id_field,
        entries=len(index),
    )
    return index
