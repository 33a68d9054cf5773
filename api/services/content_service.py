"""Content loading service.

Walks a Jekyll site directory and reads the YAML front matter of its
files. Front matter is the ``---`` delimited block at the very top of a
file; it is loaded with PyYAML's ``BaseLoader`` so every scalar stays the
verbatim string written in the file (``0100`` is not an octal int).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from pathlib import Path, PurePosixPath

import yaml

from core import get_logger
from schemas import ContentEntry
from services.permalink_service import parse_post_filename

logger = get_logger(__name__)

_front_matter_re = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?P<body>.*?)(?:^|\r?\n)---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


class FrontMatterError(Exception):
    """Raised when a file's front matter block cannot be parsed."""


class FrontMatterMissingError(FrontMatterError):
    """Raised when a file has no front matter block at all."""


def _scalar_items(data: dict) -> dict[str, str]:
    """Keep top-level scalar values; lists and mappings are dropped."""
    return {key: value for key, value in data.items() if isinstance(value, str)}


def parse_front_matter(text: str) -> dict[str, str]:
    """Return the front matter of ``text`` as a ``key -> string`` mapping.

    Raises:
        FrontMatterMissingError: no ``---`` header block at the top.
        FrontMatterError: the block is not a YAML mapping.
    """
    match = _front_matter_re.match(text)
    if not match:
        raise FrontMatterMissingError("No front matter block")

    try:
        data = yaml.load(match.group("body"), Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Invalid YAML in front matter: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Front matter must be a mapping, got {type(data).__name__}"
        )
    return _scalar_items(data)


def iter_content_files(
    root: Path, include: Callable[[str], bool] | None = None
) -> Iterator[tuple[str, str]]:
    """Yield ``(relative_posix_path, text)`` for regular files under ``root``.

    Files are visited in sorted order. ``include`` filters on the relative
    path before the file is read. Unreadable or non UTF-8 files are logged
    and skipped.
    """
    for file_path in sorted(root.rglob("*")):
        if not file_path.is_file():
            continue
        rel = file_path.relative_to(root).as_posix()
        if include is not None and not include(rel):
            continue
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(
                "content.file_unreadable",
                path=rel,
                error=str(e),
            )
            continue
        yield rel, text


def is_post_path(rel_path: str, posts_dir: str = "_posts") -> bool:
    """True when a directory component of ``rel_path`` is ``posts_dir``."""
    return posts_dir in PurePosixPath(rel_path).parent.parts


def is_post_candidate(rel_path: str, posts_dir: str = "_posts") -> bool:
    """True for a dated post file inside ``posts_dir``; checked before reading."""
    return is_post_path(rel_path, posts_dir) and (
        parse_post_filename(rel_path) is not None
    )


def load_content_entry(
    rel_path: str, text: str, id_field: str = "wordpress_id"
) -> ContentEntry | None:
    """Build a ``ContentEntry`` for a post file, or None if it is ineligible.

    Files whose name does not follow ``YYYY-MM-DD-slug.ext`` have no
    permalink and are ineligible. Missing or malformed front matter is
    treated the same as an absent ``id_field``.
    """
    parts = parse_post_filename(rel_path)
    if parts is None:
        logger.debug("content.skipped", path=rel_path, reason="filename")
        return None
    year, month, day, slug = parts

    try:
        front_matter = parse_front_matter(text)
    except FrontMatterMissingError:
        logger.debug("content.skipped", path=rel_path, reason="no_front_matter")
        front_matter = {}
    except FrontMatterError as e:
        logger.warning(
            "content.front_matter_invalid",
            path=rel_path,
            error=str(e),
        )
        front_matter = {}

    legacy_id = front_matter.get(id_field, "").strip() or None
    return ContentEntry(
        source_path=rel_path,
        year=year,
        month=month,
        day=day,
        slug=slug,
        legacy_id=legacy_id,
    )


def iter_post_entries(
    root: Path, id_field: str = "wordpress_id", posts_dir: str = "_posts"
) -> Iterator[ContentEntry]:
    """Yield a ``ContentEntry`` for every eligible post under ``root``."""
    for rel_path, text in iter_content_files(
        root, include=lambda rel: is_post_candidate(rel, posts_dir)
    ):
        entry = load_content_entry(rel_path, text, id_field)
        if entry is not None:
            yield entry
