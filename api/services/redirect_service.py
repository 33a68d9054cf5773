"""Prefix redirect resolution service.

Computes the ``Location`` for a request under a configured prefix by
resolving the path remainder against the destination base as a relative
reference, the same way a browser resolves a relative link.
"""

from __future__ import annotations

import re
from urllib.parse import quote, unquote, urljoin, urlsplit

from schemas import RedirectRule

# RFC 3986 pchar delimiters plus "/". Paths arrive percent-encoded, so
# existing escapes are kept while "?", "#" and spaces are escaped.
PATH_SAFE_CHARS = "/:@!$&'()*+,;=%"

# Segment boundaries in a percent-encoded path, escaped slashes included
_segment_break_re = re.compile(r"/|%2[fF]")


class RedirectConfigError(Exception):
    """Raised at startup when redirect configuration cannot be used."""


def normalize_prefix(prefix: str) -> str:
    """Strip surrounding slashes; the empty string matches every path."""
    return prefix.strip().strip("/")


def build_rule(prefix: str, destination: str) -> RedirectRule:
    """Validate and construct a rule. Raises ``pydantic.ValidationError``."""
    return RedirectRule(prefix=prefix, destination=destination)


def strip_prefix(prefix: str, path: str) -> str:
    """Return the remainder of ``path`` after ``/prefix``.

    The remainder is either empty or starts with ``/``. Paths that are not
    under the prefix are returned unchanged.
    """
    prefix = normalize_prefix(prefix)
    if not prefix:
        return path
    base = f"/{prefix}"
    if path == base or path.startswith(f"{base}/"):
        return path[len(base) :]
    return path


def strip_encoded_prefix(prefix: str, path: str) -> str:
    """Like ``strip_prefix`` for a percent-encoded ``path``.

    Routes match on the decoded path, so the prefix is compared with the
    decoded form of each leading run of segments. The remainder keeps the
    request's own encoding.
    """
    prefix = normalize_prefix(prefix)
    if not prefix:
        return path
    base = f"/{prefix}"
    cuts = [m.start() for m in _segment_break_re.finditer(path, 1)]
    for end in [*cuts, len(path)]:
        if unquote(path[:end]) == base:
            return path[end:]
    return path


def _relative_reference(remainder: str, query: str) -> str:
    ref = quote(remainder.lstrip("/"), safe=PATH_SAFE_CHARS)
    # A leading "name:" segment would otherwise parse as a URL scheme
    if ":" in ref.split("/", 1)[0]:
        ref = f"./{ref}"
    if query:
        ref = f"{ref}?{query}"
    return ref


def compose_location(prefix: str, destination: str, url: str) -> str:
    """Compute the redirect target for ``url`` under ``prefix``.

    ``url`` is in wire form (percent-encoded path). Only its path and
    query are used; scheme and host of an absolute request URL are
    ignored. An empty ``destination`` redirects to the site root.

    >>> compose_location("x", "http://example/a/", "/x/y?a=b")
    'http://example/a/y?a=b'
    >>> compose_location("x", "http://example/a", "/x/y")
    'http://example/y'
    """
    parts = urlsplit(url)
    remainder = strip_encoded_prefix(prefix, parts.path or "/")
    base = destination or "/"
    return urljoin(base, _relative_reference(remainder, parts.query))


def resolve_rule(rule: RedirectRule, url: str) -> str:
    return compose_location(rule.prefix, rule.destination, url)


def match_rule(rules: list[RedirectRule], path: str) -> RedirectRule | None:
    """Pick the rule whose prefix owns ``path``; the longest prefix wins."""
    for rule in sorted(rules, key=lambda r: len(r.prefix), reverse=True):
        if not rule.prefix:
            return rule
        base = f"/{rule.prefix}"
        if path == base or path.startswith(f"{base}/"):
            return rule
    return None
