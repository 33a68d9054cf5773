"""Pydantic schemas for redirect configuration, content entries and responses."""

import re
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, computed_field, field_validator

from services.permalink_service import permalink_from_parts

# Whitespace and ASCII control characters are never valid inside a URL
_invalid_url_chars_re = re.compile(r"[\x00-\x20\x7f]")


class RedirectRule(BaseModel):
    """A prefix-to-destination redirect rule.

    ``prefix`` is stored without leading/trailing slashes; an empty prefix
    matches every path. An empty ``destination`` means the site root.
    """

    model_config = ConfigDict(frozen=True)

    prefix: str = ""
    destination: str = ""

    @field_validator("prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        return v.strip().strip("/")

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        v = v.strip()
        if not v:
            return v
        if _invalid_url_chars_re.search(v):
            raise ValueError(f"Destination {v!r} contains whitespace or control chars")
        try:
            parts = urlsplit(v)
            # Accessing .port validates it is numeric and in range
            parts.port
        except ValueError as e:
            raise ValueError(f"Destination {v!r} is not a valid URL: {e}") from e
        if parts.scheme and parts.scheme not in ("http", "https"):
            raise ValueError(f"Destination {v!r} must use http or https")
        if parts.scheme and not parts.netloc:
            raise ValueError(f"Destination {v!r} is missing a host")
        return v


class ContentEntry(BaseModel):
    """One post file that may be reachable through a legacy short link."""

    model_config = ConfigDict(frozen=True)

    source_path: str
    year: str
    month: str
    day: str
    slug: str
    legacy_id: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def permalink(self) -> str:
        return permalink_from_parts(self.year, self.month, self.day, self.slug)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    rules: int = 0
    legacy_ids: int = 0
