"""Data normalization utilities."""

import re
import unicodedata
from uuid import UUID


_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_SLUG_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(value: str) -> str:
    """
    Build a URL slug from a display name.

    "Acme Corp." -> "acme-corp"
    """
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = _NON_SLUG_CHARS.sub("", value.lower()).strip()
    return _SLUG_SEPARATORS.sub("-", value).strip("-")


def parse_uuid(value: str) -> UUID | None:
    """Parse a UUID string; anything unparseable yields None."""
    try:
        return UUID(str(value))
    except ValueError:
        return None
