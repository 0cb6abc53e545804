"""Utility modules."""

from statuspage.utils.datetime_parsing import ensure_utc
from statuspage.utils.normalization import parse_uuid, slugify

__all__ = [
    "ensure_utc",
    "parse_uuid",
    "slugify",
]
