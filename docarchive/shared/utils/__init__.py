"""Shared utilities: datetime, generators."""

from docarchive.shared.utils.datetime import ensure_utc, utc_now
from docarchive.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
]
