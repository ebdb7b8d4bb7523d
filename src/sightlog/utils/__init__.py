"""Utility functions for SightLog."""

from sightlog.utils.dates import (
    form_max_date,
    from_now,
    parse_post_timestamp,
    post_timestamp,
)
from sightlog.utils.grouping import MISSING, bucket_key, group_by_key

__all__ = [
    # Dates
    "form_max_date",
    "from_now",
    "parse_post_timestamp",
    "post_timestamp",
    # Grouping
    "MISSING",
    "bucket_key",
    "group_by_key",
]
