"""Utility modules."""

from coursemail.utils.datetime_parsing import ensure_utc, rebuild_from_components, resolve_timezone
from coursemail.utils.normalization import split_email_list

__all__ = [
    # Normalization
    "split_email_list",
    # Datetime
    "ensure_utc",
    "rebuild_from_components",
    "resolve_timezone",
]
