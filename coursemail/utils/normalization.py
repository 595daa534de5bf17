"""Data normalization utilities for consistent data quality."""

import re

_WHITESPACE_RE = re.compile(r"\s+")


def split_email_list(value: str | None) -> list[str]:
    """
    Split a comma-separated address list.

    All whitespace is removed before splitting; empty tokens are dropped.
    """
    if not value:
        return []
    cleansed = _WHITESPACE_RE.sub("", value)
    return [token for token in cleansed.split(",") if token]
