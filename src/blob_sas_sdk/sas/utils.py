"""
Utility functions for SAS generation

This module provides timestamp formatting, URL encoding helpers and query
string serialization used when assembling shared access signatures.
"""

import calendar
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional
from urllib.parse import quote, unquote, urlencode, urlsplit, urlunsplit


ISO8601_ZULU_FORMAT = '%Y-%m-%dT%H:%M:%SZ'


def to_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to UTC.

    Naive datetimes are taken to already be in UTC.

    Args:
        value: Datetime to normalize

    Returns:
        datetime: Timezone-aware UTC datetime
    """
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_iso8601_zulu(value: Optional[datetime]) -> Optional[str]:
    """
    Format a datetime as ISO 8601 UTC with second precision.

    Args:
        value: Datetime to format (None passes through)

    Returns:
        str: Timestamp such as "2024-01-02T03:04:05Z", or None
    """
    if value is None:
        return None
    return to_utc(value).strftime(ISO8601_ZULU_FORMAT)


def to_unix_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Render a datetime as whole seconds since the Unix epoch.

    Sub-second precision is dropped.
    """
    if value is None:
        return None
    return str(calendar.timegm(to_utc(value).utctimetuple()))


def url_decode(value: Optional[str]) -> str:
    """
    Percent-decode a value, rendering None as an empty string.

    Args:
        value: Possibly percent-encoded value

    Returns:
        str: Decoded value
    """
    if value is None:
        return ""
    return unquote(value)


def build_query(params: Mapping[str, Optional[str]]) -> str:
    """
    Serialize parameters into a query string, preserving order.

    Parameters whose value is None or empty are omitted entirely.

    Args:
        params: Ordered mapping of query keys to values

    Returns:
        str: Percent-encoded query string without leading "?"
    """
    present = filter_empty(params)
    return urlencode(present, quote_via=quote)


def filter_empty(params: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """Drop entries whose value is None or an empty string."""
    return {key: value for key, value in params.items() if value}


def append_sas_to_url(url: str, sas: str) -> str:
    """
    Attach a SAS query string to a resource URL.

    Existing query parameters on the URL are kept.

    Args:
        url: Container or blob URL
        sas: SAS query string, with or without a leading "?"

    Returns:
        str: URL carrying the SAS
    """
    sas = sas.lstrip('?')
    if not sas:
        return url

    parts = urlsplit(url)
    query = f"{parts.query}&{sas}" if parts.query else sas
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
