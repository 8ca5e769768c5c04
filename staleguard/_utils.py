from __future__ import annotations

import calendar
import typing as tp
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from email.utils import formatdate, parsedate_tz

HEADERS_ENCODING = "iso-8859-1"

# Unix value of `datetime.min`, used as the instant of an unparsable date.
EARLIEST_TIMESTAMP = calendar.timegm(datetime.min.timetuple())

T = tp.TypeVar("T")


def parse_date(date: str) -> tp.Optional[int]:
    """
    Parse an HTTP date into a unix timestamp.

    Accepts the RFC 1123 format as well as the obsolete RFC 850 and asctime
    formats. Returns None when the value cannot be parsed.

    Examples:
        >>> parse_date("Thu, 01 Jan 2026 00:00:00 GMT")
        1767225600
        >>> parse_date("yesterday") is None
        True
    """
    parsed = parsedate_tz(date)
    if parsed is None:
        return None
    try:
        timestamp = calendar.timegm(parsed[:6])
    except (ValueError, OverflowError):
        return None
    return timestamp - (parsed[9] or 0)


def to_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to an aware UTC datetime truncated to whole seconds.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=0)


def to_unix(value: datetime) -> int:
    return calendar.timegm(to_utc(value).utctimetuple())


def format_http_date(value: datetime) -> str:
    """
    Format a datetime as an RFC 1123 date, as required for HTTP/1.1 headers.

    Example output: 'Wed, 01 Jan 2020 00:00:00 GMT'
    """
    return formatdate(timeval=to_unix(value), localtime=False, usegmt=True)


def wrap_list(value: tp.Union[None, T, tp.Iterable[T]]) -> tp.List[T]:
    """
    Wrap a single value into a list, collecting any other iterable and mapping None to empty.

    Strings, bytes and mappings are treated as single values.
    """
    if value is None:
        return []
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping)):
        return list(value)
    return [tp.cast(T, value)]
