from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from staleguard._core._headers import Headers, parse_entity_tags
from staleguard._core.models import Fingerprint, Request
from staleguard._utils import EARLIEST_TIMESTAMP, parse_date, to_unix

logger = logging.getLogger("staleguard.core.validation")

SAFE_METHODS = frozenset(["GET", "HEAD"])


class FreshnessVerdict(enum.Enum):
    FRESH = "fresh"
    """The client's cached copy is still valid, respond with 304."""

    STALE = "stale"
    """The representation must be rendered."""


@dataclass(frozen=True)
class ConditionalHeaders:
    if_none_match: Optional[str] = None
    if_modified_since: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Headers) -> "ConditionalHeaders":
        # Only the first occurrence of each header is considered.
        return cls(
            if_none_match=headers.get_first("if-none-match"),
            if_modified_since=headers.get_first("if-modified-since"),
        )


def modified_since(header: Optional[str], last_modified: Optional[datetime]) -> bool:
    """
    Report whether the resource changed after the If-Modified-Since date.

    Contributes no signal (False) unless both the header and a last-modified
    value are available. An unparsable header is read as the earliest
    representable instant, so it can never prove the resource unchanged.
    """
    if header is None or last_modified is None:
        return False

    since = parse_date(header)
    if since is None:
        logger.debug("Could not parse If-Modified-Since header %r, treating the resource as modified", header)
        since = EARLIEST_TIMESTAMP
    return to_unix(last_modified) > since


def none_match(header: Optional[str], etag: Optional[str]) -> bool:
    """
    Report whether none of the If-None-Match tags matches the current entity tag.

    Contributes no signal (False) unless both the header and an entity tag
    are available. The wildcard ``*`` matches any entity tag.
    """
    if header is None or etag is None:
        return False

    tags = parse_entity_tags(header)
    return etag not in tags and "*" not in tags


def evaluate_freshness(
    method: str,
    if_none_match: Optional[str],
    if_modified_since: Optional[str],
    etag: Optional[str],
    last_modified: Optional[datetime],
) -> FreshnessVerdict:
    """
    Decide whether the client's cached representation is still valid.

    Only GET and HEAD requests are ever considered fresh. A request that
    carries neither If-None-Match nor If-Modified-Since is stale.
    Otherwise the representation is stale if either check reports a change.

    Note:
        The two checks are combined with OR. RFC 9110 gives If-None-Match
        precedence over If-Modified-Since; that precedence is not applied here,
        both validators must agree before a 304 is produced.

    Examples:
        >>> evaluate_freshness("GET", "abc", None, "abc", None)
        <FreshnessVerdict.FRESH: 'fresh'>
        >>> evaluate_freshness("POST", "abc", None, "abc", None)
        <FreshnessVerdict.STALE: 'stale'>
    """
    if method.upper() not in SAFE_METHODS:
        logger.debug("Method %s is not safe, the response is rendered unconditionally", method)
        return FreshnessVerdict.STALE

    if if_none_match is None and if_modified_since is None:
        logger.debug("Request is not conditional")
        return FreshnessVerdict.STALE

    changed_since = modified_since(if_modified_since, last_modified)
    tag_changed = none_match(if_none_match, etag)

    if changed_since or tag_changed:
        logger.debug(
            "Representation changed: modified_since=%s none_match=%s",
            changed_since,
            tag_changed,
        )
        return FreshnessVerdict.STALE

    logger.debug("Representation not modified")
    return FreshnessVerdict.FRESH


def evaluate_request(request: Request, fingerprint: Fingerprint) -> FreshnessVerdict:
    conditional = ConditionalHeaders.from_headers(request.headers)
    return evaluate_freshness(
        request.method,
        conditional.if_none_match,
        conditional.if_modified_since,
        fingerprint.etag,
        fingerprint.last_modified,
    )
