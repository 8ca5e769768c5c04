from __future__ import annotations

from typing import (
    Any,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Union,
)


def unquote(value: str) -> Optional[str]:
    """
    Return the content of `value` if it is exactly one quoted-string, else None.

    Backslash escapes are resolved (``\\"`` becomes ``"``).

    Examples:
        >>> unquote('"W/ abc"')
        'W/ abc'
        >>> unquote('W/"abc"') is None
        True
        >>> unquote('"abc" trailing') is None
        True
    """
    if len(value) < 2 or value[0] != '"':
        return None

    buf: list[str] = []
    i = 1
    while i < len(value):
        c = value[i]
        if c == "\\" and i + 1 < len(value):
            buf.append(value[i + 1])
            i += 2
        elif c == '"':
            return "".join(buf) if i == len(value) - 1 else None
        else:
            buf.append(c)
            i += 1
    return None


def _normalize_tag(raw: str) -> Optional[str]:
    tag = raw.strip(" \t")
    if not tag:
        return None
    # Only a fully quoted value is unwrapped, `W/"x"` style tags stay as sent.
    unquoted = unquote(tag)
    return unquoted if unquoted is not None else tag


def parse_entity_tags(value: str | None) -> List[str]:
    """
    Parse an If-None-Match header value into a list of entity tags.

    The value is split on commas that are not inside a quoted string.
    Surrounding whitespace is dropped, and a tag that is entirely quoted
    is unquoted. Empty elements are skipped.

    Examples:
        >>> parse_entity_tags('"W/ abc", xyz')
        ['W/ abc', 'xyz']
        >>> parse_entity_tags("*")
        ['*']
        >>> parse_entity_tags('"a,b" , ,c')
        ['a,b', 'c']
    """
    if not value:
        return []

    tags: List[str] = []
    start = 0
    in_quotes = False
    i = 0
    length = len(value)

    while i < length:
        c = value[i]
        if in_quotes and c == "\\":
            i += 2
            continue
        if c == '"':
            in_quotes = not in_quotes
        elif c == "," and not in_quotes:
            tag = _normalize_tag(value[start:i])
            if tag is not None:
                tags.append(tag)
            start = i + 1
        i += 1

    tag = _normalize_tag(value[start:])
    if tag is not None:
        tags.append(tag)
    return tags


class Headers(MutableMapping[str, str]):
    def __init__(self, headers: Mapping[str, Union[str, List[str]]] | None = None) -> None:
        self._headers = {k.lower(): ([v] if isinstance(v, str) else v[:]) for k, v in (headers or {}).items()}

    def get_list(self, key: str) -> Optional[List[str]]:
        return self._headers.get(key.lower(), None)

    def get_first(self, key: str) -> Optional[str]:
        values = self._headers.get(key.lower())
        return values[0] if values else None

    def put(self, key: str, value: str) -> None:
        """Replace every value of `key` with a single value."""
        self._headers[key.lower()] = [value]

    def __getitem__(self, key: str) -> str:
        return ", ".join(self._headers[key.lower()])

    def __setitem__(self, key: str, value: str) -> None:
        self._headers.setdefault(key.lower(), []).append(value)

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return repr(self._headers)

    def __str__(self) -> str:
        return str(self._headers)

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self._headers == other_headers._headers  # type: ignore
