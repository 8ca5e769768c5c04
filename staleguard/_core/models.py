from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from datetime import datetime
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Optional,
    TypedDict,
    Union,
)

from staleguard._core._headers import Headers
from staleguard._exceptions import ConfigurationError

if TYPE_CHECKING:
    from staleguard._views import BaseView


@dataclass
class Request:
    method: str
    url: str = "/"
    headers: Headers = field(default_factory=lambda: Headers({}))


@dataclass
class Response:
    status_code: int = 200
    headers: Headers = field(default_factory=lambda: Headers({}))
    content: bytes = b""


@dataclass(frozen=True)
class Fingerprint:
    """The pair of cache validators derived for a single response."""

    etag: Optional[str] = None
    last_modified: Optional[datetime] = None


class StaleChecks(TypedDict, total=False):
    """Return type of a view's `stale_checks` hook. Both keys are optional."""

    etag: Optional[str]
    last_modified: Optional[datetime]


@dataclass(frozen=True)
class Template:
    """
    Canonical template identifier.

    A template is either *named*, in which case its format comes from the
    request (``Template.named("show")`` renders ``show.html`` for an HTML
    request), or it carries an explicit format in its file name
    (``Template.file("show.json")``).
    """

    name: str
    format: Optional[str] = None

    @classmethod
    def named(cls, name: str) -> "Template":
        return cls(name=name)

    @classmethod
    def file(cls, filename: str) -> "Template":
        extension = posixpath.splitext(filename)[1]
        if not extension or extension == ".":
            raise ConfigurationError(
                f"cannot render template {filename!r} without format. Use Template.named if the "
                "template format is meant to be set dynamically based on the request format"
            )
        return cls(name=filename, format=extension[1:])

    @classmethod
    def coerce(cls, value: Union[str, "Template"]) -> "Template":
        if isinstance(value, Template):
            return value
        if posixpath.splitext(value)[1]:
            return cls.file(value)
        return cls.named(value)

    def resolve(self, request_format: Optional[str]) -> str:
        """
        Return the full template name, e.g. ``show.html``.

        Raises ConfigurationError when a named template is rendered for a
        request whose format was never resolved.
        """
        if self.format is not None:
            return self.name
        if not request_format:
            raise ConfigurationError(
                f"cannot render template {self.name!r} because the request format is not set. "
                "Negotiate the format (e.g. from the Accept header or a `_format` parameter) "
                "before rendering"
            )
        return f"{self.name}.{request_format}"


@dataclass
class RenderContext:
    """
    Everything the orchestrator knows about the request being handled.

    ``response`` is the in-progress response; validator headers are written to
    it before the freshness decision is made.
    """

    request: Request
    response: Response = field(default_factory=Response)
    assigns: Dict[str, Any] = field(default_factory=dict)
    format: Optional[str] = None
    action: Optional[str] = None
    view: Optional["BaseView"] = None
    layout: Optional[str] = None
