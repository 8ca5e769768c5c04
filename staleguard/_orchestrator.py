from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass, field

from staleguard._core._fingerprint import Entities, fingerprint
from staleguard._core._validation import FreshnessVerdict, evaluate_request
from staleguard._core.models import Fingerprint, RenderContext, Response, Template
from staleguard._exceptions import ConfigurationError
from staleguard._utils import format_http_date
from staleguard._views import BaseView, RenderResult

logger = logging.getLogger(__name__)

VALIDATOR_HEADERS = ("etag", "last-modified")

Renderer = t.Callable[[RenderContext], RenderResult]


@dataclass
class OrchestratorOptions:
    layout_formats: list[str] = field(default_factory=lambda: ["html"])
    """Formats that are rendered inside a layout."""


def put_validators(response: Response, validators: Fingerprint) -> None:
    if validators.etag is not None:
        response.headers.put("etag", validators.etag)
    if validators.last_modified is not None:
        response.headers.put("last-modified", format_http_date(validators.last_modified))


def _to_response(result: RenderResult, context: RenderContext) -> Response:
    if isinstance(result, (bytes, str)):
        response = context.response
        response.content = result.encode() if isinstance(result, str) else result
        return response

    if result is not context.response:
        for key in VALIDATOR_HEADERS:
            value = context.response.headers.get_first(key)
            if value is not None and key not in result.headers:
                result.headers.put(key, value)
    return result


def if_stale(context: RenderContext, validators: Fingerprint, render: Renderer) -> Response:
    """
    Attach the validators to the response and render only if the client's copy is stale.

    The ETag and Last-Modified headers are set before the freshness decision,
    so a 304 carries them as well. When the request is fresh, `render` is not
    called and an empty 304 response is returned.
    """
    put_validators(context.response, validators)

    if evaluate_request(context.request, validators) is FreshnessVerdict.FRESH:
        logger.info(
            "Not modified: method=%s url=%s etag=%s",
            context.request.method,
            context.request.url,
            validators.etag,
        )
        response = context.response
        response.status_code = 304
        response.content = b""
        if "content-type" in response.headers:
            del response.headers["content-type"]
        return response

    logger.debug("Rendering stale response: method=%s url=%s", context.request.method, context.request.url)
    return _to_response(render(context), context)


def respond(context: RenderContext, entities: Entities, render: Renderer) -> Response:
    """Compute the validators from `entities` and run `if_stale`."""
    return if_stale(context, fingerprint(entities), render)


def _resolve_layout(
    context: RenderContext,
    assigns: t.Mapping[str, t.Any],
    request_format: str,
    options: OrchestratorOptions,
) -> t.Union[str, t.Literal[False]]:
    if request_format not in options.layout_formats:
        return False

    layout = assigns.get("layout", context.layout)
    if not layout:
        return False
    return Template.coerce(layout).resolve(request_format)


def render_if_stale(
    context: RenderContext,
    template: t.Union[str, Template, None] = None,
    assigns: t.Optional[t.Mapping[str, t.Any]] = None,
    *,
    view: t.Optional[BaseView] = None,
    options: t.Optional[OrchestratorOptions] = None,
) -> Response:
    """
    Render `template` through the bound view unless the client's copy is fresh.

    Args:
        context: The request being handled.
        template: A template name. Without an extension (``"show"``) the
            format comes from ``context.format``; with one (``"show.json"``)
            it is used as is. Defaults to ``context.action``.
        assigns: Values merged into ``context.assigns`` before rendering.
        view: Binds a view to the context before rendering.
        options: Layout configuration.

    Raises:
        ConfigurationError: If no template can be picked, the request format
            is unresolved for a named template, or no view is bound.

    Example:
        ```python
        context = RenderContext(request=request, format="html", view=PostView())
        response = render_if_stale(context, "show", {"entities": [post]})
        ```
    """
    options = options if options is not None else OrchestratorOptions()

    if view is not None:
        context.view = view

    if template is None:
        if context.action is None:
            raise ConfigurationError(
                "cannot render without a template because no action is bound to the request. "
                "Pass the template explicitly"
            )
        template = Template.named(context.action)

    resolved = Template.coerce(template)
    template_name = resolved.resolve(context.format)
    request_format = t.cast(str, resolved.format if resolved.format is not None else context.format)

    bound_view = context.view
    if bound_view is None:
        raise ConfigurationError(
            f"cannot render template {template_name!r} because no view is bound to the request. "
            "Pass `view=` or set `context.view`"
        )

    new_assigns = dict(assigns or {})
    context.assigns = {
        **context.assigns,
        **new_assigns,
        "layout": _resolve_layout(context, new_assigns, request_format, options),
    }

    checks = bound_view.stale_checks(template_name, context.assigns)
    validators = Fingerprint(etag=checks.get("etag"), last_modified=checks.get("last_modified"))

    logger.debug(
        "Resolved template: template=%s view=%s layout=%s",
        template_name,
        type(bound_view).__name__,
        context.assigns["layout"],
    )

    return if_stale(context, validators, lambda ctx: bound_view.render(ctx, template_name))
