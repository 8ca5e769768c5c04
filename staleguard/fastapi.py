from __future__ import annotations

import inspect
import logging
import typing as t

from staleguard._core._fingerprint import Entities
from staleguard._core._headers import Headers
from staleguard._core.models import RenderContext, Request
from staleguard._orchestrator import VALIDATOR_HEADERS, respond

try:
    import fastapi
except ImportError as e:
    raise ImportError(
        "fastapi is required to use staleguard.fastapi module. "
        "Please install staleguard with the 'fastapi' extra, "
        "e.g., 'pip install staleguard[fastapi]'."
    ) from e

logger = logging.getLogger(__name__)

_RenderResult = t.Union[fastapi.Response, bytes, str]
_Render = t.Callable[[], t.Union[_RenderResult, t.Awaitable[_RenderResult]]]


def _to_internal_request(request: fastapi.Request) -> Request:
    headers: dict[str, list[str]] = {}
    for key, value in request.headers.items():
        headers.setdefault(key, []).append(value)

    return Request(method=request.method, url=str(request.url), headers=Headers(headers))


async def render_if_stale(request: fastapi.Request, entities: Entities, render: _Render) -> fastapi.Response:
    """
    Answer a FastAPI request with 304 Not Modified when the client's copy of
    `entities` is current, otherwise call `render`.

    `render` takes no arguments and may be sync or async. It can return a
    `fastapi.Response`, or bytes/str that are wrapped in a 200 response.
    ETag and Last-Modified are added to whichever response is returned.

    Example:
        ```python
        from staleguard.fastapi import render_if_stale

        @app.get("/posts/{post_id}")
        async def show_post(post_id: int, request: fastapi.Request):
            post = await load_post(post_id)
            return await render_if_stale(request, post, lambda: JSONResponse(post.to_dict()))
        ```
    """
    context = RenderContext(request=_to_internal_request(request))

    # The core renderer only marks the request as stale; rendering itself
    # happens below so that async renderers can be awaited.
    outcome = respond(context, entities, lambda ctx: ctx.response)
    validators = {key: outcome.headers[key] for key in VALIDATOR_HEADERS if key in outcome.headers}

    if outcome.status_code == 304:
        return fastapi.Response(status_code=304, headers=validators)

    result = render()
    if inspect.isawaitable(result):
        result = await result

    if isinstance(result, (bytes, str)):
        result = fastapi.Response(content=result)

    for key, value in validators.items():
        if key not in result.headers:
            result.headers[key] = value

    logger.debug("Rendered response: status=%d url=%s", result.status_code, request.url)
    return result
