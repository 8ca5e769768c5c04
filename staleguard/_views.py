from __future__ import annotations

import abc
import typing as t

from staleguard._core._fingerprint import fingerprint
from staleguard._core.models import RenderContext, Response, StaleChecks

RenderResult = t.Union[Response, bytes, str]


class StaleChecker(abc.ABC):
    @abc.abstractmethod
    def stale_checks(self, template: str, assigns: t.Mapping[str, t.Any]) -> StaleChecks:
        """
        Return the validators for `template` rendered with `assigns`.

        Either key may be missing or None, in which case that validator is
        neither sent nor checked.
        """


class BaseView(StaleChecker):
    """
    The render collaborator.

    `render` is only called once the request has been judged stale.
    """

    @abc.abstractmethod
    def render(self, context: RenderContext, template: str) -> RenderResult:
        pass


class EntityStaleChecks(StaleChecker):
    """
    Derive validators from the entities stored under the `entities` assign.

    Example:
        ```python
        class PostView(EntityStaleChecks, BaseView):
            def render(self, context, template):
                return render_post(context.assigns["entities"])
        ```
    """

    entities_assign: str = "entities"

    def stale_checks(self, template: str, assigns: t.Mapping[str, t.Any]) -> StaleChecks:
        result = fingerprint(assigns.get(self.entities_assign))
        return {"etag": result.etag, "last_modified": result.last_modified}
