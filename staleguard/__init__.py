from staleguard._core import (
    ConditionalHeaders as ConditionalHeaders,
    Entity as Entity,
    Fingerprint as Fingerprint,
    FreshnessVerdict as FreshnessVerdict,
    Headers as Headers,
    RenderContext as RenderContext,
    Request as Request,
    Response as Response,
    StaleChecks as StaleChecks,
    Template as Template,
    compute_entity_tag as compute_entity_tag,
    compute_last_modified as compute_last_modified,
    evaluate_freshness as evaluate_freshness,
    evaluate_request as evaluate_request,
    fingerprint as fingerprint,
    parse_entity_tags as parse_entity_tags,
)
from staleguard._exceptions import ConfigurationError as ConfigurationError, StaleguardError as StaleguardError
from staleguard._orchestrator import (
    OrchestratorOptions as OrchestratorOptions,
    if_stale as if_stale,
    render_if_stale as render_if_stale,
    respond as respond,
)
from staleguard._views import BaseView as BaseView, EntityStaleChecks as EntityStaleChecks, StaleChecker as StaleChecker

__all__ = (
    ## Fingerprints
    "Entity",
    "Fingerprint",
    "compute_entity_tag",
    "compute_last_modified",
    "fingerprint",
    ## Validation
    "ConditionalHeaders",
    "FreshnessVerdict",
    "evaluate_freshness",
    "evaluate_request",
    ## Orchestration
    "OrchestratorOptions",
    "if_stale",
    "respond",
    "render_if_stale",
    ## Views
    "StaleChecker",
    "BaseView",
    "EntityStaleChecks",
    ## Models
    "RenderContext",
    "Request",
    "Response",
    "StaleChecks",
    "Template",
    ## Headers
    "Headers",
    "parse_entity_tags",
    ## Errors
    "StaleguardError",
    "ConfigurationError",
)
