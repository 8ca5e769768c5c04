from staleguard._core._fingerprint import (
    Entity as Entity,
    compute_entity_tag as compute_entity_tag,
    compute_last_modified as compute_last_modified,
    fingerprint as fingerprint,
)
from staleguard._core._headers import Headers as Headers, parse_entity_tags as parse_entity_tags
from staleguard._core._validation import (
    ConditionalHeaders as ConditionalHeaders,
    FreshnessVerdict as FreshnessVerdict,
    evaluate_freshness as evaluate_freshness,
    evaluate_request as evaluate_request,
)
from staleguard._core.models import (
    Fingerprint as Fingerprint,
    RenderContext as RenderContext,
    Request as Request,
    Response as Response,
    StaleChecks as StaleChecks,
    Template as Template,
)

__all__ = (
    ## Fingerprints
    "Entity",
    "compute_entity_tag",
    "compute_last_modified",
    "fingerprint",
    ## Validation
    "ConditionalHeaders",
    "FreshnessVerdict",
    "evaluate_freshness",
    "evaluate_request",
    ## Models
    "Fingerprint",
    "RenderContext",
    "Request",
    "Response",
    "StaleChecks",
    "Template",
    ## Headers
    "Headers",
    "parse_entity_tags",
)
