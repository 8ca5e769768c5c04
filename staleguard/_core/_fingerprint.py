from __future__ import annotations

import hashlib
import logging
import uuid
from datetime import datetime
from typing import Any, Iterable, List, Optional, Protocol, Tuple, Union, cast

import msgpack

from staleguard._core.models import Fingerprint
from staleguard._utils import to_unix, to_utc, wrap_list

logger = logging.getLogger("staleguard.core.fingerprint")

WEAK_PREFIX = "W/ "


class Entity(Protocol):
    id: Any
    updated_at: datetime


Entities = Union[None, Entity, Iterable[Entity]]


def _type_discriminator(entity: Any) -> str:
    cls = type(entity)
    return f"{cls.__module__}.{cls.__qualname__}"


def _updated_at(entity: Any) -> datetime:
    updated_at = entity.updated_at
    if not isinstance(updated_at, datetime):
        raise TypeError(
            f"{_type_discriminator(entity)}.updated_at must be a datetime, got {type(updated_at).__name__}"
        )
    return updated_at


def _encode_identity(value: Any) -> Any:
    # msgpack `default` hook for identities it cannot pack natively
    if isinstance(value, uuid.UUID):
        return str(value)
    raise TypeError(f"cannot encode entity identity of type {type(value).__name__}")


def entity_list(entities: Entities) -> List[Any]:
    """
    Collect the entities into a list, once.

    A single entity is recognized by its ``updated_at`` attribute, so an
    entity that happens to be iterable is not unpacked. Any other iterable,
    including generators and query results, is materialized in order.
    """
    if entities is not None and hasattr(entities, "updated_at"):
        return [entities]
    return wrap_list(entities)


def entity_triples(entities: Entities) -> List[Tuple[str, Any, int]]:
    """
    Build the ``(type, identity, unix seconds)`` triple of every entity, in
    the order the entities were given.
    """
    return [
        (_type_discriminator(entity), entity.id, to_unix(_updated_at(entity)))
        for entity in entity_list(entities)
    ]


def compute_entity_tag(entities: Entities) -> Optional[str]:
    """
    Derive a weak entity tag from one or more entities.

    The tag is the md5 of the msgpack-encoded triple list, hex encoded and
    prefixed with ``W/ ``. The digest is a change signature, not a security
    boundary. Reordering the entities changes the tag; sub-second differences
    in ``updated_at`` and timezone representation do not.

    Identities must be msgpack-native values or UUIDs, anything else raises
    TypeError.

    Returns None for None or an empty sequence.

    Examples:
        >>> compute_entity_tag(None) is None
        True
        >>> compute_entity_tag([]) is None
        True
    """
    triples = entity_triples(entities)
    if not triples:
        return None

    packed = cast(bytes, msgpack.packb([list(triple) for triple in triples], default=_encode_identity))
    digest = hashlib.md5(packed, usedforsecurity=False).hexdigest()
    return WEAK_PREFIX + digest


def compute_last_modified(entities: Entities) -> Optional[datetime]:
    """
    Return the latest ``updated_at`` among the entities as an aware UTC
    datetime truncated to the second, or None when there are no entities.
    """
    items = entity_list(entities)
    if not items:
        return None
    return max(to_utc(_updated_at(entity)) for entity in items)


def fingerprint(entities: Entities) -> Fingerprint:
    # Materialized once so that generators are not exhausted by the first pass.
    items = entity_list(entities)
    result = Fingerprint(
        etag=compute_entity_tag(items),
        last_modified=compute_last_modified(items),
    )
    logger.debug(
        "Computed fingerprint: entities=%d etag=%s last_modified=%s",
        len(items),
        result.etag,
        result.last_modified.isoformat() if result.last_modified else None,
    )
    return result
