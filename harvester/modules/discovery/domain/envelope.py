"""
Envelope building and versioned classification tagging.
"""
from typing import Any, Dict, Optional, Sequence

from harvester.schemas.inventory import (
    DiscoverySession,
    ResourceEnvelope,
    VersionedEnvelope,
)
from harvester.shared.core.exceptions import PreconditionViolation

# Envelope schema revision stamped by the dispatch layer; plugins never set it.
ENVELOPE_SCHEMA_VERSION = "1.0"


def build_resource(
    resource_id: str,
    project_id: str,
    resource_type: str,
    configuration: Dict[str, Any],
    session: Optional[DiscoverySession] = None,
) -> ResourceEnvelope:
    """
    Build the normalized envelope for one discovered item.

    ``configuration`` is the full serialized provider object. A missing
    resource type is a programming error and raises PreconditionViolation;
    empty ids or a malformed resource type raise pydantic's ValidationError,
    which fails the enclosing discovery pass.
    """
    if not resource_type:
        raise PreconditionViolation("Resource type must not be empty")
    return ResourceEnvelope(
        resource_id=resource_id,
        project_id=project_id,
        resource_type=resource_type,
        configuration=configuration,
        discovery_session_metadata=session,
    )


def add_supplementary(
    envelope: ResourceEnvelope, key: str, value: Any
) -> ResourceEnvelope:
    """Return a new envelope with ``key`` set in its supplementary configuration."""
    if not key:
        raise PreconditionViolation("Supplementary configuration key must not be empty")
    supplementary = dict(envelope.supplementary_configuration)
    supplementary[key] = value
    return envelope.model_copy(update={"supplementary_configuration": supplementary})


def classification(service: str, subtype: str) -> list[str]:
    return [f"{service}:{subtype}"]


def wrap(
    session: DiscoverySession,
    classification_path: Sequence[str],
    envelope: ResourceEnvelope,
) -> VersionedEnvelope:
    """
    Wrap an envelope for dispatch. Pure: identical inputs give equal results.
    """
    path = list(classification_path)
    if not path or any(not segment for segment in path):
        raise PreconditionViolation(
            "classification_path must contain at least one non-empty element",
            details={"classification_path": path},
        )
    return VersionedEnvelope(
        session=session,
        classification_path=path,
        schema_version=ENVELOPE_SCHEMA_VERSION,
        payload=envelope.to_document(),
    )
