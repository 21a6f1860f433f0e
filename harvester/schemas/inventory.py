"""
Resource Inventory Schemas

Provides the provider-agnostic envelope every discovery plugin produces,
the scan session shared by all envelopes of a run, and the versioned
wrapper handed to the emitter.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from harvester.shared.core.config import get_settings

RESOURCE_TYPE_PATTERN = re.compile(r"^[A-Za-z0-9]+::[A-Za-z0-9]+::[A-Za-z0-9]+$")


class _Document(BaseModel):
    """camelCase JSON document form, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class DiscoverySession(_Document):
    """Read-only metadata describing one discovery run."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source_version: str = Field(default_factory=lambda: get_settings().VERSION)


class ResourceEnvelope(_Document):
    """Normalized representation of one discovered cloud resource."""
    resource_id: str = Field(min_length=1)
    project_id: str = Field(min_length=1)
    resource_type: str = Field(min_length=1)
    configuration: Dict[str, Any] = Field(default_factory=dict)
    supplementary_configuration: Dict[str, Any] = Field(default_factory=dict)
    discovery_session_metadata: Optional[DiscoverySession] = None

    @field_validator("resource_type")
    @classmethod
    def _validate_resource_type(cls, value: str) -> str:
        if not RESOURCE_TYPE_PATTERN.match(value):
            raise ValueError(
                f"resource_type '{value}' must look like '<Provider>::<Service>::<Kind>'"
            )
        return value

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "ResourceEnvelope":
        return cls.model_validate(document)


class VersionedEnvelope(_Document):
    """Dispatchable wrapper: classification path + schema version + serialized envelope."""
    session: DiscoverySession
    classification_path: List[str] = Field(min_length=1)
    schema_version: str
    payload: Dict[str, Any]
