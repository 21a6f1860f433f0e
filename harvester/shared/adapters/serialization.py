"""
Provider object -> JSON document conversion.

google-cloud clients hand back three families of objects: proto-plus
messages (GAPIC clients), raw protobuf messages (IAM policies) and
REST-backed resource objects exposing ``to_api_repr`` (BigQuery).
"""
import json
from collections.abc import Mapping
from typing import Any, Dict

import proto
from google.protobuf import json_format
from google.protobuf.message import Message as ProtobufMessage


def as_json_document(value: Any) -> Dict[str, Any]:
    """Return a complete, JSON-safe structural representation of a provider object."""
    if isinstance(value, proto.Message):
        return json_format.MessageToDict(type(value).pb(value))
    if isinstance(value, ProtobufMessage):
        return json_format.MessageToDict(value)
    to_api_repr = getattr(value, "to_api_repr", None)
    if callable(to_api_repr):
        return _json_safe(to_api_repr())
    if isinstance(value, Mapping):
        return _json_safe(dict(value))
    raise TypeError(
        f"Cannot serialize provider object of type {type(value).__name__}"
    )


def _json_safe(document: Dict[str, Any]) -> Dict[str, Any]:
    # Round-trip so nested datetimes/decimals become plain JSON values.
    return json.loads(json.dumps(document, default=str))
