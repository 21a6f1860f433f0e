from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence
import structlog

from harvester.modules.discovery.domain.envelope import (
    add_supplementary,
    build_resource,
    classification,
    wrap,
)
from harvester.modules.discovery.domain.ports import Emitter
from harvester.schemas.inventory import DiscoverySession, ResourceEnvelope
from harvester.shared.adapters.gcp import GCPClientFactory
from harvester.shared.adapters.serialization import as_json_document
from harvester.shared.core.error_reporting import ErrorReporter
from harvester.shared.core.exceptions import ListingError, PreconditionViolation
from harvester.shared.core.ops_metrics import DISCOVERY_ENVELOPES_EMITTED

logger = structlog.get_logger()

Serializer = Callable[[Any], Dict[str, Any]]


@dataclass(frozen=True)
class ResourceKind:
    """
    One listing + mapping pass of a plugin.

    ``list_items(client, project_id)`` returns the provider's lazy iterator;
    ``supplements`` maps a supplementary field name to ``fetch(client, item)``.
    """
    resource_type: str
    subtype: str
    list_items: Callable[[Any, str], Iterable[Any]]
    resource_id: Callable[[Any], str]
    supplements: Mapping[str, Callable[[Any, Any], Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.resource_type or not self.subtype:
            raise PreconditionViolation(
                "Resource kind needs a resource type and a subtype",
                details={"resource_type": self.resource_type, "subtype": self.subtype},
            )


class DiscoveryPlugin(ABC):
    """
    Abstract base class for per-service discovery plugins.
    Each plugin enumerates the resources of one cloud service for a project.
    """

    def __init__(
        self,
        clients: GCPClientFactory,
        reporter: ErrorReporter,
        serializer: Optional[Serializer] = None,
    ):
        self.clients = clients
        self.reporter = reporter
        self.serializer = serializer or as_json_document

    @property
    @abstractmethod
    def service(self) -> str:
        """
        Stable service name (e.g., 'bigQuery').
        Used as registry key and as the classification path prefix.
        """
        raise NotImplementedError

    @abstractmethod
    def discover(
        self, project_id: str, session: DiscoverySession, emitter: Emitter
    ) -> None:
        """
        Enumerate every resource of this service and emit one envelope per item.

        Provider failures are reported, never raised.
        """
        raise NotImplementedError

    def _discover_kinds(
        self,
        client_name: str,
        kinds: Sequence[ResourceKind],
        project_id: str,
        session: DiscoverySession,
        emitter: Emitter,
    ) -> None:
        """Run every kind inside one shared client scope."""
        try:
            with self.clients.client(client_name, project_id) as client:
                for kind in kinds:
                    self._discover_kind(client, kind, project_id, session, emitter)
        except PreconditionViolation:
            raise
        except Exception as exc:
            # Only opening the client can fail here; each kind isolates its own listing.
            for kind in kinds:
                self.reporter.report(kind.resource_type, exc)

    def _discover_kind(
        self,
        client: Any,
        kind: ResourceKind,
        project_id: str,
        session: DiscoverySession,
        emitter: Emitter,
    ) -> int:
        emitted = 0
        try:
            for item in kind.list_items(client, project_id):
                envelope = build_resource(
                    resource_id=kind.resource_id(item),
                    project_id=project_id,
                    resource_type=kind.resource_type,
                    configuration=self.serializer(item),
                    session=session,
                )
                for key, fetch in kind.supplements.items():
                    envelope = self._supplement(client, item, envelope, key, fetch)
                self._emit(emitter, session, kind, envelope)
                emitted += 1
        except PreconditionViolation:
            raise
        except Exception as exc:
            error = ListingError(
                f"{kind.resource_type} listing failed after {emitted} item(s): {exc}",
                details={"resource_type": kind.resource_type, "emitted": emitted},
            )
            error.__cause__ = exc
            self.reporter.report(kind.resource_type, error)
            return emitted

        logger.info(
            "discovery_kind_complete",
            service=self.service,
            resource_type=kind.resource_type,
            emitted=emitted,
        )
        return emitted

    def _supplement(
        self,
        client: Any,
        item: Any,
        envelope: ResourceEnvelope,
        key: str,
        fetch: Callable[[Any, Any], Any],
    ) -> ResourceEnvelope:
        """Attach one supplementary field; a failed lookup is reported and skipped."""
        try:
            value = self.serializer(fetch(client, item))
        except Exception as exc:
            logger.warning(
                "discovery_supplement_failed",
                resource_type=envelope.resource_type,
                resource_id=envelope.resource_id,
                field=key,
            )
            self.reporter.report(envelope.resource_type, exc)
            return envelope
        return add_supplementary(envelope, key, value)

    def _emit(
        self,
        emitter: Emitter,
        session: DiscoverySession,
        kind: ResourceKind,
        envelope: ResourceEnvelope,
    ) -> None:
        emitter.emit(wrap(session, classification(self.service, kind.subtype), envelope))
        DISCOVERY_ENVELOPES_EMITTED.labels(
            service=self.service, resource_type=kind.resource_type
        ).inc()
