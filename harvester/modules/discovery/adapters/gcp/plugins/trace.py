from harvester.modules.discovery.domain.plugin import DiscoveryPlugin, ResourceKind
from harvester.modules.discovery.domain.ports import Emitter
from harvester.schemas.inventory import DiscoverySession
from harvester.shared.adapters.gcp import TRACE

TRACES = ResourceKind(
    resource_type="GCP::Trace::Trace",
    subtype="trace",
    list_items=lambda client, project_id: client.list_traces(project_id=project_id),
    resource_id=lambda trace: trace.trace_id,
)


class TraceDiscovery(DiscoveryPlugin):
    """Discover Cloud Trace traces."""

    @property
    def service(self) -> str:
        return "trace"

    def discover(
        self, project_id: str, session: DiscoverySession, emitter: Emitter
    ) -> None:
        self._discover_kinds(TRACE, [TRACES], project_id, session, emitter)
