"""
Cloud Logging discovery.

Log metrics come from the metrics service; sinks, buckets and exclusions
share a single config service client but are listed and reported
independently, so one failing sub-kind does not hide the others.
"""
from harvester.modules.discovery.domain.plugin import DiscoveryPlugin, ResourceKind
from harvester.modules.discovery.domain.ports import Emitter
from harvester.schemas.inventory import DiscoverySession
from harvester.shared.adapters.gcp import LOGGING_CONFIG, LOGGING_METRICS

METRICS = ResourceKind(
    resource_type="GCP::Logging::Metric",
    subtype="metric",
    list_items=lambda client, project_id: client.list_log_metrics(
        parent=f"projects/{project_id}"
    ),
    resource_id=lambda metric: metric.name,
)

SINKS = ResourceKind(
    resource_type="GCP::Logging::Sink",
    subtype="sink",
    list_items=lambda client, project_id: client.list_sinks(
        parent=f"projects/{project_id}"
    ),
    resource_id=lambda sink: sink.name,
)

BUCKETS = ResourceKind(
    resource_type="GCP::Logging::Bucket",
    subtype="bucket",
    list_items=lambda client, project_id: client.list_buckets(
        parent=f"projects/{project_id}/locations/-"
    ),
    resource_id=lambda bucket: bucket.name,
)

EXCLUSIONS = ResourceKind(
    resource_type="GCP::Logging::Exclusion",
    subtype="exclusion",
    list_items=lambda client, project_id: client.list_exclusions(
        parent=f"projects/{project_id}"
    ),
    resource_id=lambda exclusion: exclusion.name,
)


class LoggingDiscovery(DiscoveryPlugin):

    @property
    def service(self) -> str:
        return "logging"

    def discover(
        self, project_id: str, session: DiscoverySession, emitter: Emitter
    ) -> None:
        self._discover_kinds(LOGGING_METRICS, [METRICS], project_id, session, emitter)
        self._discover_kinds(
            LOGGING_CONFIG, [SINKS, BUCKETS, EXCLUSIONS], project_id, session, emitter
        )
