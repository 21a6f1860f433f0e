from harvester.modules.discovery.domain.plugin import DiscoveryPlugin, ResourceKind
from harvester.modules.discovery.domain.ports import Emitter
from harvester.schemas.inventory import DiscoverySession
from harvester.shared.adapters.gcp import (
    MONITORING_ALERT_POLICIES,
    MONITORING_GROUPS,
    MONITORING_SERVICES,
)

GROUPS = ResourceKind(
    resource_type="GCP::Monitoring::Group",
    subtype="group",
    list_items=lambda client, project_id: client.list_groups(
        name=f"projects/{project_id}"
    ),
    resource_id=lambda group: group.name,
)

ALERT_POLICIES = ResourceKind(
    resource_type="GCP::Monitoring::AlertPolicy",
    subtype="alertPolicy",
    list_items=lambda client, project_id: client.list_alert_policies(
        name=f"projects/{project_id}"
    ),
    resource_id=lambda policy: policy.name,
)

SERVICES = ResourceKind(
    resource_type="GCP::Monitoring::Service",
    subtype="service",
    list_items=lambda client, project_id: client.list_services(
        parent=f"projects/{project_id}"
    ),
    resource_id=lambda service: service.name,
)


class MonitoringDiscovery(DiscoveryPlugin):
    """Discover monitoring groups, alert policies and SLO services."""

    @property
    def service(self) -> str:
        return "monitoring"

    def discover(
        self, project_id: str, session: DiscoverySession, emitter: Emitter
    ) -> None:
        # Each kind lives behind its own API client.
        self._discover_kinds(MONITORING_GROUPS, [GROUPS], project_id, session, emitter)
        self._discover_kinds(
            MONITORING_ALERT_POLICIES, [ALERT_POLICIES], project_id, session, emitter
        )
        self._discover_kinds(MONITORING_SERVICES, [SERVICES], project_id, session, emitter)
