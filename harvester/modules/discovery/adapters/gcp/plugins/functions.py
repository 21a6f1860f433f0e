from harvester.modules.discovery.domain.plugin import DiscoveryPlugin, ResourceKind
from harvester.modules.discovery.domain.ports import Emitter
from harvester.schemas.inventory import DiscoverySession
from harvester.shared.adapters.gcp import FUNCTIONS

CLOUD_FUNCTIONS = ResourceKind(
    resource_type="GCP::Functions::Function",
    subtype="function",
    # "-" lists functions across every location
    list_items=lambda client, project_id: client.list_functions(
        request={"parent": f"projects/{project_id}/locations/-"}
    ),
    resource_id=lambda function: function.name,
)


class FunctionsDiscovery(DiscoveryPlugin):
    """Discover Cloud Functions."""

    @property
    def service(self) -> str:
        return "functions"

    def discover(
        self, project_id: str, session: DiscoverySession, emitter: Emitter
    ) -> None:
        self._discover_kinds(FUNCTIONS, [CLOUD_FUNCTIONS], project_id, session, emitter)
