from typing import Optional

from harvester.modules.discovery.adapters.gcp.plugins import GCP_DISCOVERY_PLUGINS
from harvester.modules.discovery.domain.plugin import Serializer
from harvester.modules.discovery.domain.registry import DiscoveryRegistry
from harvester.shared.adapters.gcp import GCPClientFactory
from harvester.shared.core.error_reporting import ErrorReporter


def build_gcp_registry(
    clients: GCPClientFactory,
    reporter: ErrorReporter,
    serializer: Optional[Serializer] = None,
) -> DiscoveryRegistry:
    """Instantiate every GCP discovery plugin against one client factory and reporter."""
    return DiscoveryRegistry(
        plugin_cls(clients, reporter, serializer=serializer)
        for plugin_cls in GCP_DISCOVERY_PLUGINS
    )
