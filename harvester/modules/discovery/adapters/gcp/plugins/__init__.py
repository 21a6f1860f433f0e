"""
GCP Discovery Plugins.

One plugin per cloud service. ``GCP_DISCOVERY_PLUGINS`` is the explicit
catalog used to build the default registry; its order is the scan order.
"""
from .bigquery import BigQueryDiscovery
from .functions import FunctionsDiscovery
from .logging import LoggingDiscovery
from .monitoring import MonitoringDiscovery
from .resource_manager import ResourceManagerDiscovery
from .text_to_speech import TextToSpeechDiscovery
from .trace import TraceDiscovery

GCP_DISCOVERY_PLUGINS = (
    BigQueryDiscovery,
    FunctionsDiscovery,
    LoggingDiscovery,
    MonitoringDiscovery,
    ResourceManagerDiscovery,
    TextToSpeechDiscovery,
    TraceDiscovery,
)

__all__ = [
    "BigQueryDiscovery",
    "FunctionsDiscovery",
    "LoggingDiscovery",
    "MonitoringDiscovery",
    "ResourceManagerDiscovery",
    "TextToSpeechDiscovery",
    "TraceDiscovery",
    "GCP_DISCOVERY_PLUGINS",
]
