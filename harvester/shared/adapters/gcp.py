import json
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, cast
import structlog
from google.auth.credentials import Credentials as GoogleCredentials
from google.cloud import bigquery
from google.cloud import functions_v1
from google.cloud import monitoring_v3
from google.cloud import resourcemanager_v3
from google.cloud import texttospeech
from google.cloud import trace_v1
from google.cloud.logging_v2.services.config_service_v2 import ConfigServiceV2Client
from google.cloud.logging_v2.services.metrics_service_v2 import MetricsServiceV2Client
from google.oauth2 import service_account

from harvester.shared.core.config import PROJECT_ID_PATTERN
from harvester.shared.core.credentials import AUTH_APPLICATION_DEFAULT, GCPCredentials
from harvester.shared.core.exceptions import ConfigurationError, ProviderConnectionError

logger = structlog.get_logger()

ClientBuilder = Callable[[Optional[GoogleCredentials], str], Any]

# Client names used by discovery plugins.
BIGQUERY = "bigquery"
FUNCTIONS = "functions"
LOGGING_METRICS = "logging_metrics"
LOGGING_CONFIG = "logging_config"
MONITORING_GROUPS = "monitoring_groups"
MONITORING_ALERT_POLICIES = "monitoring_alert_policies"
MONITORING_SERVICES = "monitoring_services"
RESOURCE_MANAGER_ORGANIZATIONS = "resource_manager_organizations"
RESOURCE_MANAGER_PROJECTS = "resource_manager_projects"
TEXT_TO_SPEECH = "text_to_speech"
TRACE = "trace"

CLIENT_BUILDERS: Dict[str, ClientBuilder] = {
    BIGQUERY: lambda creds, project_id: bigquery.Client(
        project=project_id, credentials=creds
    ),
    FUNCTIONS: lambda creds, _: functions_v1.CloudFunctionsServiceClient(
        credentials=creds
    ),
    LOGGING_METRICS: lambda creds, _: MetricsServiceV2Client(credentials=creds),
    LOGGING_CONFIG: lambda creds, _: ConfigServiceV2Client(credentials=creds),
    MONITORING_GROUPS: lambda creds, _: monitoring_v3.GroupServiceClient(
        credentials=creds
    ),
    MONITORING_ALERT_POLICIES: lambda creds, _: monitoring_v3.AlertPolicyServiceClient(
        credentials=creds
    ),
    MONITORING_SERVICES: lambda creds, _: monitoring_v3.ServiceMonitoringServiceClient(
        credentials=creds
    ),
    RESOURCE_MANAGER_ORGANIZATIONS: lambda creds, _: resourcemanager_v3.OrganizationsClient(
        credentials=creds
    ),
    RESOURCE_MANAGER_PROJECTS: lambda creds, _: resourcemanager_v3.ProjectsClient(
        credentials=creds
    ),
    TEXT_TO_SPEECH: lambda creds, _: texttospeech.TextToSpeechClient(
        credentials=creds
    ),
    TRACE: lambda creds, _: trace_v1.TraceServiceClient(credentials=creds),
}


def validate_project_id(project_id: str) -> bool:
    """Validate GCP project ID format."""
    return bool(PROJECT_ID_PATTERN.match(project_id))


def load_google_credentials(
    credentials: Optional[GCPCredentials],
) -> Optional[GoogleCredentials]:
    """Initialize GCP credentials from service account JSON, or defer to ADC."""
    if credentials is None or credentials.auth_method == AUTH_APPLICATION_DEFAULT:
        return None
    if credentials.service_account_json is None:
        raise ConfigurationError(
            "GCP service account JSON is required for secret authentication"
        )
    try:
        info = json.loads(credentials.service_account_json.get_secret_value())
        return cast(
            GoogleCredentials,
            service_account.Credentials.from_service_account_info(info),  # type: ignore[no-untyped-call]
        )
    except Exception as e:
        logger.error("gcp_credentials_load_error", error=str(e))
        raise ConfigurationError(
            f"Invalid GCP service account JSON: {e}"
        ) from e


def release_client(client: Any) -> None:
    """Close a provider client's transport. Release failures are logged, not raised."""
    try:
        close = getattr(client, "close", None)
        if callable(close):
            close()
            return
        transport = getattr(client, "transport", None)
        if transport is not None:
            transport.close()
    except Exception as e:
        logger.warning(
            "gcp_client_release_failed",
            client_type=type(client).__name__,
            error=str(e),
        )


class GCPClientFactory:
    """
    Builds google-cloud clients for discovery plugins.

    Plugins receive the factory through their constructor; tests inject a
    factory whose builders return fakes, so no plugin touches the network
    unless it was handed real clients.
    """

    def __init__(
        self,
        credentials: Optional[GCPCredentials] = None,
        builders: Optional[Dict[str, ClientBuilder]] = None,
    ):
        self.credentials = credentials
        self._builders = dict(CLIENT_BUILDERS if builders is None else builders)
        self._google_credentials: Optional[GoogleCredentials] = None
        self._credentials_loaded = False

    def _get_credentials(self) -> Optional[GoogleCredentials]:
        if not self._credentials_loaded:
            self._google_credentials = load_google_credentials(self.credentials)
            self._credentials_loaded = True
        return self._google_credentials

    @contextmanager
    def client(self, name: str, project_id: str) -> Iterator[Any]:
        """
        Open a provider client for the duration of the block.

        Any failure while building the client surfaces as ProviderConnectionError.
        The client is released on every exit path.
        """
        builder = self._builders.get(name)
        if builder is None:
            raise ProviderConnectionError(
                f"No GCP client registered under '{name}'",
                details={"client": name},
            )
        try:
            client = builder(self._get_credentials(), project_id)
        except Exception as e:
            logger.warning("gcp_client_open_failed", client=name, error=str(e))
            raise ProviderConnectionError(
                f"Failed to open GCP {name} client: {e}",
                details={"client": name, "project_id": project_id},
            ) from e
        try:
            yield client
        finally:
            release_client(client)
