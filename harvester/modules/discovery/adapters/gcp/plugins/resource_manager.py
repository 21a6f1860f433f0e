"""
Resource Manager discovery.

Organizations and projects visible to the caller, each enriched with the
IAM policy bound to it (supplementary field ``iamPolicy``).
"""
from google.iam.v1 import iam_policy_pb2

from harvester.modules.discovery.domain.plugin import DiscoveryPlugin, ResourceKind
from harvester.modules.discovery.domain.ports import Emitter
from harvester.schemas.inventory import DiscoverySession
from harvester.shared.adapters.gcp import (
    RESOURCE_MANAGER_ORGANIZATIONS,
    RESOURCE_MANAGER_PROJECTS,
)

IAM_POLICY_FIELD = "iamPolicy"

ORGANIZATIONS = ResourceKind(
    resource_type="GCP::ResourceManager::Organization",
    subtype="organization",
    list_items=lambda client, _: client.search_organizations(query=""),
    resource_id=lambda organization: organization.name,
    supplements={
        IAM_POLICY_FIELD: lambda client, organization: client.get_iam_policy(
            request=iam_policy_pb2.GetIamPolicyRequest(resource=organization.name)
        ),
    },
)

PROJECTS = ResourceKind(
    resource_type="GCP::ResourceManager::Project",
    subtype="project",
    list_items=lambda client, _: client.search_projects(query=""),
    resource_id=lambda project: project.name,
    supplements={
        IAM_POLICY_FIELD: lambda client, project: client.get_iam_policy(
            request=iam_policy_pb2.GetIamPolicyRequest(
                resource=f"projects/{project.project_id}"
            )
        ),
    },
)


class ResourceManagerDiscovery(DiscoveryPlugin):

    @property
    def service(self) -> str:
        return "resourceManager"

    def discover(
        self, project_id: str, session: DiscoverySession, emitter: Emitter
    ) -> None:
        self._discover_kinds(
            RESOURCE_MANAGER_ORGANIZATIONS, [ORGANIZATIONS], project_id, session, emitter
        )
        self._discover_kinds(
            RESOURCE_MANAGER_PROJECTS, [PROJECTS], project_id, session, emitter
        )
