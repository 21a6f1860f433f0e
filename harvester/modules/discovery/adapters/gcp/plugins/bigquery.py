from harvester.modules.discovery.domain.plugin import DiscoveryPlugin, ResourceKind
from harvester.modules.discovery.domain.ports import Emitter
from harvester.schemas.inventory import DiscoverySession
from harvester.shared.adapters.gcp import BIGQUERY


def _list_datasets(client, project_id: str):
    # List items are partial; fetch each dataset for its full representation.
    for item in client.list_datasets(project=project_id):
        yield client.get_dataset(item.reference)


def _dataset_id(dataset) -> str:
    # "<project>:<dataset>", the dataset's generated id
    return dataset.full_dataset_id


DATASETS = ResourceKind(
    resource_type="GCP::BigQuery::Dataset",
    subtype="dataset",
    list_items=_list_datasets,
    resource_id=_dataset_id,
)


class BigQueryDiscovery(DiscoveryPlugin):
    """Discover BigQuery datasets."""

    @property
    def service(self) -> str:
        return "bigQuery"

    def discover(
        self, project_id: str, session: DiscoverySession, emitter: Emitter
    ) -> None:
        self._discover_kinds(BIGQUERY, [DATASETS], project_id, session, emitter)
