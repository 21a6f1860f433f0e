from harvester.modules.discovery.domain.plugin import DiscoveryPlugin, ResourceKind
from harvester.modules.discovery.domain.ports import Emitter
from harvester.schemas.inventory import DiscoverySession
from harvester.shared.adapters.gcp import TEXT_TO_SPEECH

VOICES = ResourceKind(
    resource_type="GCP::TextToSpeech::Voice",
    subtype="voice",
    # Not paginated: the response carries the complete voice catalog.
    list_items=lambda client, _: client.list_voices(request={}).voices,
    resource_id=lambda voice: voice.name,
)


class TextToSpeechDiscovery(DiscoveryPlugin):
    """Discover the Text-to-Speech voices available to the project."""

    @property
    def service(self) -> str:
        return "textToSpeech"

    def discover(
        self, project_id: str, session: DiscoverySession, emitter: Emitter
    ) -> None:
        self._discover_kinds(TEXT_TO_SPEECH, [VOICES], project_id, session, emitter)
