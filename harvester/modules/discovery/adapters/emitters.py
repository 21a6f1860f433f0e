import json
from threading import Lock
from typing import IO, List

from harvester.modules.discovery.domain.ports import Emitter
from harvester.schemas.inventory import VersionedEnvelope


class InMemoryEmitter(Emitter):
    """Collects envelopes in arrival order. Used by embedding hosts and tests."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._envelopes: List[VersionedEnvelope] = []

    def emit(self, envelope: VersionedEnvelope) -> None:
        with self._lock:
            self._envelopes.append(envelope)

    @property
    def envelopes(self) -> List[VersionedEnvelope]:
        with self._lock:
            return list(self._envelopes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._envelopes)


class JsonLinesEmitter(Emitter):
    """Writes one JSON document per envelope to a text stream."""

    def __init__(self, stream: IO[str]):
        self._stream = stream
        self._lock = Lock()
        self.count = 0

    def emit(self, envelope: VersionedEnvelope) -> None:
        line = json.dumps(envelope.to_document(), separators=(",", ":"), sort_keys=True)
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()
            self.count += 1
