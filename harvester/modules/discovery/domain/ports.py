from abc import ABC, abstractmethod

from harvester.schemas.inventory import VersionedEnvelope


class Emitter(ABC):
    """
    Destination for versioned envelopes.

    Implementations must be safe for concurrent use: plugins running on
    separate workers emit into the same instance.
    """

    @abstractmethod
    def emit(self, envelope: VersionedEnvelope) -> None:
        """Accept one envelope. No acknowledgement is consulted by callers."""
        raise NotImplementedError
