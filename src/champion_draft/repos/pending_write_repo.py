import json
import logging

from champion_draft.cache.protocol import LocalStore
from champion_draft.domain.events import QueuedEvent
from champion_draft.exceptions import SnapshotDecodeError
from champion_draft.serialization import QueuedEventSerializer

logger = logging.getLogger(__name__)

_NAMESPACE = "pending_writes"


class PendingWriteRepo:
    """Events whose remote writes have not all reached the backend.

    Entries outlive the process that queued them; ids sort in queue order.
    """

    def __init__(self, store: LocalStore) -> None:
        self._store = store
        self._serializer = QueuedEventSerializer()

    def all(self) -> list[QueuedEvent]:
        items: list[QueuedEvent] = []
        for key, raw in self._store.items(_NAMESPACE):
            try:
                items.append(self._serializer.deserialize(raw))
            except (SnapshotDecodeError, json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
                logger.warning("Dropping unreadable queued write %s: %s", key, e)
        items.sort(key=lambda item: item.id)
        return items

    def put(self, item: QueuedEvent) -> None:
        self._store.put(_NAMESPACE, item.id, self._serializer.serialize(item))

    def delete(self, item_id: str) -> None:
        self._store.delete(_NAMESPACE, item_id)
