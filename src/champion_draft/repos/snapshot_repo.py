import json
import logging
from dataclasses import replace

from champion_draft.cache.protocol import LocalStore
from champion_draft.domain.draft import DraftSession, IncompleteTeam
from champion_draft.exceptions import SnapshotDecodeError
from champion_draft.serialization import IncompleteTeamSerializer

logger = logging.getLogger(__name__)

_NAMESPACE = "incomplete_teams"
_POINTER_NAMESPACE = "session"
_CURRENT_KEY = "current"


class IncompleteTeamRepo:
    """Locally persisted snapshots of in-progress drafts, keyed by session id.

    Every save bumps the snapshot's version so readers can tell a stale copy from
    the latest one. Snapshots never leave this device.
    """

    def __init__(self, store: LocalStore) -> None:
        self._store = store
        self._serializer = IncompleteTeamSerializer()

    def save(self, session: DraftSession, timestamp: str) -> IncompleteTeam:
        if session.session_id is None:
            raise ValueError("cannot snapshot a draft session without a session id")
        previous = self.get(session.session_id)
        version = 1 if previous is None else previous.version + 1
        snapshot = IncompleteTeam(id=session.session_id, timestamp=timestamp, session=session, version=version)
        self._store.put(_NAMESPACE, snapshot.id, self._serializer.serialize(snapshot))
        return snapshot

    def get(self, snapshot_id: str) -> IncompleteTeam | None:
        raw = self._store.get(_NAMESPACE, snapshot_id)
        if raw is None:
            return None
        return self._decode(snapshot_id, raw)

    def all(self) -> list[IncompleteTeam]:
        snapshots = [s for key, raw in self._store.items(_NAMESPACE) if (s := self._decode(key, raw)) is not None]
        snapshots.sort(key=lambda s: s.timestamp)
        return snapshots

    def delete(self, snapshot_id: str) -> None:
        self._store.delete(_NAMESPACE, snapshot_id)
        if self.current_id() == snapshot_id:
            self.clear_current()

    def current_id(self) -> str | None:
        return self._store.get(_POINTER_NAMESPACE, _CURRENT_KEY)

    def set_current(self, snapshot_id: str) -> None:
        self._store.put(_POINTER_NAMESPACE, _CURRENT_KEY, snapshot_id)

    def clear_current(self) -> None:
        self._store.delete(_POINTER_NAMESPACE, _CURRENT_KEY)

    def _decode(self, key: str, raw: str) -> IncompleteTeam | None:
        try:
            snapshot = self._serializer.deserialize(raw)
        except (SnapshotDecodeError, json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning("Skipping unreadable incomplete team %s: %s", key, e)
            return None
        if snapshot.id != key:
            snapshot = replace(snapshot, id=key, session=replace(snapshot.session, session_id=key))
        return snapshot
