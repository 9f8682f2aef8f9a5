import json
import logging

from champion_draft.cache.protocol import LocalStore
from champion_draft.domain.team import SavedTeam
from champion_draft.exceptions import SnapshotDecodeError
from champion_draft.serialization import SavedTeamSerializer

logger = logging.getLogger(__name__)

_NAMESPACE = "saved_teams"


class SavedTeamCache:
    """Local copy of the team ledger, one record per timestamp."""

    def __init__(self, store: LocalStore) -> None:
        self._store = store
        self._serializer = SavedTeamSerializer()

    def all(self) -> list[SavedTeam]:
        teams: list[SavedTeam] = []
        for key, raw in self._store.items(_NAMESPACE):
            try:
                teams.append(self._serializer.deserialize(raw))
            except (SnapshotDecodeError, json.JSONDecodeError, TypeError) as e:
                logger.warning("Skipping unreadable cached team %s: %s", key, e)
        teams.sort(key=lambda t: t.timestamp, reverse=True)
        return teams

    def get(self, timestamp: str) -> SavedTeam | None:
        raw = self._store.get(_NAMESPACE, timestamp)
        return None if raw is None else self._serializer.deserialize(raw)

    def upsert(self, team: SavedTeam) -> None:
        self._store.put(_NAMESPACE, team.timestamp, self._serializer.serialize(team))

    def replace_all(self, teams: list[SavedTeam]) -> None:
        keep = {t.timestamp for t in teams}
        for key, _ in self._store.items(_NAMESPACE):
            if key not in keep:
                self._store.delete(_NAMESPACE, key)
        for team in teams:
            self.upsert(team)

    def delete(self, timestamp: str) -> None:
        self._store.delete(_NAMESPACE, timestamp)

    def clear(self) -> None:
        self._store.clear(_NAMESPACE)
