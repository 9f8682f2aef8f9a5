import json
import logging

from champion_draft.cache.protocol import LocalStore
from champion_draft.domain.availability import AvailabilitySnapshot
from champion_draft.domain.role import Role, parse_role
from champion_draft.exceptions import SnapshotDecodeError
from champion_draft.serialization import AvailabilitySnapshotSerializer

logger = logging.getLogger(__name__)


class AvailabilityCache:
    _NAMESPACE = "availability"

    def __init__(self, store: LocalStore) -> None:
        self._store = store
        self._serializer = AvailabilitySnapshotSerializer()

    def get(self, role: Role) -> AvailabilitySnapshot | None:
        raw = self._store.get(self._NAMESPACE, role.value)
        if raw is None:
            return None
        try:
            return self._serializer.deserialize(raw)
        except (SnapshotDecodeError, json.JSONDecodeError, TypeError) as e:
            logger.warning("Discarding unreadable availability for %s: %s", role, e)
            return None

    def put(self, snapshot: AvailabilitySnapshot) -> None:
        self._store.put(self._NAMESPACE, snapshot.role.value, self._serializer.serialize(snapshot))


class PlayedChampionCache:
    """Champions locked from this device, with the time of the lock."""

    _NAMESPACE = "played"

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def all(self) -> dict[str, str]:
        return dict(self._store.items(self._NAMESPACE))

    def mark(self, champions: list[str], at: str) -> None:
        for champion in champions:
            self._store.put(self._NAMESPACE, champion, at)

    def unmark(self, champions: list[str]) -> None:
        for champion in champions:
            self._store.delete(self._NAMESPACE, champion)

    def prune(self, absorbed_at: str, keep: set[str] | None = None) -> int:
        """Drop entries a remote read taken at *absorbed_at* has already observed, except those in *keep*."""
        keep = keep or set()
        pruned = 0
        for champion, played_at in self._store.items(self._NAMESPACE):
            if played_at <= absorbed_at and champion not in keep:
                self._store.delete(self._NAMESPACE, champion)
                pruned += 1
        return pruned


class ResetMarkerRepo:
    _NAMESPACE = "reset_markers"

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def get(self, role: Role) -> str | None:
        return self._store.get(self._NAMESPACE, role.value)

    def mark(self, roles: tuple[Role, ...], at: str) -> None:
        for role in roles:
            self._store.put(self._NAMESPACE, role.value, at)


class ChampionRoleCache:
    """Last champion-role configuration seen, so the role index survives restarts."""

    _NAMESPACE = "champion_roles"

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def all(self) -> dict[str, tuple[Role, ...]]:
        roles: dict[str, tuple[Role, ...]] = {}
        for champion, raw in self._store.items(self._NAMESPACE):
            try:
                lanes = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.warning("Discarding unreadable roles for %s: %s", champion, e)
                continue
            parsed = tuple(r for r in (parse_role(str(x)) for x in lanes) if r is not None)
            if parsed:
                roles[champion] = parsed
        return roles

    def replace_all(self, roles: dict[str, tuple[Role, ...]]) -> None:
        self._store.clear(self._NAMESPACE)
        for champion, lanes in roles.items():
            self._store.put(self._NAMESPACE, champion, json.dumps([role.value for role in lanes]))
