"""JSON conversion for records shared with the backend or kept in the local store.

The wire shapes follow the backend's documents: saved teams are
``{"timestamp", "team", "isAdminCreated"}`` and incomplete teams use camelCase
keys (``rerolledLanes``, ``pendingSelections``, ``hasUsedReroll``). Unknown role
keys are dropped on the way in so a misconfigured backend cannot widen the
closed role set. Queued writes are stored as tagged events (``{"type": "teamLocked", ...}``)
so a later run can replay them.

Usage:
    serializer = SavedTeamSerializer()
    cached_str = serializer.serialize(team)
    team = serializer.deserialize(cached_str)
"""

from __future__ import annotations

import json
from typing import Any

from champion_draft.domain.availability import AvailabilitySnapshot
from champion_draft.domain.draft import DraftSession, IncompleteTeam, RerollOffer
from champion_draft.domain.events import (
    AllTeamsDeleted,
    ChampionBanned,
    ChampionRolesSaved,
    DraftEvent,
    QueuedEvent,
    RolesReset,
    TeamDeleted,
    TeamLocked,
)
from champion_draft.domain.role import ROLES, Role, parse_role
from champion_draft.domain.team import SavedTeam, empty_mapping
from champion_draft.exceptions import SnapshotDecodeError


def _mapping_from_wire(raw: Any) -> dict[Role, str | None]:
    mapping = empty_mapping()
    if not isinstance(raw, dict):
        return mapping
    for key, champion in raw.items():
        role = parse_role(str(key))
        if role is not None:
            mapping[role] = champion if isinstance(champion, str) and champion else None
    return mapping


def _mapping_to_wire(mapping: dict[Role, str | None] | Any) -> dict[str, str | None]:
    return {role.value: mapping.get(role) for role in ROLES}


class SavedTeamSerializer:
    def to_dict(self, team: SavedTeam) -> dict[str, Any]:
        data: dict[str, Any] = {"timestamp": team.timestamp, "team": _mapping_to_wire(team.team)}
        if team.is_admin_created:
            data["isAdminCreated"] = True
        return data

    def from_dict(self, raw: dict[str, Any]) -> SavedTeam:
        timestamp = raw.get("timestamp")
        if not isinstance(timestamp, str) or not timestamp:
            raise SnapshotDecodeError(f"saved team without a timestamp: {raw!r}")
        return SavedTeam(
            timestamp=timestamp,
            team=_mapping_from_wire(raw.get("team")),
            is_admin_created=bool(raw.get("isAdminCreated", False)),
        )

    def serialize(self, value: SavedTeam) -> str:
        return json.dumps(self.to_dict(value))

    def deserialize(self, data: str) -> SavedTeam:
        return self.from_dict(json.loads(data))


class IncompleteTeamSerializer:
    def to_dict(self, snapshot: IncompleteTeam) -> dict[str, Any]:
        session = snapshot.session
        rerolled: dict[str, dict[str, str]] = {}
        if session.reroll is not None:
            offer = session.reroll
            rerolled[offer.role.value] = {"original": offer.original, "rerolled": offer.rerolled}
        return {
            "id": snapshot.id,
            "timestamp": snapshot.timestamp,
            "version": snapshot.version,
            "team": _mapping_to_wire(session.selections),
            "randomizedLanes": [role.value for role in ROLES if role in session.randomized_roles],
            "rerolledLanes": rerolled,
            "pendingSelections": {role.value: choice for role, choice in session.pending_selections.items()},
            "hasUsedReroll": session.has_used_reroll,
        }

    def from_dict(self, raw: dict[str, Any]) -> IncompleteTeam:
        try:
            snapshot_id = str(raw["id"])
            timestamp = str(raw["timestamp"])
        except KeyError as e:
            raise SnapshotDecodeError(f"incomplete team missing field {e}") from e

        selections = _mapping_from_wire(raw.get("team"))

        reroll: RerollOffer | None = None
        for key, offer in (raw.get("rerolledLanes") or {}).items():
            role = parse_role(str(key))
            if role is not None and isinstance(offer, dict) and {"original", "rerolled"} <= offer.keys():
                reroll = RerollOffer(role=role, original=offer["original"], rerolled=offer["rerolled"])
                break

        pending: dict[Role, str | None] = {}
        for key, choice in (raw.get("pendingSelections") or {}).items():
            role = parse_role(str(key))
            if role is not None:
                pending[role] = choice or None

        raw_randomized = raw.get("randomizedLanes")
        if raw_randomized is None:
            # Records written before randomized roles were stored: rebuild from the selections.
            randomized = frozenset(role for role, champion in selections.items() if champion is not None)
        else:
            randomized = frozenset(r for r in (parse_role(str(x)) for x in raw_randomized) if r is not None)

        has_used_reroll = raw.get("hasUsedReroll")
        if has_used_reroll is None:
            has_used_reroll = reroll is not None or bool(pending)

        session = DraftSession(
            selections=selections,
            randomized_roles=randomized,
            reroll=reroll,
            pending_selections=pending,
            has_used_reroll=bool(has_used_reroll),
            session_id=snapshot_id,
        )
        return IncompleteTeam(id=snapshot_id, timestamp=timestamp, session=session, version=int(raw.get("version", 1)))

    def serialize(self, value: IncompleteTeam) -> str:
        return json.dumps(self.to_dict(value))

    def deserialize(self, data: str) -> IncompleteTeam:
        return self.from_dict(json.loads(data))


class AvailabilitySnapshotSerializer:
    def serialize(self, value: AvailabilitySnapshot) -> str:
        return json.dumps({"role": value.role.value, "champions": list(value.champions), "fetchedAt": value.fetched_at})

    def deserialize(self, data: str) -> AvailabilitySnapshot:
        raw = json.loads(data)
        role = parse_role(str(raw.get("role", "")))
        if role is None:
            raise SnapshotDecodeError(f"availability snapshot with unknown role: {raw.get('role')!r}")
        return AvailabilitySnapshot(
            role=role,
            champions=tuple(raw.get("champions", [])),
            fetched_at=str(raw.get("fetchedAt", "")),
        )


def _roles_from_wire(raw: Any) -> tuple[Role, ...]:
    return tuple(r for r in (parse_role(str(x)) for x in raw or ()) if r is not None)


class DraftEventSerializer:
    """Tagged JSON for the events the write queue keeps between runs."""

    def __init__(self) -> None:
        self._teams = SavedTeamSerializer()

    def to_dict(self, event: DraftEvent) -> dict[str, Any]:
        match event:
            case TeamLocked(team=team, session_id=session_id):
                return {"type": "teamLocked", "team": self._teams.to_dict(team), "sessionId": session_id}
            case TeamDeleted(team=team):
                return {"type": "teamDeleted", "team": self._teams.to_dict(team)}
            case AllTeamsDeleted(teams=teams):
                return {"type": "allTeamsDeleted", "teams": [self._teams.to_dict(t) for t in teams]}
            case RolesReset(roles=roles, at=at):
                return {"type": "rolesReset", "roles": [role.value for role in roles], "at": at}
            case ChampionBanned(champion=champion, at=at):
                return {"type": "championBanned", "champion": champion, "at": at}
            case ChampionRolesSaved(roles=roles):
                return {
                    "type": "championRolesSaved",
                    "roles": {champion: [role.value for role in lanes] for champion, lanes in roles.items()},
                }
        raise TypeError(f"cannot serialize {type(event).__name__}")

    def from_dict(self, raw: dict[str, Any]) -> DraftEvent:
        kind = raw.get("type")
        if kind == "teamLocked":
            session_id = raw.get("sessionId")
            return TeamLocked(team=self._teams.from_dict(raw.get("team") or {}), session_id=session_id)
        if kind == "teamDeleted":
            return TeamDeleted(team=self._teams.from_dict(raw.get("team") or {}))
        if kind == "allTeamsDeleted":
            return AllTeamsDeleted(teams=tuple(self._teams.from_dict(t) for t in raw.get("teams") or ()))
        if kind == "rolesReset":
            return RolesReset(roles=_roles_from_wire(raw.get("roles")), at=str(raw.get("at", "")))
        if kind == "championBanned":
            champion = raw.get("champion")
            if not isinstance(champion, str) or not champion:
                raise SnapshotDecodeError(f"ban without a champion: {raw!r}")
            return ChampionBanned(champion=champion, at=str(raw.get("at", "")))
        if kind == "championRolesSaved":
            roles = raw.get("roles") or {}
            return ChampionRolesSaved(roles={str(c): _roles_from_wire(lanes) for c, lanes in roles.items()})
        raise SnapshotDecodeError(f"unknown event type: {kind!r}")


class QueuedEventSerializer:
    def __init__(self) -> None:
        self._events = DraftEventSerializer()

    def serialize(self, value: QueuedEvent) -> str:
        return json.dumps(
            {
                "id": value.id,
                "event": self._events.to_dict(value.event),
                "done": sorted(value.done),
                "attempts": value.attempts,
            }
        )

    def deserialize(self, data: str) -> QueuedEvent:
        raw = json.loads(data)
        try:
            item_id = str(raw["id"])
            event = self._events.from_dict(raw["event"])
        except KeyError as e:
            raise SnapshotDecodeError(f"queued event missing field {e}") from e
        return QueuedEvent(
            id=item_id,
            event=event,
            done=frozenset(str(key) for key in raw.get("done", [])),
            attempts=int(raw.get("attempts", 1)),
        )
