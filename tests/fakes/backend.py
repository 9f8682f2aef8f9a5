from collections.abc import Iterable, Mapping

import httpx

from champion_draft.domain.role import ROLES, Role
from champion_draft.domain.team import SavedTeam


class FakeBackend:
    """In-memory draft backend. Method names listed in ``failing`` raise a transport error."""

    def __init__(
        self,
        pools: Mapping[Role, Iterable[str]] | None = None,
        roles: Mapping[str, Iterable[Role]] | None = None,
        teams: Iterable[SavedTeam] = (),
    ) -> None:
        self.pools: dict[Role, list[str]] = {role: list((pools or {}).get(role, ())) for role in ROLES}
        self.available: dict[Role, list[str]] = {role: list(champions) for role, champions in self.pools.items()}
        self.roles: dict[str, list[Role]] = {champion: list(lanes) for champion, lanes in (roles or {}).items()}
        self.teams: dict[str, SavedTeam] = {team.timestamp: team for team in teams}
        self.unavailable: set[str] = set()
        self.failing: set[str] = set()
        self.calls: list[tuple[object, ...]] = []

    def calls_to(self, name: str) -> list[tuple[object, ...]]:
        return [call for call in self.calls if call[0] == name]

    def _record(self, name: str, *args: object) -> None:
        self.calls.append((name, *args))
        if name in self.failing:
            raise httpx.ConnectError(f"{name}: backend unreachable")

    async def get_champion_pools(self) -> dict[Role, list[str]]:
        self._record("get_champion_pools")
        return {role: list(champions) for role, champions in self.pools.items()}

    async def get_champion_roles(self) -> dict[str, list[Role]]:
        self._record("get_champion_roles")
        return {champion: list(lanes) for champion, lanes in self.roles.items()}

    async def save_champion_roles(self, roles: dict[str, tuple[Role, ...]]) -> None:
        self._record("save_champion_roles", roles)
        self.roles = {champion: list(lanes) for champion, lanes in roles.items()}

    async def get_available_champions(self, role: Role) -> list[str]:
        self._record("get_available_champions", role)
        return [c for c in self.available[role] if c not in self.unavailable]

    async def get_available_champions_batch(self) -> dict[Role, list[str]]:
        self._record("get_available_champions_batch")
        return {role: [c for c in champions if c not in self.unavailable] for role, champions in self.available.items()}

    async def remove_available_champion(self, role: Role, champion: str) -> None:
        self._record("remove_available_champion", role, champion)
        if champion in self.available[role]:
            self.available[role].remove(champion)

    async def restore_available_champion(self, role: Role, champion: str) -> None:
        self._record("restore_available_champion", role, champion)
        if champion not in self.available[role]:
            self.available[role].append(champion)

    async def reset_available_champions(self, role: Role) -> None:
        self._record("reset_available_champions", role)
        self.available[role] = list(self.pools[role])

    async def set_champion_unavailable(self, champion: str) -> None:
        self._record("set_champion_unavailable", champion)
        self.unavailable.add(champion)

    async def get_saved_teams(self) -> list[SavedTeam]:
        self._record("get_saved_teams")
        return list(self.teams.values())

    async def save_team(self, team: SavedTeam) -> SavedTeam:
        self._record("save_team", team)
        self.teams[team.timestamp] = team
        return team

    async def delete_team(self, timestamp: str) -> None:
        self._record("delete_team", timestamp)
        self.teams.pop(timestamp, None)

    async def delete_all_teams(self) -> None:
        self._record("delete_all_teams")
        self.teams.clear()

    async def aclose(self) -> None:
        self.calls.append(("aclose",))
