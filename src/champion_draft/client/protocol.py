from typing import Protocol

from champion_draft.domain.role import Role
from champion_draft.domain.team import SavedTeam


class DraftBackend(Protocol):
    async def get_champion_pools(self) -> dict[Role, list[str]]: ...

    async def get_champion_roles(self) -> dict[str, list[Role]]: ...

    async def save_champion_roles(self, roles: dict[str, tuple[Role, ...]]) -> None: ...

    async def get_available_champions(self, role: Role) -> list[str]: ...

    async def get_available_champions_batch(self) -> dict[Role, list[str]]: ...

    async def remove_available_champion(self, role: Role, champion: str) -> None: ...

    async def restore_available_champion(self, role: Role, champion: str) -> None: ...

    async def reset_available_champions(self, role: Role) -> None: ...

    async def set_champion_unavailable(self, champion: str) -> None: ...

    async def get_saved_teams(self) -> list[SavedTeam]: ...

    async def save_team(self, team: SavedTeam) -> SavedTeam: ...

    async def delete_team(self, timestamp: str) -> None: ...

    async def delete_all_teams(self) -> None: ...
