import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx

from champion_draft.client._retry import default_http_retry
from champion_draft.domain.role import ROLES, Role, parse_role
from champion_draft.domain.team import SavedTeam
from champion_draft.exceptions import SnapshotDecodeError
from champion_draft.serialization import SavedTeamSerializer

logger = logging.getLogger(__name__)

_DEFAULT_RETRY = default_http_retry("draft backend")


class DraftApiClient:
    """Async client for the shared draft backend (availability store, team ledger, champion roles)."""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        retry: Callable[..., Callable[..., Any]] = _DEFAULT_RETRY,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/") + "/"
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=5.0))
        self._request_with_retry = retry(self._do_request)
        self._teams = SavedTeamSerializer()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -- Champion pools and roles ------------------------------------------------

    async def get_champion_pools(self) -> dict[Role, list[str]]:
        data = await self._request_with_retry("GET", "champion-pools")
        return _role_lists(data.get("championPools", {}))

    async def get_champion_roles(self) -> dict[str, list[Role]]:
        data = await self._request_with_retry("GET", "champion-roles")
        roles: dict[str, list[Role]] = {}
        for champion, raw_roles in data.get("roles", {}).items():
            roles[champion] = [r for r in (parse_role(str(x)) for x in raw_roles) if r is not None]
        return roles

    async def save_champion_roles(self, roles: dict[str, tuple[Role, ...]]) -> None:
        payload = {champion: [role.value for role in lanes] for champion, lanes in roles.items()}
        await self._request_with_retry("POST", "champion-roles", json={"roles": payload})

    # -- Availability store ------------------------------------------------------

    async def get_available_champions(self, role: Role) -> list[str]:
        data = await self._request_with_retry("GET", f"available-champions/{role.value}")
        return list(data.get("champions", []))

    async def get_available_champions_batch(self) -> dict[Role, list[str]]:
        data = await self._request_with_retry("GET", "available-champions")
        return _role_lists(data.get("availableChampions", {}))

    async def remove_available_champion(self, role: Role, champion: str) -> None:
        await self._request_with_retry("POST", f"available-champions/{role.value}/remove", json={"champion": champion})

    async def restore_available_champion(self, role: Role, champion: str) -> None:
        await self._request_with_retry("POST", f"available-champions/{role.value}/restore", json={"champion": champion})

    async def reset_available_champions(self, role: Role) -> None:
        await self._request_with_retry("POST", f"available-champions/{role.value}/reset")

    async def set_champion_unavailable(self, champion: str) -> None:
        await self._request_with_retry("POST", "champions/unavailable", json={"champion": champion})

    # -- Team ledger -------------------------------------------------------------

    async def get_saved_teams(self) -> list[SavedTeam]:
        data = await self._request_with_retry("GET", "teams")
        teams: list[SavedTeam] = []
        for raw in data.get("teams", []):
            try:
                teams.append(self._teams.from_dict(raw))
            except SnapshotDecodeError as e:
                logger.warning("Ignoring malformed team from backend: %s", e)
        return teams

    async def save_team(self, team: SavedTeam) -> SavedTeam:
        data = await self._request_with_retry("POST", "teams", json=self._teams.to_dict(team))
        raw = data.get("team")
        return team if not raw else self._teams.from_dict(raw)

    async def delete_team(self, timestamp: str) -> None:
        await self._request_with_retry("DELETE", f"teams/{quote(timestamp, safe='')}", missing_ok=True)

    async def delete_all_teams(self) -> None:
        await self._request_with_retry("DELETE", "teams")

    async def _do_request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        missing_ok: bool = False,
    ) -> dict[str, Any]:
        url = self._base_url + path
        logger.debug("%s %s", method, url)
        response = await self._client.request(method, url, json=json)
        if missing_ok and response.status_code == httpx.codes.NOT_FOUND:
            logger.debug("%s %s: already gone", method, url)
            return {}
        response.raise_for_status()
        if not response.content:
            return {}
        return response.json()


def _role_lists(raw: dict[str, Any]) -> dict[Role, list[str]]:
    result: dict[Role, list[str]] = {role: [] for role in ROLES}
    for key, champions in raw.items():
        role = parse_role(str(key))
        if role is not None:
            result[role] = list(champions)
    return result
