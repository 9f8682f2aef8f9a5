from __future__ import annotations

from typing import TYPE_CHECKING

from champion_draft.domain.role import ROLES, Role, parse_role

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class RoleIndex:
    """Which roles each champion can play, and the per-role pools derived from that.

    Built once from a champion-role configuration; rebuild it (``from_champion_roles``)
    whenever the configuration changes rather than scanning the pools per lookup.
    """

    def __init__(self, roles_by_champion: dict[str, frozenset[Role]], pools: dict[Role, tuple[str, ...]]) -> None:
        self._roles_by_champion = roles_by_champion
        self._pools = pools

    @classmethod
    def from_champion_roles(cls, champion_roles: Mapping[str, Iterable[Role | str]]) -> RoleIndex:
        roles_by_champion: dict[str, frozenset[Role]] = {}
        for champion, raw_roles in champion_roles.items():
            roles = frozenset(r for r in (parse_role(str(raw)) for raw in raw_roles) if r is not None)
            if roles:
                roles_by_champion[champion] = roles
        pools = {
            role: tuple(sorted(c for c, roles in roles_by_champion.items() if role in roles)) for role in ROLES
        }
        return cls(roles_by_champion, pools)

    @classmethod
    def from_pools(cls, pools: Mapping[Role, Iterable[str]]) -> RoleIndex:
        ordered: dict[Role, tuple[str, ...]] = {role: tuple(dict.fromkeys(pools.get(role, ()))) for role in ROLES}
        roles_by_champion: dict[str, set[Role]] = {}
        for role, champions in ordered.items():
            for champion in champions:
                roles_by_champion.setdefault(champion, set()).add(role)
        return cls({c: frozenset(roles) for c, roles in roles_by_champion.items()}, ordered)

    def lanes_for(self, champion: str) -> frozenset[Role]:
        return self._roles_by_champion.get(champion, frozenset())

    def pool(self, role: Role) -> tuple[str, ...]:
        return self._pools.get(role, ())

    def pools(self) -> dict[Role, tuple[str, ...]]:
        return dict(self._pools)

    def champion_roles(self) -> dict[str, tuple[Role, ...]]:
        return {c: tuple(r for r in ROLES if r in roles) for c, roles in sorted(self._roles_by_champion.items())}

    def champions_in(self, roles: Iterable[Role]) -> set[str]:
        return {champion for role in roles for champion in self.pool(role)}

    def __contains__(self, champion: object) -> bool:
        return champion in self._roles_by_champion

    def __len__(self) -> int:
        return len(self._roles_by_champion)
