from enum import StrEnum


class Role(StrEnum):
    TOP = "top"
    JUNGLE = "jungle"
    MID = "mid"
    ADC = "adc"
    SUPPORT = "support"


ROLES: tuple[Role, ...] = tuple(Role)


def parse_role(raw: str) -> Role | None:
    """Return the Role for *raw* (case-insensitive), or None if it is not one of the five."""
    try:
        return Role(raw.strip().lower())
    except ValueError:
        return None
