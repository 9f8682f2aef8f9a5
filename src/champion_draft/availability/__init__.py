from champion_draft.availability.bookkeeping import effective_availability, fan_out
from champion_draft.availability.role_index import RoleIndex

__all__ = ["RoleIndex", "effective_availability", "fan_out"]
