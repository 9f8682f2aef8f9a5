from champion_draft.cache.protocol import LocalStore
from champion_draft.cache.sqlite_store import SqliteLocalStore

__all__ = ["LocalStore", "SqliteLocalStore"]
