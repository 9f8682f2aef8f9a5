from champion_draft.client.api import DraftApiClient
from champion_draft.client.protocol import DraftBackend

__all__ = ["DraftApiClient", "DraftBackend"]
