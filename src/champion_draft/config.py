import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from champion_draft.exceptions import DraftConfigError

_CONFIG_FILENAME = "draft.toml"

_DEFAULT_API_URL = "http://localhost:3001/api"
_DEFAULT_DB_PATH = "~/.config/champion-draft/draft.db"


@dataclass(frozen=True)
class DraftConfig:
    api_url: str = _DEFAULT_API_URL
    db_path: Path = Path(_DEFAULT_DB_PATH).expanduser()
    sync_interval_seconds: float = 30.0
    request_timeout_seconds: float = 10.0


def _positive_float(raw: dict[str, Any], field: str, default: float) -> float:
    value = raw.get(field, default)
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise DraftConfigError(f"[draft] {field} must be a number, got {value!r}")
    if value <= 0:
        raise DraftConfigError(f"[draft] {field} must be > 0, got {value}")
    return float(value)


def load_draft_config(config_dir: Path | None = None) -> DraftConfig:
    """Load settings from draft.toml in *config_dir* (cwd by default), then apply env overrides.

    A missing file means defaults. ``DRAFT_API_URL`` and ``DRAFT_DB_PATH`` win over the file.
    """
    toml_path = (config_dir or Path.cwd()) / _CONFIG_FILENAME
    raw: dict[str, Any] = {}
    if toml_path.exists():
        with toml_path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise DraftConfigError(f"{toml_path}: {e}") from e
        section = data.get("draft", {})
        if not isinstance(section, dict):
            raise DraftConfigError(f"[draft] in {toml_path} must be a table")
        raw = section

    api_url = os.environ.get("DRAFT_API_URL") or raw.get("api_url", _DEFAULT_API_URL)
    if not isinstance(api_url, str) or not api_url.startswith(("http://", "https://")):
        raise DraftConfigError(f"[draft] api_url must be an http(s) URL, got {api_url!r}")

    db_path = os.environ.get("DRAFT_DB_PATH") or raw.get("db_path", _DEFAULT_DB_PATH)
    if not isinstance(db_path, str) or not db_path:
        raise DraftConfigError(f"[draft] db_path must be a non-empty string, got {db_path!r}")

    return DraftConfig(
        api_url=api_url,
        db_path=Path(db_path).expanduser(),
        sync_interval_seconds=_positive_float(raw, "sync_interval_seconds", 30.0),
        request_timeout_seconds=_positive_float(raw, "request_timeout_seconds", 10.0),
    )
