from pathlib import Path

import pytest

from champion_draft.config import DraftConfig, load_draft_config
from champion_draft.exceptions import DraftConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DRAFT_API_URL", raising=False)
    monkeypatch.delenv("DRAFT_DB_PATH", raising=False)


def _write(tmp_path: Path, body: str) -> Path:
    (tmp_path / "draft.toml").write_text(body)
    return tmp_path


class TestLoadDraftConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        assert load_draft_config(tmp_path) == DraftConfig()

    def test_reads_draft_section(self, tmp_path: Path) -> None:
        config = load_draft_config(
            _write(
                tmp_path,
                '[draft]\napi_url = "https://draft.example.com/api"\ndb_path = "/tmp/d.db"\n'
                "sync_interval_seconds = 5\nrequest_timeout_seconds = 2.5\n",
            )
        )
        assert config.api_url == "https://draft.example.com/api"
        assert config.db_path == Path("/tmp/d.db")
        assert config.sync_interval_seconds == 5.0
        assert config.request_timeout_seconds == 2.5

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write(tmp_path, '[draft]\napi_url = "http://file/api"\n')
        monkeypatch.setenv("DRAFT_API_URL", "http://env/api")
        monkeypatch.setenv("DRAFT_DB_PATH", str(tmp_path / "env.db"))
        config = load_draft_config(tmp_path)
        assert config.api_url == "http://env/api"
        assert config.db_path == tmp_path / "env.db"

    def test_rejects_non_http_url(self, tmp_path: Path) -> None:
        with pytest.raises(DraftConfigError, match="api_url"):
            load_draft_config(_write(tmp_path, '[draft]\napi_url = "ftp://x"\n'))

    def test_rejects_non_positive_interval(self, tmp_path: Path) -> None:
        with pytest.raises(DraftConfigError, match="sync_interval_seconds"):
            load_draft_config(_write(tmp_path, "[draft]\nsync_interval_seconds = 0\n"))

    def test_rejects_boolean_timeout(self, tmp_path: Path) -> None:
        with pytest.raises(DraftConfigError, match="request_timeout_seconds"):
            load_draft_config(_write(tmp_path, "[draft]\nrequest_timeout_seconds = true\n"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        with pytest.raises(DraftConfigError):
            load_draft_config(_write(tmp_path, "[draft\n"))
