"""Config loading across defaults, YAML, .env, environment and CLI layers."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sktorrent.infrastructure.config import load_config

pytestmark = pytest.mark.integration

_ENV_VARS = (
    "SKTORRENT_APP_NAME",
    "SKTORRENT_ENVIRONMENT",
    "SKTORRENT_HTTP_TIMEOUT_SECONDS",
    "SKTORRENT_HTTP_FOLLOW_REDIRECTS",
    "SKTORRENT_HTTP_USER_AGENT",
    "SKTORRENT_LOG_LEVEL",
    "SKTORRENT_LOG_FORMAT",
    "SKTORRENT_TMDB_API_KEY",
    "TMDB_API_KEY",
    "SKTORRENT_BASE_URL",
    "SKTORRENT_UID",
    "SKT_UID",
    "SKTORRENT_PASS",
    "SKT_PASS",
    "SKTORRENT_MAX_CONCURRENT_FETCHES",
    "SKTORRENT_FETCH_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset every variable the loader reads; restored after the test.

    setenv first so monkeypatch also removes values that a .env file
    loads during the test.
    """
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_defaults(self) -> None:
        config = load_config()
        assert config.app_name == "sktorrent"
        assert config.log_format == "console"
        assert config.sktorrent.base_url == "https://sktorrent.eu"
        assert config.stremio.max_concurrent_fetches == 5
        assert config.stremio.min_video_size_bytes == 20 * 1024 * 1024
        assert config.tmdb_api_key is None

    def test_prod_derives_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKTORRENT_ENVIRONMENT", "prod")
        assert load_config().log_format == "json"


class TestYamlLayer:
    def test_sections_merge_over_defaults(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "config.yaml",
            "logging:\n  level: WARNING\n"
            "sktorrent:\n  base_url: https://mirror.example/\n  uid: yaml-uid\n"
            "stremio:\n  max_concurrent_fetches: 8\n",
        )
        config = load_config(config_path=path)
        assert config.log_level == "WARNING"
        assert config.sktorrent.base_url == "https://mirror.example"
        assert config.sktorrent.uid == "yaml-uid"
        assert config.stremio.max_concurrent_fetches == 8
        assert config.stremio.fetch_timeout_seconds == 20.0

    def test_pass_key_alias(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.yaml", "sktorrent:\n  uid: u\n  pass: p\n")
        config = load_config(config_path=path)
        assert config.sktorrent.cookie_header() == "uid=u; pass=p"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.yaml", "")
        assert load_config(config_path=path).app_name == "sktorrent"

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.yaml", "- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(config_path=path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nope.yaml")


class TestEnvLayer:
    def test_env_beats_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = _write(tmp_path / "config.yaml", "logging:\n  level: WARNING\n")
        monkeypatch.setenv("SKTORRENT_LOG_LEVEL", "DEBUG")
        assert load_config(config_path=path).log_level == "DEBUG"

    def test_legacy_credential_names(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKT_UID", "12345")
        monkeypatch.setenv("SKT_PASS", "hash")
        monkeypatch.setenv("TMDB_API_KEY", "tmdb-key")
        config = load_config()
        assert config.sktorrent.cookie_header() == "uid=12345; pass=hash"
        assert config.tmdb_api_key is not None
        assert config.tmdb_api_key.get_secret_value() == "tmdb-key"

    def test_prefixed_names(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKTORRENT_UID", "u")
        monkeypatch.setenv("SKTORRENT_MAX_CONCURRENT_FETCHES", "2")
        monkeypatch.setenv("SKTORRENT_FETCH_TIMEOUT_SECONDS", "7.5")
        config = load_config()
        assert config.sktorrent.uid == "u"
        assert config.stremio.max_concurrent_fetches == 2
        assert config.stremio.fetch_timeout_seconds == 7.5

    def test_dotenv_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path / ".env", "SKT_UID=from-dotenv\n")
        assert load_config(dotenv_path=path).sktorrent.uid == "from-dotenv"

    def test_missing_dotenv(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(dotenv_path=tmp_path / ".env")


class TestCliLayer:
    def test_cli_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKTORRENT_MAX_CONCURRENT_FETCHES", "2")
        monkeypatch.setenv("SKTORRENT_LOG_LEVEL", "DEBUG")
        config = load_config(
            cli_overrides={"max_concurrent_fetches": 9, "log_level": "ERROR"}
        )
        assert config.stremio.max_concurrent_fetches == 9
        assert config.log_level == "ERROR"


class TestValidation:
    def test_zero_concurrency_rejected(self) -> None:
        with pytest.raises(ValidationError):
            load_config(cli_overrides={"max_concurrent_fetches": 0})

    def test_bad_log_level_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKTORRENT_LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            load_config()

    def test_secrets_masked_in_dump(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKT_PASS", "hash")
        monkeypatch.setenv("TMDB_API_KEY", "tmdb-key")
        dumped = load_config().to_sectioned_dict()
        assert dumped["sktorrent"]["password"] == "**********"
        assert dumped["tmdb_api_key"] == "**********"
