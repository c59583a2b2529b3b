"""Tests for configuration settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tfc_backup.config import PaginationStrategy, Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.atlas_token is None
        assert settings.tfc_api_url == "https://app.terraform.io/api/v2"
        assert settings.page_size == 100
        assert settings.varset_pagination == PaginationStrategy.MULTI
        assert settings.source_path.is_absolute()

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ATLAS_TOKEN", "from-env")
        monkeypatch.setenv("ORGANIZATION", "acme")
        monkeypatch.setenv("VARSET_PAGINATION", "single")
        monkeypatch.setenv("RESTIC_FORGET_ARGS", "--keep-daily 7 --keep-weekly 5")
        monkeypatch.setenv("APPRISE_URLS", "json://a, json://b")

        settings = Settings(_env_file=None)

        assert settings.atlas_token is not None
        assert settings.atlas_token.get_secret_value() == "from-env"
        assert settings.organization == "acme"
        assert settings.varset_pagination == PaginationStrategy.SINGLE
        assert settings.restic_forget_args == ["--keep-daily", "7", "--keep-weekly", "5"]
        assert settings.apprise_urls == ["json://a", "json://b"]

    def test_reads_dotenv(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ATLAS_TOKEN=from-file\nMAX_WORKERS=2\n")
        settings = Settings(_env_file=env_file)
        assert settings.atlas_token is not None
        assert settings.atlas_token.get_secret_value() == "from-file"
        assert settings.max_workers == 2

    def test_api_url_must_be_https(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, tfc_api_url="http://app.terraform.io/api/v2")

    def test_page_size_bounds(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, page_size=0)

    def test_apprise_json_array_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, apprise_urls='["json://a"]')

    def test_engine_config_hides_unset_credentials(self) -> None:
        config = Settings(_env_file=None, restic_repository="b2:bucket:restic").get_engine_config()
        assert config["env"] == {"RESTIC_REPOSITORY": "b2:bucket:restic"}

    def test_secrets_not_in_repr(self) -> None:
        settings = Settings(_env_file=None, atlas_token="super-secret")
        assert "super-secret" not in repr(settings)
