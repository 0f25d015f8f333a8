"""Tests for core.py Settings, exceptions and the YAML config loader."""

import os

import pytest
import yaml

from askboard.config import get_config, load_config, load_yaml_config, merge_config, validate_config
from askboard.core import (
    AskBoardException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)


def create_settings(**overrides):
    """Create Settings instance with explicit values, ignoring any .env file."""
    from askboard.core import Settings

    return Settings(_env_file=None, **overrides)


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    """Run in an empty directory with no ASKBOARD_* variables or global config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("askboard.config.get_global_config_path", lambda: tmp_path / "global.yaml")
    for key in list(os.environ):
        if key.startswith("ASKBOARD_"):
            monkeypatch.delenv(key)
    return tmp_path


class TestSettingsDefaults:
    """Tests for default Settings values."""

    def test_product_rules(self):
        settings = create_settings()
        assert settings.title_min_length == 10
        assert settings.max_tags_per_question == 5
        assert settings.tag_max_length == 50
        assert settings.accept_policy == "any"

    def test_default_database_is_sqlite(self):
        settings = create_settings()
        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.is_sqlite is True

    def test_postgres_is_not_sqlite(self):
        settings = create_settings(database_url="postgresql+asyncpg://u:p@db/askboard")
        assert settings.is_sqlite is False

    def test_is_production(self):
        assert create_settings(environment="production").is_production is True
        assert create_settings().is_production is False

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ASKBOARD_MAX_TAGS_PER_QUESTION", "3")
        assert create_settings().max_tags_per_question == 3


class TestExceptions:
    """Tests for the exception taxonomy."""

    @pytest.mark.parametrize(
        "exc_class,status,code",
        [
            (ValidationException, 400, "VALIDATION_ERROR"),
            (NotFoundException, 404, "NOT_FOUND"),
            (ForbiddenException, 403, "FORBIDDEN"),
            (ConflictException, 500, "CONFLICT"),
            (AskBoardException, 500, "INTERNAL_ERROR"),
        ],
    )
    def test_status_and_default_code(self, exc_class, status, code):
        exc = exc_class()
        assert exc.status_code == status
        assert exc.code == code

    def test_to_dict(self):
        exc = NotFoundException(code="QUESTION_NOT_FOUND", message="Question not found", details={"question_id": 1})
        assert exc.to_dict() == {
            "error": "QUESTION_NOT_FOUND",
            "message": "Question not found",
            "details": {"question_id": 1},
        }


class TestConfigLoading:
    """Tests for YAML layering."""

    def test_missing_file_is_empty(self, tmp_path):
        assert load_yaml_config(tmp_path / "nope.yaml") == {}

    def test_invalid_yaml_is_ignored(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed")
        assert load_yaml_config(path) == {}

    def test_merge_skips_none(self):
        assert merge_config({"a": 1, "b": 2}, {"a": None, "b": 3}) == {"a": 1, "b": 3}

    def test_local_overrides_global(self, clean_env):
        (clean_env / "global.yaml").write_text(yaml.safe_dump({"max_page_size": 50, "log_level": "DEBUG"}))
        (clean_env / "askboard.yaml").write_text(yaml.safe_dump({"max_page_size": 80}))

        config = load_config()

        assert config.max_page_size == 80
        assert config.log_level == "DEBUG"

    def test_environment_overrides_files(self, clean_env, monkeypatch):
        (clean_env / "askboard.yaml").write_text(yaml.safe_dump({"accept_policy": "any"}))
        monkeypatch.setenv("ASKBOARD_ACCEPT_POLICY", "question_author")

        assert load_config().accept_policy == "question_author"

    def test_runtime_config_includes_yaml_layers(self, clean_env):
        (clean_env / "askboard.yaml").write_text(yaml.safe_dump({"accept_policy": "question_author"}))

        config = get_config()

        assert config.accept_policy == "question_author"
        assert get_config() is config


class TestValidateConfig:
    """Tests for semantic validation."""

    def test_defaults_are_valid(self):
        assert validate_config(create_settings()) == []

    def test_sync_driver_rejected(self):
        errors = validate_config(create_settings(database_url="postgresql://u:p@db/askboard"))
        assert any("database_url" in e for e in errors)

    def test_title_bounds(self):
        errors = validate_config(create_settings(title_min_length=50, title_max_length=20))
        assert any("title_min_length" in e for e in errors)

    def test_limits_and_port(self):
        errors = validate_config(
            create_settings(max_tags_per_question=0, default_page_size=0, api_port=70000)
        )
        assert any("max_tags_per_question" in e for e in errors)
        assert any("default_page_size" in e for e in errors)
        assert any("api_port" in e for e in errors)

    def test_unknown_accept_policy(self):
        errors = validate_config(create_settings(accept_policy="moderators"))
        assert any("accept_policy" in e for e in errors)
