from src.api import config
from src.infrastructure.lifecycle import InMemoryLifecycleRepository, SqliteLifecycleRepository


def test_env_flag_parsing(monkeypatch):
    monkeypatch.delenv("LIFECYCLE_TEST_FLAG", raising=False)
    assert config.env_flag("LIFECYCLE_TEST_FLAG", True) is True

    monkeypatch.setenv("LIFECYCLE_TEST_FLAG", " Yes ")
    assert config.env_flag("LIFECYCLE_TEST_FLAG", False) is True

    monkeypatch.setenv("LIFECYCLE_TEST_FLAG", "off")
    assert config.env_flag("LIFECYCLE_TEST_FLAG", True) is False


def test_backend_name_defaults_to_in_memory(monkeypatch):
    monkeypatch.delenv("LIFECYCLE_STORE_BACKEND", raising=False)
    assert config.lifecycle_store_backend_name() == "IN_MEMORY"

    monkeypatch.setenv("LIFECYCLE_STORE_BACKEND", "unknown")
    assert config.lifecycle_store_backend_name() == "IN_MEMORY"

    monkeypatch.setenv("LIFECYCLE_STORE_BACKEND", "sqlite")
    assert config.lifecycle_store_backend_name() == "SQLITE"


def test_build_repository_selects_backend(monkeypatch, tmp_path):
    assert isinstance(config.build_repository(), InMemoryLifecycleRepository)

    monkeypatch.setenv("LIFECYCLE_STORE_BACKEND", "SQLITE")
    monkeypatch.setenv("LIFECYCLE_SQLITE_PATH", str(tmp_path / "store" / "rules.db"))
    assert isinstance(config.build_repository(), SqliteLifecycleRepository)
    assert (tmp_path / "store" / "rules.db").exists()


def test_active_rule_validation_flag(monkeypatch):
    assert config.require_valid_active_rules() is True
    monkeypatch.setenv("LIFECYCLE_REQUIRE_VALID_ACTIVE_RULES", "false")
    assert config.require_valid_active_rules() is False
