import os

from src.core.lifecycle.repository import LifecycleRepository
from src.infrastructure.lifecycle import InMemoryLifecycleRepository, SqliteLifecycleRepository


def env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def lifecycle_store_backend_name() -> str:
    backend = os.getenv("LIFECYCLE_STORE_BACKEND", "IN_MEMORY").strip().upper()
    return "SQLITE" if backend in {"SQL", "SQLITE"} else "IN_MEMORY"


def lifecycle_sqlite_path() -> str:
    return os.getenv("LIFECYCLE_SQLITE_PATH", ".data/lifecycle_rules.db").strip()


def seed_default_stages_enabled() -> bool:
    return env_flag("LIFECYCLE_SEED_DEFAULT_STAGES", True)


def require_valid_active_rules() -> bool:
    return env_flag("LIFECYCLE_REQUIRE_VALID_ACTIVE_RULES", True)


def build_repository() -> LifecycleRepository:
    if lifecycle_store_backend_name() == "SQLITE":
        sqlite_path = lifecycle_sqlite_path()
        if not sqlite_path:
            raise RuntimeError("LIFECYCLE_SQLITE_PATH_REQUIRED")
        return SqliteLifecycleRepository(database_path=sqlite_path)
    return InMemoryLifecycleRepository()
