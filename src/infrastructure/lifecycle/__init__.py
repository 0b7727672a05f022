from src.infrastructure.lifecycle.in_memory import InMemoryLifecycleRepository
from src.infrastructure.lifecycle.sqlite import SqliteLifecycleRepository

__all__ = [
    "InMemoryLifecycleRepository",
    "SqliteLifecycleRepository",
]
