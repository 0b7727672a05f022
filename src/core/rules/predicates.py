"""
FILE: src/core/rules/predicates.py
Process-wide JSON-logic predicate engine, loaded once behind an asyncio lock.
"""

import asyncio
import importlib
import logging
from typing import Any, Callable, Mapping, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_PREDICATE_ENGINE_MODULE = "json_logic"


class PredicateEngine(Protocol):
    def apply(self, expression: Any, context: Mapping[str, Any]) -> Any: ...


def _starts_with(value: Any, prefix: Any) -> bool:
    return isinstance(value, str) and isinstance(prefix, str) and value.startswith(prefix)


def _ends_with(value: Any, suffix: Any) -> bool:
    return isinstance(value, str) and isinstance(suffix, str) and value.endswith(suffix)


_STRING_OPERATIONS: dict[str, Callable[..., bool]] = {
    "startsWith": _starts_with,
    "endsWith": _ends_with,
}


class JsonLogicPredicateEngine:
    """Adapter over the ``json_logic`` module with the string prefix/suffix operations.

    Custom operations are registered through ``add_operation``.
    """

    def __init__(self, module: Any) -> None:
        self._apply = module.jsonLogic
        for name, operation in _STRING_OPERATIONS.items():
            module.add_operation(name, operation)

    def apply(self, expression: Any, context: Mapping[str, Any]) -> Any:
        return self._apply(expression, context)


class PredicateEngineProvider:
    """Memoizes one predicate engine per process.

    Concurrent first callers wait on the same lock and share one import. A module that
    fails to import or adapt is logged and retried by the next caller.
    """

    def __init__(self, *, module_name: str = DEFAULT_PREDICATE_ENGINE_MODULE) -> None:
        self._module_name = module_name
        self._lock = asyncio.Lock()
        self._engine: Optional[PredicateEngine] = None

    @property
    def module_name(self) -> str:
        return self._module_name

    @property
    def ready(self) -> bool:
        return self._engine is not None

    async def load(self) -> Optional[PredicateEngine]:
        if self._engine is not None:
            return self._engine
        async with self._lock:
            if self._engine is None:
                self._engine = await asyncio.to_thread(self._import_engine)
        return self._engine

    def _import_engine(self) -> Optional[PredicateEngine]:
        try:
            engine = JsonLogicPredicateEngine(importlib.import_module(self._module_name))
        except Exception:
            logger.exception("Predicate engine module %s could not be loaded", self._module_name)
            return None
        logger.info("Predicate engine loaded. Module=%s", self._module_name)
        return engine


_PROVIDER: Optional[PredicateEngineProvider] = None


def get_predicate_engine_provider() -> PredicateEngineProvider:
    global _PROVIDER
    if _PROVIDER is None:
        _PROVIDER = PredicateEngineProvider()
    return _PROVIDER


def reset_predicate_engine_provider_for_tests() -> None:
    global _PROVIDER
    _PROVIDER = None
