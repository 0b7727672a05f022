from typing import NoReturn

from fastapi import HTTPException, status

from src.api.http_status import HTTP_422_UNPROCESSABLE
from src.core.lifecycle import (
    RuleNotFoundError,
    RuleValidationError,
    SimulationEnvironmentNotFoundError,
    StageNotFoundError,
)


def raise_lifecycle_http_exception(exc: Exception) -> NoReturn:
    if isinstance(exc, (StageNotFoundError, RuleNotFoundError, SimulationEnvironmentNotFoundError)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, RuleValidationError):
        raise HTTPException(status_code=HTTP_422_UNPROCESSABLE, detail=str(exc)) from exc
    raise exc
