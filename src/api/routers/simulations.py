import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Path, status

from src.api.dependencies import get_simulation_service
from src.api.routers.lifecycle_http_errors import raise_lifecycle_http_exception
from src.core.lifecycle import LifecycleError, SimulationService, build_simulation_input
from src.core.models import SimulationEnvironment, SimulationOutput, SimulationRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["What-If Simulation"])

StageId = Annotated[str, Path(description="Lifecycle stage identifier.", examples=["stage-1a"])]
Simulations = Annotated[SimulationService, Depends(get_simulation_service)]


@router.post(
    "/stages/{stage_id}/simulate",
    response_model=SimulationOutput,
    summary="Simulate Stage Rules",
    description=(
        "Runs the stage's rules in priority order against the supplied input and entities, "
        "then allocates `input_data.hedge_amount` across the final entity list.\n\n"
        "Rules that fail to evaluate are reported as not matching; only a haltProcessing "
        "action ends a run early."
    ),
)
async def simulate_stage(
    stage_id: StageId,
    request: SimulationRequest,
    service: Simulations,
    correlation_id: Annotated[
        Optional[str],
        Header(
            alias="X-Correlation-Id",
            description="Optional trace/correlation identifier propagated to logs.",
            examples=["corr-1234-abcd"],
        ),
    ] = None,
) -> SimulationOutput:
    logger.info("Stage simulation requested. Stage=%s CID=%s", stage_id, correlation_id)
    try:
        return await service.run_stage_simulation(
            stage_id=stage_id,
            simulation_input=build_simulation_input(request.input_data, request.entities),
        )
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.get(
    "/stages/{stage_id}/environment",
    response_model=SimulationEnvironment,
    summary="Get Saved Simulation Environment",
)
def get_environment(stage_id: StageId, service: Simulations) -> SimulationEnvironment:
    environment = service.get_environment(stage_id=stage_id)
    if environment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="SIMULATION_ENVIRONMENT_NOT_FOUND"
        )
    return environment


@router.put(
    "/stages/{stage_id}/environment",
    response_model=SimulationEnvironment,
    summary="Save Simulation Environment",
    description="Stores the what-if input and entities used for a stage.",
)
def save_environment(
    stage_id: StageId, request: SimulationRequest, service: Simulations
) -> SimulationEnvironment:
    return service.save_environment(
        SimulationEnvironment(
            stage_id=stage_id,
            input_data=request.input_data,
            entities=request.entities,
        )
    )


@router.post(
    "/stages/{stage_id}/environment/simulate",
    response_model=SimulationOutput,
    summary="Simulate Saved Environment",
)
async def simulate_saved_environment(stage_id: StageId, service: Simulations) -> SimulationOutput:
    try:
        return await service.run_saved_environment(stage_id=stage_id)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.delete(
    "/simulation-environments",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear Simulation Environments",
)
def clear_environments(service: Simulations) -> None:
    service.clear_environments()
