from fastapi import APIRouter
from typing import Dict, List

from app.schemas.network import (
    CalculationResult,
    CandidatePipe,
    GasKind,
    GasProperties,
    NetworkSizingInput,
    SegmentSizingInput,
    SegmentSizingResult,
)
from app.services.sizing import sizing_service

# Create router
router = APIRouter(tags=["network"])


@router.post(
    "/calculate",
    response_model=CalculationResult,
    summary="Size a compressed-gas distribution network",
)
async def calculate_network_endpoint(
    data: NetworkSizingInput,
) -> CalculationResult:
    """
    Recommend pipe sizes for the header, drops and sub-drops of a network.

    Drops are sized on the larger of their own flow and the sum of their
    sub-drops' flows. The header is sized at the smaller of the available
    supply and the design demand, and the receiver tank (if any) is rated
    against the capacity margin.

    Flows are entered in SCFM for compressed air and in SCFH for fuel gas.
    All `*_scfm` fields in the response are SCFM.

    Example:
    ```json
    {
      "system": {
        "inlet_pressure": 130,
        "available_flow": 500,
        "min_outlet_pressure": 90,
        "demand_safety_factor": 1.2,
        "tank_volume": 0,
        "gas_kind": "air"
      },
      "geometry": {
        "header_length": 1000,
        "max_line_velocity": 50,
        "pipe_roughness": 0.00015,
        "temperature": 70
      },
      "drops": [
        {"id": "drop-1", "name": "Drop 1", "length": 100, "req_pressure": 95, "req_flow": 100}
      ]
    }
    ```

    When `candidate_pipes` is omitted the Schedule 40 list from 1/4" to 6" is used.

    A failure inside the sizing engine is returned as the standard error
    envelope with code `calculation_error`.
    """
    return sizing_service.calculate_network(data)


@router.post(
    "/segment",
    response_model=SegmentSizingResult,
    summary="Size a single pipe segment",
)
async def size_segment_endpoint(
    data: SegmentSizingInput,
) -> SegmentSizingResult:
    """
    Evaluate every candidate diameter for one segment against a velocity
    ceiling and the pressure drop budget (upstream minus downstream pressure).

    The flow must already include any safety factor and be stated in SCFM.
    """
    return sizing_service.size_segment(data)


@router.get("/example", response_model=NetworkSizingInput)
async def get_example_input_endpoint() -> NetworkSizingInput:
    """
    Get an example network sizing input.
    """
    return sizing_service.get_example_input()


@router.get("/pipe-sizes", response_model=List[CandidatePipe])
async def get_pipe_sizes_endpoint() -> List[CandidatePipe]:
    """
    Get the default candidate pipe sizes (Schedule 40, ascending).
    """
    return sizing_service.get_default_pipe_sizes()


@router.get("/gas-properties", response_model=Dict[GasKind, GasProperties])
async def get_gas_properties_endpoint() -> Dict[GasKind, GasProperties]:
    """
    Get the flow constant and kinematic viscosity used for each gas kind.
    """
    return sizing_service.get_gas_properties()
