# app/services/sizing/engine.py
import logging
from typing import List

from app.schemas.network import (
    CalculationDetails,
    CalculationResult,
    CandidatePipe,
    CapacityStatus,
    Drop,
    GasTrace,
    HeaderGeometry,
    NetworkSizingInput,
    SegmentSizingInput,
    SegmentSizingResult,
    SystemInputs,
    default_pipe_sizes,
)
from app.utils.conversions import flow_unit, to_scfm
from .drops import calculate_drops_sizing
from .gas_properties import get_gas_properties
from .header import calculate_header_sizing
from .segment import size_segment
from .tank import calculate_tank_metrics

logger = logging.getLogger(__name__)


def perform_all_calculations(
    system: SystemInputs,
    geometry: HeaderGeometry,
    candidate_pipes: List[CandidatePipe],
    drops: List[Drop],
) -> CalculationResult:
    """
    Size a complete distribution network.

    Drops (and their sub-drops) are sized first, their used flows are summed
    into the total demand, and the header is sized at the smaller of the
    available supply and the design demand. The tank is rated against the
    resulting capacity margin.

    Args:
        system: System-wide inputs
        geometry: Header geometry
        candidate_pipes: Ordered candidate pipe list
        drops: Ordered drop tree

    Returns:
        Calculation result
    """
    gas = get_gas_properties(system.gas_kind)

    # 1. Size all drops to establish what each one actually draws
    drop_results, sample_drop_trace = calculate_drops_sizing(drops, system, geometry, candidate_pipes)

    # 2. Demand aggregation (user units -> SCFM)
    total_demand_scfm = sum(to_scfm(dr.used_flow, system.gas_kind) for dr in drop_results)
    total_design_demand_scfm = total_demand_scfm * system.demand_safety_factor

    # 3. Capacity check
    available_scfm = to_scfm(system.available_flow, system.gas_kind)
    if total_design_demand_scfm > 0:
        capacity_margin_or_deficit_scfm = available_scfm - total_design_demand_scfm
        if capacity_margin_or_deficit_scfm >= 0:
            capacity_status = CapacityStatus.OK
        else:
            capacity_status = CapacityStatus.SHORTFALL
    else:
        capacity_margin_or_deficit_scfm = available_scfm
        capacity_status = CapacityStatus.NO_DEMAND

    # 4. Header and tank
    header_design_scfm = min(available_scfm, total_design_demand_scfm)
    header, header_trace = calculate_header_sizing(header_design_scfm, system, geometry, candidate_pipes)
    tank_metrics = calculate_tank_metrics(system, total_design_demand_scfm, capacity_margin_or_deficit_scfm)

    logger.debug(
        f"Network sized: demand={total_demand_scfm:.2f} SCFM, design={total_design_demand_scfm:.2f} SCFM, "
        f"capacity={capacity_status.value}, header={header.recommended_size if header else 'n/a'}"
    )

    return CalculationResult(
        flow_unit=flow_unit(system.gas_kind),
        total_demand_scfm=total_demand_scfm,
        total_design_demand_scfm=total_design_demand_scfm,
        capacity_status=capacity_status,
        capacity_margin_or_deficit_scfm=capacity_margin_or_deficit_scfm,
        header_design_scfm=header_design_scfm,
        header=header,
        drops=drop_results,
        tank_metrics=tank_metrics,
        details=CalculationDetails(
            gas=GasTrace(name=gas.name, R=gas.R, nu=gas.nu),
            header=header_trace,
            sample_drop=sample_drop_trace,
        ),
    )


def calculate_network(data: NetworkSizingInput) -> CalculationResult:
    """
    Main entry point for network sizing.
    """
    return perform_all_calculations(data.system, data.geometry, data.candidate_pipes, data.drops)


def calculate_segment(data: SegmentSizingInput) -> SegmentSizingResult:
    """
    Size a single drop-style segment against its pressure drop budget.
    """
    return size_segment(
        flow_scfm=data.flow_scfm,
        length=data.length,
        upstream_pressure=data.upstream_pressure,
        downstream_pressure=data.downstream_pressure,
        max_velocity=data.max_velocity,
        temperature=data.temperature,
        roughness=data.roughness,
        candidate_pipes=data.candidate_pipes,
        gas_kind=data.gas_kind,
    )


def get_example_input() -> NetworkSizingInput:
    """
    Return an example input for the network sizing calculation
    """
    return NetworkSizingInput(
        system={
            "inlet_pressure": 130.0,
            "available_flow": 500.0,
            "min_outlet_pressure": 90.0,
            "typical_outlet_pressure": 110.0,
            "demand_safety_factor": 1.2,
            "tank_volume": 0.0,
            "gas_kind": "air"
        },
        geometry={
            "header_length": 1000.0,
            "max_line_velocity": 50.0,
            "pipe_roughness": 0.00015,
            "temperature": 70.0
        },
        candidate_pipes=default_pipe_sizes(),
        drops=[
            {
                "id": "drop-1",
                "name": "Drop 1",
                "length": 100.0,
                "req_pressure": 95.0,
                "req_flow": 100.0,
                "sub_drops": []
            },
            {
                "id": "drop-2",
                "name": "Drop 2",
                "length": 100.0,
                "req_pressure": 95.0,
                "req_flow": 30.0,
                "sub_drops": [
                    {"id": "subdrop-1", "name": "Sub-drop 1", "length": 40.0, "req_pressure": 90.0, "req_flow": 20.0},
                    {"id": "subdrop-2", "name": "Sub-drop 2", "length": 40.0, "req_pressure": 90.0, "req_flow": 20.0}
                ]
            }
        ]
    )
