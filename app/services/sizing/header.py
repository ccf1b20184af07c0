from typing import List, Optional, Tuple

from app.schemas.network import (
    CalculationTrace,
    CandidatePipe,
    HeaderGeometry,
    HeaderResult,
    SystemInputs,
)
from .segment import size_segment


def calculate_header_sizing(
    design_scfm: float,
    system: SystemInputs,
    geometry: HeaderGeometry,
    pipes: List[CandidatePipe],
) -> Tuple[Optional[HeaderResult], Optional[CalculationTrace]]:
    """
    Size the main header at the system design flow.

    Each candidate's outlet pressure is compared directly with the system
    minimum outlet pressure. The air solve is seeded with the inlet pressure.

    Returns:
        Tuple of (header result, header trace); both None when no candidate
        is included or the design flow is not positive
    """
    if design_scfm <= 0 or not any(p.selected for p in pipes):
        return None, None

    sizing = size_segment(
        flow_scfm=design_scfm,
        length=geometry.header_length,
        upstream_pressure=system.inlet_pressure,
        downstream_pressure=system.min_outlet_pressure,
        max_velocity=geometry.max_line_velocity,
        temperature=geometry.temperature,
        roughness=geometry.pipe_roughness,
        candidate_pipes=pipes,
        gas_kind=system.gas_kind,
        acceptance="outlet_pressure",
        seed_pressure=system.inlet_pressure,
    )

    result = HeaderResult(
        recommended_size=sizing.recommended,
        outlet_pressure=sizing.outlet_pressure if sizing.outlet_pressure is not None else 0.0,
        design_scfm=design_scfm,
        velocity=sizing.velocity,
        status=sizing.status,
        comparison_table=sizing.table,
    )
    return result, sizing.details
