import math
from typing import Optional

from app.core.constants import P_ATM_PSIA
from app.schemas.network import SystemInputs, TankMetrics
from app.utils.conversions import gallons_to_ft3, psig_to_psia


def calculate_tank_metrics(
    system: SystemInputs,
    total_design_demand_scfm: float,
    capacity_margin_or_deficit_scfm: float,
) -> Optional[TankMetrics]:
    """
    Receiver tank buffer metrics.

    The equivalent storage is the standard volume released by bleeding the
    tank from the inlet pressure down to the minimum outlet pressure. When
    the system is short of supply the tank covers the deficit; otherwise it
    is rated against the full design demand (supply offline).

    Args:
        system: System inputs (tank volume in gallons)
        total_design_demand_scfm: Design demand in SCFM
        capacity_margin_or_deficit_scfm: Available minus design demand in SCFM

    Returns:
        Tank metrics, or None when no tank is configured
    """
    if system.tank_volume <= 0:
        return None

    p_in_abs = psig_to_psia(system.inlet_pressure)
    p_min_abs = psig_to_psia(system.min_outlet_pressure)
    equivalent_storage_scf = gallons_to_ft3(system.tank_volume) * (p_in_abs - p_min_abs) / P_ATM_PSIA

    if total_design_demand_scfm <= 0:
        return TankMetrics(
            equivalent_storage_scf=equivalent_storage_scf,
            reference_flow_scfm=0.0,
            coverage_time_minutes=math.inf,
            is_covering_deficit=False,
        )

    is_covering_deficit = capacity_margin_or_deficit_scfm < 0
    if is_covering_deficit:
        reference_flow_scfm = abs(capacity_margin_or_deficit_scfm)
    else:
        reference_flow_scfm = total_design_demand_scfm

    if reference_flow_scfm > 0:
        coverage_time_minutes = equivalent_storage_scf / reference_flow_scfm
    else:
        coverage_time_minutes = math.inf

    return TankMetrics(
        equivalent_storage_scf=equivalent_storage_scf,
        reference_flow_scfm=reference_flow_scfm,
        coverage_time_minutes=coverage_time_minutes,
        is_covering_deficit=is_covering_deficit,
    )
