from typing import Dict

from app.schemas.network import GasKind, GasProperties

GAS_PROPERTIES: Dict[GasKind, GasProperties] = {
    GasKind.AIR: GasProperties(
        R=53.35,
        nu=1.6e-4,  # at 70°F
        name="Compressed Air",
    ),
    GasKind.FUEL_GAS: GasProperties(
        R=96.5,  # approx. for SG 0.6
        nu=1.72e-4,  # at 70°F
        name="Natural Gas (SG 0.6)",
    ),
}


def get_gas_properties(gas_kind: GasKind) -> GasProperties:
    """
    Look up the flow constant and kinematic viscosity for a gas kind.

    Args:
        gas_kind: Gas kind

    Returns:
        Gas properties row
    """
    return GAS_PROPERTIES[GasKind(gas_kind)]
