from typing import Dict, Any
import math

import numpy as np

from app.core.constants import (
    P_ATM_PSIA,
    IFGC_COEFFICIENT,
    IFGC_DIAMETER_EXPONENT,
    IFGC_PRESSURE_EXPONENT,
)
from app.schemas.network import GasProperties
from app.utils.conversions import scfm_to_scfh
from .base import SegmentCorrelation


class IFGCFuelGas(SegmentCorrelation):
    """
    Closed-form fuel gas sizing equation (IFGC 402.4.1, high-pressure gas).

    Q = 2207 * D^2.582 * ((P1^2 - P2^2) / L)^0.522

    with Q in SCFH, D in inches, L in feet and pressures in psia. The
    equation is solved for P2^2. When the flow cannot be carried at the given
    diameter (P2^2 < 0) the outlet is clamped to zero absolute pressure,
    which yields the largest possible pressure drop for the segment. A zero
    diameter takes the same path (P2^2 = -inf).
    """
    FORMULA = "IFGC 402.4.1"

    def _calculate_outlet_pressure(self) -> float:
        """
        Calculate outlet pressure using the IFGC equation.

        Returns:
            Outlet pressure squared (p2^2) in psia^2
        """
        # Rearranged for p2^2:
        # p2^2 = p1^2 - L * [Q / (2207 * D^2.582)]^(1/0.522)
        flow_scfh = scfm_to_scfh(self.flow_scfm)
        term = np.divide(flow_scfh, IFGC_COEFFICIENT * np.power(self.diameter, IFGC_DIAMETER_EXPONENT))
        return self.p_in_abs ** 2 - self.length * np.power(term, 1 / IFGC_PRESSURE_EXPONENT)

    def _solve(self) -> Dict[str, Any]:
        p2_squared = self._calculate_outlet_pressure()

        # Flow too high for this diameter: no real outlet pressure exists
        if not p2_squared >= 0:
            outlet_pressure = -P_ATM_PSIA
            is_valid = False
        else:
            outlet_pressure = math.sqrt(p2_squared) - P_ATM_PSIA
            is_valid = True

        pressure_drop = self.upstream_pressure - outlet_pressure

        avg_pressure = self._calculate_avg_pressure(outlet_pressure)
        actual_flow_rate = self._calculate_actual_flow_rate(avg_pressure)
        velocity = self._calculate_velocity(actual_flow_rate)

        return {
            "outlet_pressure": outlet_pressure,
            "pressure_drop": pressure_drop,
            "flow_velocity": velocity,
            "is_valid": is_valid,
        }


def calculate_ifgc(
        diameter: float,
        length: float,
        flow_scfm: float,
        upstream_pressure: float,
        downstream_pressure: float,
        temperature: float,
        roughness: float,
        gas: GasProperties,
) -> Dict[str, Any]:
    """
    Calculate fuel gas flow in a segment using the IFGC equation.

    Args:
        diameter: Pipe inside diameter in inches
        length: Segment length in feet
        flow_scfm: Gas flow rate in SCFM
        upstream_pressure: Upstream pressure in psig
        downstream_pressure: Downstream pressure reference in psig (unused)
        temperature: Gas temperature in °F
        roughness: Absolute pipe roughness in feet (unused)
        gas: Gas properties row

    Returns:
        Dictionary containing calculated results
    """
    return IFGCFuelGas(
        diameter=diameter,
        length=length,
        flow_scfm=flow_scfm,
        upstream_pressure=upstream_pressure,
        downstream_pressure=downstream_pressure,
        temperature=temperature,
        roughness=roughness,
        gas=gas,
    ).calculate()
