from abc import ABC, abstractmethod
import math
from typing import Dict, Any

import numpy as np

from app.core.constants import P_ATM_PSIA, PSF_PER_PSI
from app.schemas.network import CalculationTrace, GasProperties, PipeTrace
from app.utils.conversions import inches_to_feet, psig_to_psia, to_rankine


class SegmentCorrelation(ABC):
    """
    Base class for single-segment gas flow correlations.

    This class provides the pieces shared by every correlation: flow area,
    ideal-gas density, actual (compressed) flow rate and velocity at a mean
    pressure, and the calculation trace for a finished segment.

    Subclasses must implement `_solve`, which returns the outlet pressure and
    pressure drop for the segment together with any correlation-specific
    intermediate values.
    """
    FORMULA = ""

    def __init__(self,
                 diameter: float,
                 length: float,
                 flow_scfm: float,
                 upstream_pressure: float,
                 downstream_pressure: float,
                 temperature: float,
                 roughness: float,
                 gas: GasProperties):
        """
        Initialize the correlation with the given parameters.

        Args:
            diameter: Pipe inside diameter in inches
            length: Segment length in feet
            flow_scfm: Gas flow rate in SCFM (must be > 0)
            upstream_pressure: Upstream pressure in psig
            downstream_pressure: Downstream pressure reference in psig
                (seeds the iterative solve)
            temperature: Gas temperature in °F
            roughness: Absolute pipe roughness in feet
            gas: Gas properties row
        """
        self.diameter = diameter  # inches
        self.d_ft = inches_to_feet(diameter)
        self.length = length  # feet
        self.flow_scfm = flow_scfm
        self.upstream_pressure = upstream_pressure  # psig
        self.p_in_abs = psig_to_psia(upstream_pressure)  # psia
        self.downstream_pressure = downstream_pressure  # psig
        self.temperature = temperature  # °F
        self.t_abs = to_rankine(temperature)  # °R
        self.roughness = roughness  # feet
        self.gas = gas
        self.area = self._calculate_flow_area()

    def _calculate_flow_area(self) -> float:
        """
        Calculate flow area of the pipe.

        Returns:
            Flow area in square feet
        """
        return float(np.pi * self.d_ft ** 2 / 4)

    def _calculate_avg_pressure(self, outlet_pressure: float) -> float:
        """
        Mean absolute pressure over the segment.

        Args:
            outlet_pressure: Outlet pressure in psig

        Returns:
            Mean pressure in psia
        """
        return (self.p_in_abs + psig_to_psia(outlet_pressure)) / 2

    def _calculate_gas_density(self, avg_pressure: float) -> float:
        """
        Ideal-gas density at the given absolute pressure.

        Returns:
            Gas density in lbm/ft³
        """
        return np.divide(avg_pressure * PSF_PER_PSI, self.gas.R * self.t_abs)

    def _calculate_actual_flow_rate(self, avg_pressure: float) -> float:
        """
        Actual flow rate at average pressure.

        Returns:
            Actual flow rate in ACFM
        """
        return self.flow_scfm * np.divide(P_ATM_PSIA, avg_pressure)

    def _calculate_velocity(self, actual_flow_rate: float) -> float:
        """
        Gas velocity from an actual flow rate in ACFM.

        Returns:
            Gas velocity in ft/s
        """
        return np.divide(actual_flow_rate / 60, self.area)

    def _unbounded_result(self) -> Dict[str, Any]:
        """
        Result for a segment that cannot carry the flow at all (no flow area
        or no absolute pressure): unbounded velocity and the outlet at zero
        absolute pressure, as with the clamped fuel gas equation.
        """
        return {
            "outlet_pressure": -P_ATM_PSIA,
            "pressure_drop": self.upstream_pressure + P_ATM_PSIA,
            "flow_velocity": math.inf,
            "is_valid": False,
        }

    @abstractmethod
    def _solve(self) -> Dict[str, Any]:
        """
        Solve the segment.

        Returns:
            Dictionary with at least `outlet_pressure` (psig),
            `pressure_drop` (psi) and `flow_velocity` (ft/s)
        """
        raise NotImplementedError

    def calculate(self) -> Dict[str, Any]:
        """
        Calculate gas flow through the segment.

        Returns:
            Dictionary containing calculated results
        """
        # Degenerate inputs yield inf/nan rather than raising
        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            result = self._solve()
        result["formula"] = self.FORMULA
        result["diameter"] = self.diameter
        result["length"] = self.length
        result["gas_rate"] = self.flow_scfm
        return result

    def trace(self, result: Dict[str, Any]) -> CalculationTrace:
        """
        Build the calculation trace for a solved segment.

        The trace is recomputed from the final pressure drop, so it describes
        the state the reported velocity and pressure drop settle on.

        Args:
            result: Dictionary returned by `calculate`

        Returns:
            Calculation trace
        """
        outlet_pressure = self.upstream_pressure - result["pressure_drop"]
        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            p_avg = self._calculate_avg_pressure(outlet_pressure)
            q_acfm = self._calculate_actual_flow_rate(p_avg)
            rho = self._calculate_gas_density(p_avg)
        return CalculationTrace(
            formula=self.FORMULA,
            p_avg_abs_psia=p_avg,
            rho=rho,
            q_acfm=q_acfm,
            q_cfs=q_acfm / 60,
            recommended_pipe=PipeTrace(
                d_ft=self.d_ft,
                area_ft2=self.area,
                reynolds=result.get("reynolds_number"),
                friction_factor=result.get("friction_factor"),
                flow_regime=result.get("flow_regime"),
            ),
        )
