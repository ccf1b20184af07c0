# app/schemas/network.py
import math
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, computed_field
from typing import Annotated, List, Optional, Literal
from enum import Enum

from app.core.constants import SCHEDULE_40_SIZES


class GasKind(str, Enum):
    AIR = "air"
    FUEL_GAS = "fuel_gas"


class SizingStatus(str, Enum):
    OK = "OK"
    HIGH_VELOCITY = "High velocity"
    EXCESSIVE_PRESSURE_DROP = "Excessive pressure drop"
    HIGH_VELOCITY_AND_PRESSURE_DROP = "High velocity & excessive pressure drop"
    INSUFFICIENT_OUTLET_PRESSURE = "Insufficient outlet pressure"
    INACTIVE = "Inactive"
    NO_FEASIBLE_SIZE = "No feasible size"


class CapacityStatus(str, Enum):
    OK = "OK"
    SHORTFALL = "Shortfall"
    NO_DEMAND = "No demand"


Severity = Literal["ok", "warn", "bad"]


def _finite_or_none(value: float) -> Optional[float]:
    # JSON has no infinity or NaN
    return value if math.isfinite(value) else None


# Float that serializes to null in JSON when it is not finite
JsonFloat = Annotated[float, PlainSerializer(_finite_or_none, return_type=Optional[float], when_used="json")]


class FrozenModel(BaseModel):
    """Base for value types: immutable once built."""
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class GasProperties(FrozenModel):
    R: float = Field(..., description="Gas constant, ft·lbf/(lbm·°R)")
    nu: float = Field(..., description="Kinematic viscosity, ft²/s")
    name: str = Field(..., description="Display name")


class SystemInputs(FrozenModel):
    inlet_pressure: float = Field(..., description="Inlet pressure, psig")
    available_flow: float = Field(..., description="Available supply flow, SCFM (air) or SCFH (fuel gas)")
    min_outlet_pressure: float = Field(..., description="Minimum acceptable outlet pressure, psig")
    typical_outlet_pressure: Optional[float] = Field(None, description="Typical outlet pressure, psig (advisory only)")
    demand_safety_factor: float = Field(1.0, description="Demand safety factor (>= 1)")
    tank_volume: float = Field(0.0, description="Receiver tank volume, gal")
    gas_kind: GasKind = GasKind.AIR


class HeaderGeometry(FrozenModel):
    header_length: float = Field(..., description="Header equivalent length, ft")
    max_line_velocity: float = Field(..., description="Maximum line velocity, ft/s")
    pipe_roughness: float = Field(0.00015, description="Absolute pipe roughness, ft")
    temperature: float = Field(70.0, description="Gas temperature, °F")


class CandidatePipe(FrozenModel):
    nominal: str = Field(..., description="Nominal size label")
    id_in: float = Field(..., description="Internal diameter, in")
    selected: bool = Field(True, description="Include this size in the search")


def default_pipe_sizes() -> List[CandidatePipe]:
    """Schedule 40 candidate list, 1/4" to 6", ascending."""
    return [CandidatePipe(nominal=nominal, id_in=id_in) for nominal, id_in in SCHEDULE_40_SIZES]


class SubDrop(FrozenModel):
    id: str
    name: str
    length: float = Field(..., description="Segment length, ft")
    req_pressure: float = Field(..., description="Required outlet pressure, psig")
    req_flow: float = Field(..., description="Required flow, SCFM (air) or SCFH (fuel gas)")


class Drop(FrozenModel):
    id: str
    name: str
    length: float = Field(..., description="Segment length, ft")
    req_pressure: float = Field(..., description="Required outlet pressure, psig")
    req_flow: float = Field(..., description="Required flow, SCFM (air) or SCFH (fuel gas)")
    sub_drops: List[SubDrop] = Field(default_factory=list)


class NetworkSizingInput(FrozenModel):
    system: SystemInputs
    geometry: HeaderGeometry
    candidate_pipes: List[CandidatePipe] = Field(default_factory=default_pipe_sizes)
    drops: List[Drop] = Field(default_factory=list)


class SegmentSizingInput(FrozenModel):
    flow_scfm: float = Field(..., description="Design flow, SCFM (safety factor applied)")
    length: float = Field(..., description="Segment length, ft")
    upstream_pressure: float = Field(..., description="Upstream pressure, psig")
    downstream_pressure: float = Field(..., description="Required downstream pressure, psig")
    max_velocity: float = Field(..., description="Maximum line velocity, ft/s")
    temperature: float = Field(70.0, description="Gas temperature, °F")
    roughness: float = Field(0.00015, description="Absolute pipe roughness, ft")
    candidate_pipes: List[CandidatePipe] = Field(default_factory=default_pipe_sizes)
    gas_kind: GasKind = GasKind.AIR


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class SizingOutcomeRow(FrozenModel):
    nominal: str
    id_in: float
    velocity: JsonFloat
    delta_p: JsonFloat
    outlet_pressure: Optional[JsonFloat] = None  # header rows only, psig
    status: SizingStatus
    severity: Severity


class PipeTrace(FrozenModel):
    d_ft: float
    area_ft2: float
    reynolds: Optional[float] = None
    friction_factor: Optional[float] = None
    flow_regime: Optional[str] = None


class CalculationTrace(FrozenModel):
    formula: str
    p_avg_abs_psia: float
    rho: float
    q_acfm: float
    q_cfs: float
    recommended_pipe: Optional[PipeTrace] = None


class SampleDropTrace(CalculationTrace):
    name: str
    q_scfm: float
    allowed_delta_p: float


class SegmentSizingResult(FrozenModel):
    table: List[SizingOutcomeRow]
    recommended: str
    velocity: JsonFloat
    delta_p: JsonFloat
    outlet_pressure: Optional[JsonFloat] = None
    status: SizingStatus
    details: Optional[CalculationTrace] = None


class HeaderResult(FrozenModel):
    recommended_size: str
    outlet_pressure: JsonFloat
    design_scfm: float
    velocity: JsonFloat
    status: SizingStatus
    comparison_table: List[SizingOutcomeRow]


class SubDropResult(FrozenModel):
    name: str
    req_pressure: float
    req_flow: float
    length: float
    design_scfm: float
    recommended_size: str
    status: SizingStatus
    velocity: JsonFloat
    delta_p: JsonFloat
    sizing_options: List[SizingOutcomeRow]


class DropResult(FrozenModel):
    id: str
    name: str
    length: float
    req_pressure: float
    req_flow: float
    sub_drop_total_flow: float
    used_flow: float
    design_scfm: float
    is_sized_on_sub_drops: bool
    recommended_size: str
    status: SizingStatus
    velocity: JsonFloat
    delta_p: JsonFloat
    comparison_table: List[SizingOutcomeRow]
    sub_drop_results: List[SubDropResult]


class TankMetrics(FrozenModel):
    equivalent_storage_scf: float
    reference_flow_scfm: float
    coverage_time_minutes: JsonFloat  # +inf when unbounded
    is_covering_deficit: bool

    @computed_field
    @property
    def coverage_unbounded(self) -> bool:
        return math.isinf(self.coverage_time_minutes)


class GasTrace(FrozenModel):
    name: str
    R: float
    nu: float


class CalculationDetails(FrozenModel):
    gas: GasTrace
    header: Optional[CalculationTrace] = None
    sample_drop: Optional[SampleDropTrace] = None


class CalculationResult(FrozenModel):
    flow_unit: str
    total_demand_scfm: float
    total_design_demand_scfm: float
    capacity_status: CapacityStatus
    capacity_margin_or_deficit_scfm: float
    header_design_scfm: float
    header: Optional[HeaderResult] = None
    drops: List[DropResult]
    tank_metrics: Optional[TankMetrics] = None
    details: CalculationDetails
