# app/services/sizing/segment.py
import logging
from typing import List, Literal, Optional

from app.core.constants import (
    INACTIVE_LABEL,
    MIN_ALLOWED_DELTA_P,
    NO_FEASIBLE_LABEL,
    SEVERITY_BAD_MULTIPLIER,
)
from app.schemas.network import (
    CandidatePipe,
    GasKind,
    SegmentSizingResult,
    Severity,
    SizingOutcomeRow,
    SizingStatus,
)
from .correlations import get_correlation
from .gas_properties import get_gas_properties

logger = logging.getLogger(__name__)

AcceptancePolicy = Literal["pressure_drop", "outlet_pressure"]


def classify_pressure_drop(velocity_ok: bool, pressure_ok: bool) -> SizingStatus:
    """Status for a segment judged against a pressure drop budget."""
    if not velocity_ok and not pressure_ok:
        return SizingStatus.HIGH_VELOCITY_AND_PRESSURE_DROP
    if not velocity_ok:
        return SizingStatus.HIGH_VELOCITY
    if not pressure_ok:
        return SizingStatus.EXCESSIVE_PRESSURE_DROP
    return SizingStatus.OK


def classify_outlet_pressure(velocity_ok: bool, pressure_ok: bool) -> SizingStatus:
    """Status for a segment judged against a minimum outlet pressure."""
    if not velocity_ok and not pressure_ok:
        return SizingStatus.HIGH_VELOCITY_AND_PRESSURE_DROP
    if not velocity_ok:
        return SizingStatus.HIGH_VELOCITY
    if not pressure_ok:
        return SizingStatus.INSUFFICIENT_OUTLET_PRESSURE
    return SizingStatus.OK


def calculate_severity(
    is_ok: bool,
    velocity: float,
    max_velocity: float,
    delta_p: float,
    allowed_delta_p: float,
) -> Severity:
    """
    Severity tier of a candidate.

    A failing candidate is "bad" when it overshoots the velocity ceiling or
    the allowed pressure drop by more than 50%, otherwise "warn".
    """
    if is_ok:
        return "ok"
    velocity_exceeded_badly = velocity > SEVERITY_BAD_MULTIPLIER * max_velocity
    pressure_exceeded_badly = allowed_delta_p > 0 and delta_p > SEVERITY_BAD_MULTIPLIER * allowed_delta_p
    return "bad" if velocity_exceeded_badly or pressure_exceeded_badly else "warn"


def size_segment(
    flow_scfm: float,
    length: float,
    upstream_pressure: float,
    downstream_pressure: float,
    max_velocity: float,
    temperature: float,
    roughness: float,
    candidate_pipes: List[CandidatePipe],
    gas_kind: GasKind,
    acceptance: AcceptancePolicy = "pressure_drop",
    seed_pressure: Optional[float] = None,
) -> SegmentSizingResult:
    """
    Evaluate every included candidate diameter for one pipe segment.

    Candidates are evaluated in list order and the first one with status OK
    is recommended, so callers wanting "smallest adequate pipe" must pass the
    candidates in ascending diameter order.

    Args:
        flow_scfm: Design flow in SCFM (safety factor already applied)
        length: Segment length in feet
        upstream_pressure: Upstream pressure in psig
        downstream_pressure: Required downstream pressure in psig. With the
            "pressure_drop" policy it sets the allowed drop budget; with the
            "outlet_pressure" policy it is the minimum acceptable outlet.
        max_velocity: Velocity ceiling in ft/s
        temperature: Gas temperature in °F
        roughness: Absolute pipe roughness in feet
        candidate_pipes: Ordered candidate list
        gas_kind: Gas kind, selects the correlation
        acceptance: Acceptance policy ("pressure_drop" for drops and
            sub-drops, "outlet_pressure" for the header)
        seed_pressure: Outlet pressure seed for the iterative air solve in
            psig (defaults to `downstream_pressure`)

    Returns:
        Segment sizing result
    """
    if flow_scfm <= 0:
        return SegmentSizingResult(
            table=[],
            recommended=INACTIVE_LABEL,
            velocity=0.0,
            delta_p=0.0,
            status=SizingStatus.INACTIVE,
        )

    gas = get_gas_properties(gas_kind)
    correlation_cls = get_correlation(gas_kind)
    report_outlet = acceptance == "outlet_pressure"

    if report_outlet:
        allowed_delta_p = upstream_pressure - downstream_pressure
    else:
        allowed_delta_p = max(MIN_ALLOWED_DELTA_P, upstream_pressure - downstream_pressure)

    if seed_pressure is None:
        seed_pressure = downstream_pressure

    rows: List[SizingOutcomeRow] = []
    solved = []

    for pipe in candidate_pipes:
        if not pipe.selected:
            continue

        correlation = correlation_cls(
            diameter=pipe.id_in,
            length=length,
            flow_scfm=flow_scfm,
            upstream_pressure=upstream_pressure,
            downstream_pressure=seed_pressure,
            temperature=temperature,
            roughness=roughness,
            gas=gas,
        )
        result = correlation.calculate()

        velocity = result["flow_velocity"]
        delta_p = result["pressure_drop"]
        outlet_pressure = result["outlet_pressure"]

        velocity_ok = velocity <= max_velocity
        if report_outlet:
            status = classify_outlet_pressure(velocity_ok, outlet_pressure >= downstream_pressure)
        else:
            status = classify_pressure_drop(velocity_ok, delta_p <= allowed_delta_p)

        rows.append(SizingOutcomeRow(
            nominal=pipe.nominal,
            id_in=pipe.id_in,
            velocity=velocity,
            delta_p=delta_p,
            outlet_pressure=outlet_pressure if report_outlet else None,
            status=status,
            severity=calculate_severity(
                status == SizingStatus.OK, velocity, max_velocity, delta_p, allowed_delta_p
            ),
        ))
        solved.append((correlation, result))

    recommended_index = next(
        (i for i, row in enumerate(rows) if row.status == SizingStatus.OK), None
    )

    if recommended_index is not None:
        row = rows[recommended_index]
        correlation, result = solved[recommended_index]
        logger.debug(
            f"Recommended {row.nominal} at {flow_scfm:.2f} SCFM: "
            f"v={row.velocity:.2f} ft/s, dP={row.delta_p:.3f} psi"
        )
        return SegmentSizingResult(
            table=rows,
            recommended=row.nominal,
            velocity=row.velocity,
            delta_p=row.delta_p,
            outlet_pressure=row.outlet_pressure,
            status=row.status,
            details=correlation.trace(result),
        )

    logger.debug(f"No feasible size among {len(rows)} candidates at {flow_scfm:.2f} SCFM")
    if rows:
        first = rows[0]
        return SegmentSizingResult(
            table=rows,
            recommended=NO_FEASIBLE_LABEL,
            velocity=first.velocity,
            delta_p=first.delta_p,
            outlet_pressure=first.outlet_pressure,
            status=first.status,
        )
    return SegmentSizingResult(
        table=rows,
        recommended=NO_FEASIBLE_LABEL,
        velocity=0.0,
        delta_p=0.0,
        status=SizingStatus.NO_FEASIBLE_SIZE,
    )
