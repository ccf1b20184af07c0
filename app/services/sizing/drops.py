# app/services/sizing/drops.py
import logging
from typing import List, Optional, Tuple

from app.core.constants import MAX_SUB_DROP_OPTIONS, MIN_ALLOWED_DELTA_P
from app.schemas.network import (
    CandidatePipe,
    Drop,
    DropResult,
    HeaderGeometry,
    SampleDropTrace,
    SizingOutcomeRow,
    SubDrop,
    SubDropResult,
    SystemInputs,
)
from app.utils.conversions import to_scfm
from .segment import size_segment

logger = logging.getLogger(__name__)


def select_sizing_options(table: List[SizingOutcomeRow]) -> List[SizingOutcomeRow]:
    """
    Pick up to three presentable options from a comparison table.

    Fully acceptable rows are preferred in candidate order; when there are
    none, the first rows of the table are returned so there is always
    something to show.
    """
    ok_rows = [row for row in table if row.severity == "ok"]
    if ok_rows:
        return ok_rows[:MAX_SUB_DROP_OPTIONS]
    return table[:MAX_SUB_DROP_OPTIONS]


def size_sub_drop(
    sub_drop: SubDrop,
    system: SystemInputs,
    geometry: HeaderGeometry,
    pipes: List[CandidatePipe],
) -> SubDropResult:
    design_scfm = to_scfm(sub_drop.req_flow * system.demand_safety_factor, system.gas_kind)

    sizing = size_segment(
        flow_scfm=design_scfm,
        length=sub_drop.length,
        upstream_pressure=system.inlet_pressure,
        downstream_pressure=sub_drop.req_pressure,
        max_velocity=geometry.max_line_velocity,
        temperature=geometry.temperature,
        roughness=geometry.pipe_roughness,
        candidate_pipes=pipes,
        gas_kind=system.gas_kind,
    )

    return SubDropResult(
        name=sub_drop.name,
        req_pressure=sub_drop.req_pressure,
        req_flow=sub_drop.req_flow,
        length=sub_drop.length,
        design_scfm=design_scfm,
        recommended_size=sizing.recommended,
        status=sizing.status,
        velocity=sizing.velocity,
        delta_p=sizing.delta_p,
        sizing_options=select_sizing_options(sizing.table),
    )


def calculate_drops_sizing(
    drops: List[Drop],
    system: SystemInputs,
    geometry: HeaderGeometry,
    pipes: List[CandidatePipe],
) -> Tuple[List[DropResult], Optional[SampleDropTrace]]:
    """
    Size every drop and its sub-drops.

    A drop is sized on the larger of its own declared flow and the sum of
    its sub-drops' flows. Sub-drops are sized independently on their own
    flow. All design flows include the safety factor and are in SCFM.

    Returns:
        Tuple of (drop results in input order, trace of the first drop with
        a positive design flow)
    """
    drop_results: List[DropResult] = []
    sample_trace: Optional[SampleDropTrace] = None
    first_active_seen = False

    for drop in drops:
        sub_drop_total_flow = sum(sd.req_flow for sd in drop.sub_drops)
        used_flow = max(drop.req_flow, sub_drop_total_flow)
        design_scfm = to_scfm(used_flow * system.demand_safety_factor, system.gas_kind)

        sizing = size_segment(
            flow_scfm=design_scfm,
            length=drop.length,
            upstream_pressure=system.inlet_pressure,
            downstream_pressure=drop.req_pressure,
            max_velocity=geometry.max_line_velocity,
            temperature=geometry.temperature,
            roughness=geometry.pipe_roughness,
            candidate_pipes=pipes,
            gas_kind=system.gas_kind,
        )

        if not first_active_seen and design_scfm > 0:
            first_active_seen = True
            if sizing.details is not None:
                sample_trace = SampleDropTrace(
                    **sizing.details.model_dump(),
                    name=drop.name,
                    q_scfm=design_scfm,
                    allowed_delta_p=max(MIN_ALLOWED_DELTA_P, system.inlet_pressure - drop.req_pressure),
                )

        sub_drop_results = [size_sub_drop(sd, system, geometry, pipes) for sd in drop.sub_drops]

        is_sized_on_sub_drops = sub_drop_total_flow > drop.req_flow and drop.req_flow >= 0
        if is_sized_on_sub_drops:
            logger.debug(
                f"Drop '{drop.name}' sized on sub-drops: {sub_drop_total_flow} > {drop.req_flow}"
            )

        drop_results.append(DropResult(
            id=drop.id,
            name=drop.name,
            length=drop.length,
            req_pressure=drop.req_pressure,
            req_flow=drop.req_flow,
            sub_drop_total_flow=sub_drop_total_flow,
            used_flow=used_flow,
            design_scfm=design_scfm,
            is_sized_on_sub_drops=is_sized_on_sub_drops,
            recommended_size=sizing.recommended,
            status=sizing.status,
            velocity=sizing.velocity,
            delta_p=sizing.delta_p,
            comparison_table=sizing.table,
            sub_drop_results=sub_drop_results,
        ))

    return drop_results, sample_trace
