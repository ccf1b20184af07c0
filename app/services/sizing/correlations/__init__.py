# app/services/sizing/correlations/__init__.py
from typing import Type

from app.schemas.network import GasKind
from .base import SegmentCorrelation
from .darcy_weisbach import IterativeDarcyWeisbach, calculate_darcy_weisbach
from .ifgc import IFGCFuelGas, calculate_ifgc

CORRELATIONS = {
    GasKind.AIR: IterativeDarcyWeisbach,
    GasKind.FUEL_GAS: IFGCFuelGas,
}


def get_correlation(gas_kind: GasKind) -> Type[SegmentCorrelation]:
    """Correlation class used for a gas kind."""
    return CORRELATIONS[GasKind(gas_kind)]


__all__ = [
    'SegmentCorrelation',
    'IterativeDarcyWeisbach',
    'IFGCFuelGas',
    'calculate_darcy_weisbach',
    'calculate_ifgc',
    'get_correlation',
]
