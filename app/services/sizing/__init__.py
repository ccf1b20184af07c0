# app/services/sizing/__init__.py

"""
Sizing module for compressed-gas distribution networks.

This module includes:
- Single-segment candidate evaluation (compressed air and fuel gas)
- Header sizing against a minimum outlet pressure
- Drop / sub-drop demand aggregation and sizing
- Capacity and receiver tank buffer analysis
"""

from .engine import (
    perform_all_calculations,
    calculate_network,
    calculate_segment,
    get_example_input
)
from .segment import size_segment
from .sizing_service import sizing_service

__version__ = "1.0.0"
