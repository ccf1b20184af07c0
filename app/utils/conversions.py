# app/utils/conversions.py
from app.schemas.network import GasKind
from app.core.constants import P_ATM_PSIA, GALLONS_PER_FT3

# Minutes per hour, used between SCFM and SCFH
MINUTES_PER_HOUR = 60.0


def to_rankine(temp_f):
    """Convert temperature from Fahrenheit to Rankine."""
    return temp_f + 459.67

def psig_to_psia(pressure_psig):
    """Convert gauge pressure to absolute pressure."""
    return pressure_psig + P_ATM_PSIA

def gallons_to_ft3(volume_gal):
    """Convert a volume in US gallons to cubic feet."""
    return volume_gal / GALLONS_PER_FT3

def inches_to_feet(length_in):
    return length_in / 12.0

def flow_unit(gas_kind: GasKind) -> str:
    """
    User-facing flow unit for a gas kind.

    Compressed air is stated in SCFM, fuel gas (as on appliance nameplates)
    in SCFH.
    """
    return "SCFH" if gas_kind == GasKind.FUEL_GAS else "SCFM"

def to_scfm(flow, gas_kind: GasKind):
    """Convert a flow stated in the user unit of `gas_kind` to SCFM."""
    if gas_kind == GasKind.FUEL_GAS:
        return flow / MINUTES_PER_HOUR
    return flow

def scfm_to_scfh(flow_scfm):
    return flow_scfm * MINUTES_PER_HOUR
