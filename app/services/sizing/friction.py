import numpy as np

from app.core.constants import LAMINAR_REYNOLDS_LIMIT


def friction_factor(roughness: float, diameter: float, reynolds: float) -> float:
    """
    Calculate the Darcy friction factor.

    Laminar flow uses f = 64/Re; turbulent flow uses the Swamee-Jain
    approximation of Colebrook-White.

    Args:
        roughness: Absolute pipe roughness in feet
        diameter: Pipe inside diameter in feet
        reynolds: Reynolds number

    Returns:
        Darcy friction factor
    """
    if reynolds <= LAMINAR_REYNOLDS_LIMIT:
        # Laminar flow
        return float(np.divide(64.0, reynolds))
    log_term = np.log10(np.divide(roughness, 3.7 * diameter) + np.divide(5.74, np.power(reynolds, 0.9)))
    return float(np.divide(0.25, log_term ** 2))


def determine_flow_regime(reynolds: float) -> str:
    """
    Determine flow regime based on Reynolds number.

    Returns:
        Flow regime ("Laminar", "Transitional", or "Turbulent")
    """
    if reynolds <= LAMINAR_REYNOLDS_LIMIT:
        return "Laminar"
    elif reynolds < 4000:
        return "Transitional"
    else:
        return "Turbulent"
