# app/core/constants.py

# Physical constants
P_ATM_PSIA = 14.7  # Standard atmospheric pressure, psia
G_C = 32.174  # Conversion factor, ft-lbm/lbf-s²
GALLONS_PER_FT3 = 7.48
PSF_PER_PSI = 144.0  # lbf/ft² per psi

# Solver settings
AIR_ITERATIONS = 5  # Fixed pass count for the compressible-air solve
MIN_ALLOWED_DELTA_P = 1e-6  # psi, floor for the allowed pressure drop budget
LAMINAR_REYNOLDS_LIMIT = 2300

# IFGC 402.4.1 (Q = 2207 * D^2.582 * ((P1^2 - P2^2) / L)^0.522)
IFGC_COEFFICIENT = 2207.0
IFGC_DIAMETER_EXPONENT = 2.582
IFGC_PRESSURE_EXPONENT = 0.522

# Severity tiers
SEVERITY_BAD_MULTIPLIER = 1.5
MAX_SUB_DROP_OPTIONS = 3

# Sentinel recommendation labels
INACTIVE_LABEL = "N/A (Inactive)"
NO_FEASIBLE_LABEL = "No feasible size"

# Default candidate pipe sizes: (nominal, Schedule 40 internal diameter in inches)
SCHEDULE_40_SIZES = [
    ('1/4"', 0.364),
    ('1/2"', 0.622),
    ('3/4"', 0.824),
    ('1"', 1.049),
    ('1-1/4"', 1.380),
    ('1-1/2"', 1.610),
    ('2"', 2.067),
    ('2-1/2"', 2.469),
    ('3"', 3.068),
    ('4"', 4.026),
    ('5"', 5.047),
    ('6"', 6.065),
]
