"""Named constants for element indices and stellar mass limits.

Element indices are zero-based and follow the order of ``ELEMENT_NAMES``,
which is also the column order expected in the yield tables.
"""

# ---------------------------------------------------------------------------
# Tracked elements
# ---------------------------------------------------------------------------
ELEMENT_NAMES = ("H", "He", "C", "N", "O", "Ne", "Mg", "Si", "Fe")

H = 0         # Hydrogen
HE = 1        # Helium
C = 2         # Carbon
N = 3         # Nitrogen
O = 4         # Oxygen
NE = 5        # Neon
MG = 6        # Magnesium
SI = 7        # Silicon
FE = 8        # Iron

NUM_ELEMENTS = len(ELEMENT_NAMES)

# ---------------------------------------------------------------------------
# Stellar mass limits (log10 Msun)
# ---------------------------------------------------------------------------
LOG10_SNII_MIN_MASS = 0.77815125   # log10(6)
LOG10_SNII_MAX_MASS = 2.0          # log10(100)
LOG10_SNIA_MAX_MASS = 0.90308999   # log10(8)
SNIA_MAX_MASS = 8.0

# ---------------------------------------------------------------------------
# IMF defaults
# ---------------------------------------------------------------------------
IMF_MIN_MASS = 0.1
IMF_MAX_MASS = 100.0
IMF_N_BINS = 200

# ---------------------------------------------------------------------------
# Simulation defaults
# ---------------------------------------------------------------------------
LOG_MIN_METALLICITY = -20.0   # log10 Z assigned to primordial tables
SNIA_EFFICIENCY = 2.0e-3      # SNIa per Msun formed
SNIA_TIMESCALE_GYR = 2.0      # e-folding time of the delay-time distribution
GYR_IN_YR = 1.0e9
