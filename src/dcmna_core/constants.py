# --- src/dcmna_core/constants.py ---
import logging

logger = logging.getLogger(__name__)

# --- Numerical Constants for Analysis ---

#: Magnitude below which a pivot is considered zero (singular system), and at or
#: below which an elimination factor is considered already eliminated.
#: Fixed for the analysis pipeline; the solver accepts an override for tests only.
PIVOT_TOLERANCE: float = 1.0e-10

#: Maximum absolute difference, in watts, between total supplied and total
#: dissipated power for the energy balance to be reported as verified.
POWER_BALANCE_TOLERANCE_WATTS: float = 1.0e-3 # Watts

#: Identifier of the reference node when a netlist does not name one.
DEFAULT_GROUND_NODE_ID: str = "gnd"

logger.debug("Defined core constants: PIVOT_TOLERANCE, POWER_BALANCE_TOLERANCE_WATTS, DEFAULT_GROUND_NODE_ID")
