# --- src/dcmna_core/units.py ---
"""
Unit handling for circuit magnitudes.

Resistance prefixes are resolved through the pint registry so that every
multiplier is backed by pint's SI definitions rather than a hand-written table.
Unit tags that are not listed in ``UNIT_ALIASES`` are treated as already being
in base units and pass through unscaled.
"""
import logging
from typing import Dict

import pint

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.debug("Pint Unit Registry initialized.")

RESISTANCE_DIMENSIONALITY = ureg.parse_expression('ohm').dimensionality

#: Netlist unit tags mapped to the pint unit they stand for. The Greek capital
#: omega (U+03A9) and the ohm sign (U+2126) are both accepted.
UNIT_ALIASES: Dict[str, str] = {
    "Ω": "ohm",
    "kΩ": "kiloohm",
    "MΩ": "megaohm",
    "mΩ": "milliohm",
    "Ω": "ohm",
    "kΩ": "kiloohm",
    "MΩ": "megaohm",
    "mΩ": "milliohm",
}

# Base unit each pint dimensionality is normalised to.
_BASE_UNITS = {
    RESISTANCE_DIMENSIONALITY: ureg.ohm,
}


def _multiplier_for(unit: str) -> float:
    pint_unit = ureg.Unit(UNIT_ALIASES[unit])
    base_unit = _BASE_UNITS[pint_unit.dimensionality]
    return float(Quantity(1.0, pint_unit).to(base_unit).magnitude)


# Resolved once at import; the pint registry is not consulted during analysis.
UNIT_MULTIPLIERS: Dict[str, float] = {unit: _multiplier_for(unit) for unit in UNIT_ALIASES}


def is_known_unit(unit: str) -> bool:
    """Returns True if ``unit`` carries a multiplier (i.e. is not a pass-through tag)."""
    return unit in UNIT_MULTIPLIERS


def to_base_units(magnitude: float, unit: str) -> float:
    """
    Converts an engineering-prefixed magnitude to base SI units.

    Args:
        magnitude: The value as written in the netlist (e.g. ``2.2``).
        unit: The unit tag (e.g. ``'kΩ'``).

    Returns:
        The magnitude in ohms for resistance tags. Any other tag, including
        ``'V'`` and ``'A'``, is returned unscaled.
    """
    multiplier = UNIT_MULTIPLIERS.get(unit)
    if multiplier is None:
        logger.debug(f"Unit '{unit}' has no multiplier; passing magnitude {magnitude} through unscaled.")
        return float(magnitude)
    return float(magnitude) * multiplier
