# src/dcmna_core/catalog.py
"""
Built-in example circuits: five textbook DC exercises, numbered from 1.
"""
import logging
from typing import Tuple

from .data_structures import AnalysisMethod, Circuit, Component, ComponentType, Node

logger = logging.getLogger(__name__)


def _nodes(*ids: str) -> Tuple[Node, ...]:
    return tuple(Node(id=i, name=f"Node {i[1:]}") for i in ids) + (Node(id="gnd", name="Ground"),)


def _r(cid: str, a: str, b: str, value: float, unit: str) -> Component:
    return Component(id=cid, kind=ComponentType.RESISTOR, nodes=(a, b), value=value, unit=unit)


def _v(cid: str, a: str, b: str, value: float) -> Component:
    return Component(id=cid, kind=ComponentType.VOLTAGE_SOURCE, nodes=(a, b), value=value, unit="V")


EXAMPLE_CIRCUITS: Tuple[Circuit, ...] = (
    Circuit(
        name="Exercise 1: series and parallel resistors",
        nodes=_nodes("n1", "n2", "n3"),
        components=(
            _v("V1", "n1", "gnd", 50),
            _r("R1", "n1", "n2", 100, "Ω"),
            _r("R2", "n2", "gnd", 60, "Ω"),
            _r("R3", "n2", "n3", 120, "Ω"),
            _r("R4", "n3", "gnd", 400, "Ω"),
        ),
        method=AnalysisMethod.NODAL,
    ),
    Circuit(
        name="Exercise 2: source with three resistors",
        nodes=_nodes("n1", "n2"),
        components=(
            _v("V1", "n1", "gnd", 10),
            _r("R1", "n1", "n2", 2, "kΩ"),
            _r("R2", "n2", "gnd", 3, "kΩ"),
            _r("R3", "n2", "gnd", 2, "kΩ"),
        ),
        method=AnalysisMethod.NODAL,
    ),
    Circuit(
        name="Exercise 3: mixed series-parallel circuit",
        nodes=_nodes("n1", "n2", "n3"),
        components=(
            _v("V1", "n1", "gnd", 24),
            _r("R1", "n1", "n2", 5, "kΩ"),
            _r("R2", "n2", "n3", 4, "kΩ"),
            _r("R3", "n3", "gnd", 2, "kΩ"),
            _r("R4", "n2", "gnd", 6, "kΩ"),
            _r("R5", "n3", "gnd", 4, "kΩ"),
            _r("R6", "n3", "gnd", 2, "kΩ"),
        ),
        method=AnalysisMethod.NODAL,
    ),
    Circuit(
        name="Exercise 4: multiple branches",
        nodes=_nodes("n1", "n2", "n3"),
        components=(
            _v("V1", "n1", "gnd", 70),
            _r("R1", "n1", "n2", 10, "Ω"),
            _r("R2", "n2", "gnd", 30, "Ω"),
            _r("R3", "n2", "n3", 40, "Ω"),
            _r("R4", "n3", "gnd", 16, "Ω"),
            _r("R5", "n3", "gnd", 6, "Ω"),
        ),
        method=AnalysisMethod.NODAL,
    ),
    Circuit(
        name="Exercise 5: 12 V ladder",
        nodes=_nodes("n1", "n2", "n3"),
        components=(
            _v("V1", "n1", "gnd", 12),
            _r("R1", "n1", "n2", 220, "Ω"),
            _r("R2", "n2", "gnd", 380, "Ω"),
            _r("R3", "n2", "n3", 1, "kΩ"),
            _r("R4", "n3", "gnd", 1.5, "kΩ"),
        ),
        method=AnalysisMethod.NODAL,
    ),
)


def get_example(number: int) -> Circuit:
    """
    Returns example ``number`` (1-based).

    Raises:
        KeyError: If no example has that number.
    """
    if not 1 <= number <= len(EXAMPLE_CIRCUITS):
        raise KeyError(f"Example {number} does not exist; choose 1 to {len(EXAMPLE_CIRCUITS)}.")
    logger.debug(f"Loading example {number}: '{EXAMPLE_CIRCUITS[number - 1].name}'.")
    return EXAMPLE_CIRCUITS[number - 1]
