# src/dcmna_core/analysis/results.py
"""
Immutable result contracts produced by the ``ResultInterpreter``.
"""
from dataclasses import dataclass
from typing import Tuple

from ..data_structures import ComponentType


@dataclass(frozen=True)
class ComponentResult:
    """
    Physical quantities derived for one component after the solve.

    ``voltage`` is V(first node) - V(second node); ``current`` is signed by the
    same orientation; ``power`` is the unsigned magnitude |voltage * current|.
    """
    component_id: str
    kind: ComponentType
    nodes: Tuple[str, str]
    voltage: float
    current: float
    power: float


@dataclass(frozen=True)
class PowerBalance:
    """
    Energy-balance check of a solved circuit. Informational only: an unbalanced
    result is still returned to the caller.
    """
    dissipated: float
    supplied: float
    tolerance: float

    @property
    def difference(self) -> float:
        return abs(self.supplied - self.dissipated)

    @property
    def is_balanced(self) -> bool:
        return self.difference <= self.tolerance
