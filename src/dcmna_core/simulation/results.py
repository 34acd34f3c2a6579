# src/dcmna_core/simulation/results.py
"""
Defines the formal, type-safe data contracts that flow through the assembly and
solve pipeline and the user-facing outcome of an analysis.

All contracts are frozen dataclasses. Arrays held by them are made read-only
when the contract is created so a returned snapshot cannot be altered.
"""
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple, Union

import numpy as np

from ..analysis.results import ComponentResult, PowerBalance
from ..data_structures import AnalysisMethod
from ..trace import StepRecord
from .exceptions import SingularMatrixError


def _frozen_array(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class LinearSystem:
    """
    The MNA system A·x = b for one analysis.

    Attributes:
        matrix: The N×N coefficient matrix A.
        rhs: The length-N right-hand side b.
        unknown_labels: Symbolic name of each unknown, in vector order
                        (``V1..Vn`` for node potentials, then ``I1..Im`` for
                        voltage-source branch currents).
        num_node_unknowns: How many leading unknowns are node potentials.
    """
    matrix: np.ndarray
    rhs: np.ndarray
    unknown_labels: Tuple[str, ...]
    num_node_unknowns: int

    def __post_init__(self):
        object.__setattr__(self, 'matrix', _frozen_array(self.matrix))
        object.__setattr__(self, 'rhs', _frozen_array(self.rhs))
        n = len(self.unknown_labels)
        if self.matrix.shape != (n, n) or self.rhs.shape != (n,):
            raise ValueError(
                f"LinearSystem shape mismatch: matrix {self.matrix.shape}, rhs {self.rhs.shape}, "
                f"{n} unknown labels."
            )

    @property
    def size(self) -> int:
        return len(self.unknown_labels)


@dataclass(frozen=True, eq=False)
class EliminationOutcome:
    """
    Result of ``solve_linear_system``: either a solution vector or a singular
    signal, always accompanied by the elimination records produced so far.
    """
    solution: Optional[np.ndarray]
    steps: Tuple[StepRecord, ...]
    singular_pivot_row: Optional[int] = None

    def __post_init__(self):
        if self.solution is not None:
            object.__setattr__(self, 'solution', _frozen_array(self.solution))

    @property
    def singular(self) -> bool:
        return self.solution is None


@dataclass(frozen=True, eq=False)
class AnalysisResult:
    """
    The user-facing outcome of a successful analysis.

    Attributes:
        circuit_name: Name of the analysed circuit.
        method: The analysis method the circuit requested.
        node_voltages: Potential (volts) of every node, ground included at 0.0.
        component_results: One ``ComponentResult`` per component, in declaration order.
        power_balance: Supplied vs. dissipated power check.
        solution: The raw solution vector x of the MNA system.
        unknown_labels: Symbolic name of each entry of ``solution``.
        steps: The complete, ordered derivation trace.
    """
    circuit_name: str
    method: AnalysisMethod
    node_voltages: Mapping[str, float]
    component_results: Tuple[ComponentResult, ...]
    power_balance: PowerBalance
    solution: np.ndarray
    unknown_labels: Tuple[str, ...]
    steps: Tuple[StepRecord, ...]
    is_success: bool = field(default=True, init=False)

    def __post_init__(self):
        object.__setattr__(self, 'solution', _frozen_array(self.solution))

    def component(self, component_id: str) -> ComponentResult:
        for result in self.component_results:
            if result.component_id == component_id:
                return result
        raise KeyError(component_id)

    def raise_for_failure(self) -> "AnalysisResult":
        return self


@dataclass(frozen=True)
class AnalysisFailure:
    """
    The user-facing outcome of an analysis whose system has no unique solution.
    Carries the partial trace and an explanatory message; no physical results.
    """
    circuit_name: str
    reason: str
    steps: Tuple[StepRecord, ...]
    pivot_row: Optional[int] = None
    is_success: bool = field(default=False, init=False)

    def raise_for_failure(self):
        raise SingularMatrixError(details=self.reason, circuit_name=self.circuit_name, pivot_row=self.pivot_row)


AnalysisOutcome = Union[AnalysisResult, AnalysisFailure]
