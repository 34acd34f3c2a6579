# src/dcmna_core/simulation/exceptions.py
"""
Defines the diagnosable exceptions of the assembly and solve phase.

A singular system is a normal analysis outcome (``AnalysisFailure``) and is
never raised by the engine itself. ``SingularMatrixError`` exists for callers
that prefer exceptions and opt in through ``AnalysisFailure.raise_for_failure()``.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass(eq=False)
class MnaInputError(DiagnosableError):
    """
    Raised when the MNA assembler is handed a circuit that breaks its input
    contract (e.g. a component referencing a node that does not exist).
    """
    circuit_name: str
    details: str

    def __str__(self):
        return f"MNA input error in circuit '{self.circuit_name}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="MNA Input Error",
            details=self.details,
            suggestion="Validate the circuit with SemanticValidator before assembly; every component terminal must reference a declared node or the ground node.",
            context={'circuit': self.circuit_name}
        )


@dataclass(eq=False)
class SingularMatrixError(DiagnosableError, np.linalg.LinAlgError):
    """
    Raised on request when the assembled system has no unique solution.

    Catchable both as ``DiagnosableError`` and as numpy's ``LinAlgError``.
    """
    details: str
    circuit_name: Optional[str] = None
    pivot_row: Optional[int] = None

    def __str__(self):
        where = f" at pivot row {self.pivot_row + 1}" if self.pivot_row is not None else ""
        return f"Singular system detected{where}: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Singular System (No Unique Solution)",
            details=self.details,
            suggestion="This is usually caused by a floating node or sub-network with no path to ground, or by voltage sources that force contradictory potentials. Check the circuit topology.",
            context={
                'circuit': self.circuit_name,
                'pivot_row': self.pivot_row + 1 if self.pivot_row is not None else None,
            }
        )
