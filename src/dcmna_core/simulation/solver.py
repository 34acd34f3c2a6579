# src/dcmna_core/simulation/solver.py
"""
Dense linear solver: Gaussian elimination with partial pivoting.

The solver knows nothing about circuits. It works on an augmented copy of
(A | b), records every transformation as a ``StepRecord`` of phase
``ELIMINATION``, and reports a singular system as a regular outcome instead of
raising.
"""
import logging
from typing import List

import numpy as np

from ..constants import PIVOT_TOLERANCE
from ..trace import EquationLines, StepRecord, TracePhase, matrix_block
from .results import EliminationOutcome

logger = logging.getLogger(__name__)


def _step(title: str, description: str, augmented: np.ndarray) -> StepRecord:
    return StepRecord(
        phase=TracePhase.ELIMINATION,
        title=title,
        description=description,
        payload=matrix_block(augmented, augmented=True),
    )


def solve_linear_system(matrix, rhs, *, tolerance: float = PIVOT_TOLERANCE) -> EliminationOutcome:
    """
    Solves A·x = b by forward elimination with partial pivoting followed by back
    substitution.

    Pivot selection scans column ``i`` from row ``i`` downwards and keeps the first
    strictly larger magnitude, so ties resolve to the lowest row index. A pivot
    whose magnitude is below ``tolerance`` ends the solve with a singular outcome.
    Elimination factors whose magnitude is at or below ``tolerance`` are skipped
    and produce no record.

    Args:
        matrix: The N×N coefficient matrix. Never modified.
        rhs: The length-N right-hand side. Never modified.
        tolerance: Pivot/factor threshold. The analysis pipeline always uses
                   ``PIVOT_TOLERANCE``; overriding it is meant for tests.

    Returns:
        An ``EliminationOutcome`` holding the solution (or ``None`` when singular)
        and the elimination records in the order they were produced.

    Raises:
        ValueError: If the inputs are not a square matrix and a matching vector.
    """
    a = np.array(matrix, dtype=float)
    b = np.array(rhs, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"Coefficient matrix must be square, got shape {a.shape}.")
    if b.shape != (a.shape[0],):
        raise ValueError(f"Right-hand side must have shape ({a.shape[0]},), got {b.shape}.")

    n = a.shape[0]
    augmented = np.hstack([a, b.reshape(n, 1)])
    steps: List[StepRecord] = [
        _step("Initial augmented matrix", "The system [A | b] before elimination:", augmented)
    ]
    logger.debug(f"Starting Gaussian elimination on a {n}x{n} system.")

    # --- Forward elimination ---
    for i in range(n):
        max_row = i
        for k in range(i + 1, n):
            if abs(augmented[k, i]) > abs(augmented[max_row, i]):
                max_row = k

        if max_row != i:
            augmented[[i, max_row]] = augmented[[max_row, i]]
            steps.append(_step(
                f"Step {i + 1}a: swap row {i + 1} with row {max_row + 1}",
                f"Partial pivoting: row {max_row + 1} has the largest magnitude in column {i + 1} "
                f"({abs(augmented[i, i]):.6g}).",
                augmented,
            ))

        pivot = augmented[i, i]
        if abs(pivot) < tolerance:
            logger.info(
                f"Pivot {pivot:.3e} in column {i + 1} is below tolerance {tolerance:.0e}; system is singular."
            )
            return EliminationOutcome(solution=None, steps=tuple(steps), singular_pivot_row=i)

        for k in range(i + 1, n):
            factor = augmented[k, i] / pivot
            if abs(factor) > tolerance:
                # Columns left of i in the pivot row are already eliminated.
                augmented[k, i:] -= factor * augmented[i, i:]
                steps.append(_step(
                    f"Step {i + 1}b: R{k + 1} = R{k + 1} - ({factor:.4f}) x R{i + 1}",
                    f"Eliminate column {i + 1} from row {k + 1} using pivot row {i + 1}; "
                    f"factor = {float(factor)!r}.",
                    augmented,
                ))

    steps.append(_step("Row echelon form", "Upper-triangular system after forward elimination:", augmented))

    # --- Back substitution ---
    x = np.zeros(n, dtype=float)
    for i in range(n - 1, -1, -1):
        acc = augmented[i, n]
        for j in range(i + 1, n):
            acc -= augmented[i, j] * x[j]
        x[i] = acc / augmented[i, i]

    steps.append(StepRecord(
        phase=TracePhase.ELIMINATION,
        title="Back substitution",
        description="Unknowns solved from the last row upwards:",
        payload=EquationLines(tuple(f"x{idx + 1} = {val:.6f}" for idx, val in enumerate(x))),
    ))
    logger.debug(f"Gaussian elimination complete with {len(steps)} recorded steps.")
    return EliminationOutcome(solution=x, steps=tuple(steps))
