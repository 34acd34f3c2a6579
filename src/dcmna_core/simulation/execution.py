# src/dcmna_core/simulation/execution.py
"""
Provides the primary public API function for running an analysis.

This module is a thin Facade over the internal services (`SemanticValidator`,
`AnalysisEngine`). Its responsibilities are:

1.  **Expose `run_analysis`:** The user-facing entry point for a DC analysis.
2.  **Guard the boundary:** Semantic validation runs before any matrix is built,
    so the assembler only ever sees structurally sound circuits.
3.  **Enforce explicit contracts:** It returns an `AnalysisResult` or, when the
    system is singular, an `AnalysisFailure`. A singular system is an expected
    outcome and is never raised.
4.  **Top-level error handling:** Any `DiagnosableError` is presented to the
    user as a single, actionable `AnalysisRunError`.
"""
import logging

from ..data_structures import Circuit
from ..errors import AnalysisRunError, DiagnosableError, format_diagnostic_report
from ..validation import SemanticValidator
from .engine import AnalysisEngine
from .results import AnalysisOutcome

logger = logging.getLogger(__name__)


def run_analysis(circuit: Circuit) -> AnalysisOutcome:
    """
    Runs a DC Modified Nodal Analysis of ``circuit``.

    The call is a pure function of its input: it builds its own matrix, trace and
    results, and the same circuit always yields the same outcome.

    Args:
        circuit: The circuit to analyse, e.g. from `NetlistParser.load_circuit`
                 or the example catalog.

    Returns:
        ``AnalysisResult`` (``is_success`` True) with node voltages, component
        results, power balance and the complete step trace; or
        ``AnalysisFailure`` (``is_success`` False) with the reason and the
        partial trace when the system has no unique solution.

    Raises:
        AnalysisRunError: If the circuit fails semantic validation or the analysis
                          fails unexpectedly. The original exception is chained.
    """
    try:
        logger.info(f"--- Starting DC analysis for '{circuit.name}' ---")
        SemanticValidator(circuit).raise_for_errors()

        outcome = AnalysisEngine(circuit).execute()
        if outcome.is_success:
            logger.info(f"--- DC analysis for '{circuit.name}' successful. ---")
        else:
            logger.info(f"--- DC analysis for '{circuit.name}' ended with a singular system. ---")
        return outcome

    except DiagnosableError as e:
        logger.error(f"A diagnosable error occurred during analysis: {e}")
        raise AnalysisRunError(e.get_diagnostic_report()) from e

    except Exception as e:
        logger.critical(f"An unexpected internal error occurred during analysis: {e}", exc_info=True)
        report = format_diagnostic_report(
            error_type=f"An Unexpected Analysis Error Occurred ({type(e).__name__})",
            details=f"The analysis encountered an unexpected internal error: {e}",
            suggestion="This may be a bug. Review the traceback and consider filing a bug report.",
            context={'circuit': getattr(circuit, 'name', None)}
        )
        raise AnalysisRunError(report) from e
