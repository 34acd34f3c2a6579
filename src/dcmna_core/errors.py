# src/dcmna_core/errors.py
import logging
from abc import abstractmethod
from typing import Any, Dict, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class DCMnaError(Exception):
    """Base class for all custom, user-facing errors in dcmna_core."""
    pass

class CircuitBuildError(DCMnaError):
    """
    Raised when a circuit cannot be loaded from a netlist, from reading the file
    to schema validation. The message is a pre-formatted diagnostic report.
    """
    pass

class AnalysisRunError(DCMnaError):
    """
    Raised when an analysis cannot be started, e.g. because the circuit fails
    boundary validation. A singular system is NOT reported through this error;
    it is a regular, typed analysis outcome.
    The message is a pre-formatted diagnostic report.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """
    A protocol for exceptions that can generate their own diagnostic report.
    """
    def get_diagnostic_report(self) -> str:
        """Generates a complete, user-friendly, multi-line report string."""
        ...

class DiagnosableError(Exception, Diagnosable):
    """
    Concrete base class for all internal diagnosable exceptions.

    It is catchable in ``except`` clauses and forces subclasses to implement
    ``get_diagnostic_report``.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        raise NotImplementedError


# --- Stateless Formatting Utility ---

# Context keys shown in the report header, in display order.
_CONTEXT_LABELS = (
    ('circuit', "Circuit"),
    ('component_id', "Component"),
    ('source_file', "Source File"),
    ('pivot_row', "Pivot Row"),
)

def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    Formats the final multi-line report string so that every user-facing
    diagnostic has the same layout.

    Args:
        error_type: The high-level category of the error (e.g., "Singular System").
        details: A detailed, potentially multi-line description of the problem.
        suggestion: Actionable advice for the user to resolve the issue.
        context: Contextual information (circuit, component id, source file, ...).

    Returns:
        A formatted report string ready for display.
    """
    header = "================ dcmna_core: Diagnostic Report ================"
    lines = ["\n", header, f"{'Error Type:':<16}{error_type}"]
    for key, label in _CONTEXT_LABELS:
        value = context.get(key)
        if value is None or value == "":
            continue
        lines.append(f"{label + ':':<16}{value}")

    for heading, body in (("Details", details), ("Suggestion", suggestion)):
        if not body:
            continue
        lines.append(f"\n{heading}:")
        lines.extend(f"  {line}" for line in body.splitlines())

    lines.append("=" * len(header))
    return "\n".join(lines)
