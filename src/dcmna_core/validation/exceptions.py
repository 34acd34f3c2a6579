# src/dcmna_core/validation/exceptions.py
"""
Defines the diagnosable exception raised when a circuit fails boundary validation.
"""
from typing import Iterable, List

from .issues import ValidationIssue, ValidationIssueLevel
from ..errors import DiagnosableError, format_diagnostic_report


def _bulleted(issues: Iterable[ValidationIssue]) -> str:
    return "\n".join(f"  - {issue}" for issue in issues)


class SemanticValidationError(DiagnosableError):
    """
    Raised when the SemanticValidator finds at least one ERROR-level issue.

    Warnings and info findings passed in are dropped; ``issues`` holds the errors only.
    """
    def __init__(self, issues: Iterable[ValidationIssue]):
        self.issues: List[ValidationIssue] = [
            i for i in issues if i.level is ValidationIssueLevel.ERROR
        ]
        count = len(self.issues)
        super().__init__(
            f"Circuit rejected with {count} error(s):\n{_bulleted(self.issues)}"
            if count else "Circuit rejected without any error-level issue."
        )

    def get_diagnostic_report(self) -> str:
        context = {}
        if self.issues:
            first = self.issues[0]
            context = {
                'circuit': first.circuit_name,
                'component_id': first.component_id,
                'source_file': first.details.get('source_file'),
            }
        return format_diagnostic_report(
            error_type="Circuit Semantic Validation Error",
            details=(
                "The circuit cannot be turned into a solvable MNA system.\n"
                f"{len(self.issues)} error(s) found:\n\n{_bulleted(self.issues)}"
            ),
            suggestion="Fix every error listed above in the netlist or circuit definition, then run the analysis again.",
            context=context,
        )
