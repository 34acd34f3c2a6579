# src/dcmna_core/parser/exceptions.py
"""
Defines the diagnosable exceptions of the netlist loading stage.

`ParsingError` covers file-level and syntax problems (missing file, invalid
YAML, wrong root type). `SchemaValidationError` covers documents that are valid
YAML but do not match the netlist schema. Both derive from `DiagnosableError`,
so `NetlistParser.load_circuit` can turn either into a `CircuitBuildError`.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """
    A local base class for all YAML parsing and schema validation errors.
    """
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the netlist file.",
            context={}
        )


@dataclass(frozen=True, eq=False)
class ParsingError(BaseParsingError):
    """
    Raised for file-system issues or for content that cannot be loaded at all:
    a missing file, unreadable permissions, invalid YAML syntax or a document
    whose root is not a mapping.
    """
    details: str
    file_path: Optional[Path] = None

    def __str__(self):
        return f"Parsing error in '{self.file_path or '<in-memory netlist>'}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="YAML Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists, has the correct read permissions, and contains valid YAML syntax.",
            context={'source_file': self.file_path}
        )


@dataclass(frozen=True, eq=False)
class SchemaValidationError(BaseParsingError):
    """
    Raised when the YAML is syntactically valid but does not conform to the
    netlist schema (missing keys, invalid identifiers, unknown component types,
    duplicate ids, wrong terminal count).
    """
    errors: Dict[Any, Any]
    file_path: Optional[Path] = None

    def _error_lines(self, prefix: str):
        return [
            f"{prefix} '{field}': {messages[0] if isinstance(messages, list) and messages else messages}"
            for field, messages in sorted(self.errors.items(), key=lambda item: str(item[0]))
        ]

    def __str__(self):
        return (
            f"Netlist schema validation failed for '{self.file_path or '<in-memory netlist>'}':\n"
            + "\n".join(self._error_lines("  - In field"))
        )

    def get_diagnostic_report(self) -> str:
        error_list_str = "\n".join(self._error_lines("  - Field"))
        details = (
            "The structure of the netlist does not conform to the required schema.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n{error_list_str}"
        )
        return format_diagnostic_report(
            error_type="YAML Schema Validation Error",
            details=details,
            suggestion=(
                "Correct the specified fields to match the netlist format. Check for invalid identifiers "
                "(e.g. using '-' or '.'), duplicate ids, components without exactly two nodes, "
                "or missing sections like 'nodes' and 'components'."
            ),
            context={'source_file': self.file_path}
        )
