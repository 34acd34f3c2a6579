# src/dcmna_core/validation/issues.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ValidationIssueLevel(Enum):
    """How serious a boundary check finding is. Only ERROR blocks an analysis."""
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self):
        return self.value


# Keys already printed in the issue prefix.
_PREFIX_KEYS = frozenset({'circuit_name', 'component_id'})


@dataclass
class ValidationIssue:
    """A single finding of the SemanticValidator, tied to a circuit and optionally a component."""
    level: ValidationIssueLevel
    code: str
    message: str
    component_id: Optional[str] = None
    circuit_name: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        where = ", ".join(
            f"{label} {value}"
            for label, value in (("circuit", self.circuit_name), ("component", self.component_id))
            if value
        )
        text = f"[{self.level.name} - {self.code}]"
        if where:
            text += f" ({where})"
        text += f" {self.message}"

        extra = sorted((k, v) for k, v in self.details.items() if k not in _PREFIX_KEYS)
        if extra:
            text += " {" + ", ".join(f"{k}={v}" for k, v in extra) + "}"
        return text
