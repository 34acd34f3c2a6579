# src/dcmna_core/validation/__init__.py
import logging
logger = logging.getLogger(__name__)

from .issues import ValidationIssue, ValidationIssueLevel
from .issue_codes import SemanticIssueCode
from .semantic_validator import SemanticValidator
from .exceptions import SemanticValidationError

__all__ = [
    "ValidationIssue",
    "ValidationIssueLevel",
    "SemanticIssueCode",
    "SemanticValidator",
    "SemanticValidationError",
]
