# src/dcmna_core/simulation/__init__.py
from .exceptions import (
    MnaInputError,
    SingularMatrixError,
)
from .results import (
    AnalysisFailure,
    AnalysisOutcome,
    AnalysisResult,
    EliminationOutcome,
    LinearSystem,
)
from .mna import MnaAssembler
from .solver import solve_linear_system
from .engine import AnalysisEngine
from .execution import run_analysis

__all__ = [
    # Exceptions
    "MnaInputError",
    "SingularMatrixError",
    # Contracts
    "AnalysisFailure",
    "AnalysisOutcome",
    "AnalysisResult",
    "EliminationOutcome",
    "LinearSystem",
    # Core Classes
    "MnaAssembler",
    "solve_linear_system",
    "AnalysisEngine",
    "run_analysis",
]
