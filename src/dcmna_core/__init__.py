# src/dcmna_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.debug("DC MNA Core package initialized.")

from .units import ureg, pint, Quantity, RESISTANCE_DIMENSIONALITY, to_base_units
from .data_structures import AnalysisMethod, Circuit, Component, ComponentType, Node
from .trace import EquationLines, MatrixBlock, PlainText, StepRecord, StepTrace, TracePhase
from .parser import NetlistParser
from .validation import SemanticValidator
from .simulation import AnalysisFailure, AnalysisResult, run_analysis, solve_linear_system
from .report import format_value, render_report
from .catalog import EXAMPLE_CIRCUITS, get_example
from .errors import DCMnaError, CircuitBuildError, AnalysisRunError

__all__ = [
    # Units
    "ureg", "pint", "Quantity", "RESISTANCE_DIMENSIONALITY", "to_base_units",
    # Data Structures
    "AnalysisMethod", "Circuit", "Component", "ComponentType", "Node",
    # Derivation Trace
    "EquationLines", "MatrixBlock", "PlainText", "StepRecord", "StepTrace", "TracePhase",
    # Parser and Validation
    "NetlistParser", "SemanticValidator",
    # Analysis
    "AnalysisFailure", "AnalysisResult", "run_analysis", "solve_linear_system",
    # Report and Examples
    "format_value", "render_report", "EXAMPLE_CIRCUITS", "get_example",
    # Top-Level Errors (Actionable Diagnostics)
    "DCMnaError", "CircuitBuildError", "AnalysisRunError",
]
