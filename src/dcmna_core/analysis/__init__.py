# src/dcmna_core/analysis/__init__.py
"""
Post-solve analysis: mapping the solution vector back to physical quantities.
"""
from .results import ComponentResult, PowerBalance
from .interpreter import ResultInterpreter

__all__ = [
    # Result Contracts
    "ComponentResult",
    "PowerBalance",
    # Services
    "ResultInterpreter",
]
