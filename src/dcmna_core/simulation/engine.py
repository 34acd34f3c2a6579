# src/dcmna_core/simulation/engine.py
"""
Defines the ``AnalysisEngine``, the stateless service that runs one analysis.

The engine owns the imperative sequence (assemble, solve, interpret) and
threads a single ``StepTrace`` through every stage. It keeps no state between
calls: each ``execute()`` builds its own matrix, trace and results.
"""
import logging
from types import MappingProxyType

from ..analysis import ResultInterpreter
from ..data_structures import AnalysisMethod, Circuit
from ..trace import StepTrace
from .mna import MnaAssembler
from .results import AnalysisFailure, AnalysisOutcome, AnalysisResult
from .solver import solve_linear_system

logger = logging.getLogger(__name__)


class AnalysisEngine:
    """
    Orchestrates the DC analysis pipeline for one circuit.
    """
    def __init__(self, circuit: Circuit):
        self.circuit: Circuit = circuit
        logger.debug(f"AnalysisEngine initialized for '{circuit.name}'.")

    def execute(self) -> AnalysisOutcome:
        """
        Runs assembly, elimination and interpretation.

        Returns:
            ``AnalysisResult`` on success, or ``AnalysisFailure`` with the partial
            trace when the system has no unique solution.
        """
        circuit = self.circuit
        if circuit.method is AnalysisMethod.MESH:
            logger.warning(f"Circuit '{circuit.name}' requests mesh analysis; solving with MNA instead.")

        trace = StepTrace()
        assembler = MnaAssembler(circuit)
        system = assembler.assemble(trace)

        outcome = solve_linear_system(system.matrix, system.rhs)
        trace.extend(outcome.steps)

        if outcome.singular:
            reason = (
                f"The system has no unique solution: the pivot in column {outcome.singular_pivot_row + 1} "
                f"({system.unknown_labels[outcome.singular_pivot_row]}) is numerically zero after row exchange."
            )
            logger.error(f"Analysis of '{circuit.name}' failed: {reason}")
            return AnalysisFailure(
                circuit_name=circuit.name,
                reason=reason,
                steps=trace.records,
                pivot_row=outcome.singular_pivot_row,
            )

        interpreter = ResultInterpreter(circuit, outcome.solution)
        voltages, component_results, balance = interpreter.interpret(trace)

        logger.info(f"Analysis of '{circuit.name}' complete: {len(trace)} steps recorded.")
        return AnalysisResult(
            circuit_name=circuit.name,
            method=circuit.method,
            node_voltages=MappingProxyType(voltages),
            component_results=component_results,
            power_balance=balance,
            solution=outcome.solution,
            unknown_labels=system.unknown_labels,
            steps=trace.records,
        )
