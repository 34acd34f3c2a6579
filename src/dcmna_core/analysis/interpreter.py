# src/dcmna_core/analysis/interpreter.py
"""
Maps a solved MNA vector back to physical quantities.
"""
import logging
from typing import Dict, List, Tuple

import numpy as np

from ..constants import POWER_BALANCE_TOLERANCE_WATTS
from ..data_structures import Circuit, Component, ComponentType
from ..trace import EquationLines, StepTrace, TracePhase
from ..units import to_base_units
from .results import ComponentResult, PowerBalance

logger = logging.getLogger(__name__)


class ResultInterpreter:
    """
    Derives node potentials, per-component voltage/current/power and the energy
    balance from a solution vector, recording the interpretation, calculation
    and verification steps of the trace.

    The solution layout is the assembler's: node potentials first (declaration
    order, ground excluded), then voltage-source branch currents.
    """
    def __init__(self, circuit: Circuit, solution: np.ndarray):
        self.circuit = circuit
        self.solution = np.asarray(solution, dtype=float)
        self._nodes = circuit.non_ground_nodes
        self._sources = circuit.voltage_sources
        self._num_nodes = len(self._nodes)

        expected = self._num_nodes + len(self._sources)
        if self.solution.shape != (expected,):
            raise ValueError(
                f"Solution vector for '{circuit.name}' must have {expected} entries, got shape {self.solution.shape}."
            )

    def node_voltages(self) -> Dict[str, float]:
        """Potentials of all nodes; the ground node is exactly 0.0."""
        voltages = {self.circuit.ground_node_id: 0.0}
        for i, node in enumerate(self._nodes):
            voltages[node.id] = float(self.solution[i])
        return voltages

    def interpret(self, trace: StepTrace) -> Tuple[Dict[str, float], Tuple[ComponentResult, ...], PowerBalance]:
        """
        Computes every physical result and appends the INTERPRETATION,
        COMPONENT_CALCULATIONS and VERIFICATION records to ``trace``.
        """
        voltages = self.node_voltages()
        self._record_interpretation(trace)

        results = tuple(self._component_result(comp, voltages) for comp in self.circuit.components)
        trace.record(
            TracePhase.COMPONENT_CALCULATIONS,
            "7. Component currents and power",
            "Using Ohm's law (I = V/R) and P = V x I:",
            EquationLines(tuple(self._calculation_text(res, voltages) for res in results)),
        )

        balance = self._verify_power(results, trace)
        return voltages, results, balance

    def _component_result(self, comp: Component, voltages: Dict[str, float]) -> ComponentResult:
        voltage = voltages[comp.first_node] - voltages[comp.second_node]
        if comp.kind is ComponentType.RESISTOR:
            current = voltage / to_base_units(comp.value, comp.unit)
        elif comp.kind is ComponentType.VOLTAGE_SOURCE:
            current = float(self.solution[self._num_nodes + self._source_index(comp.id)])
        else:
            # Not part of the solved system; the declared magnitude is reported as-is.
            current = to_base_units(comp.value, comp.unit)
        return ComponentResult(
            component_id=comp.id,
            kind=comp.kind,
            nodes=comp.nodes,
            voltage=voltage,
            current=current,
            power=abs(voltage * current),
        )

    def _source_index(self, source_id: str) -> int:
        for idx, vs in enumerate(self._sources):
            if vs.id == source_id:
                return idx
        raise KeyError(source_id)

    def _record_interpretation(self, trace: StepTrace):
        lines = ["Ground (reference) voltage: 0.0000 V"]
        lines += [f"Voltage at {node.id}: V{i + 1} = {self.solution[i]:.4f} V" for i, node in enumerate(self._nodes)]
        if self._sources:
            lines.append("")
            lines.append("Voltage source currents:")
            for i, vs in enumerate(self._sources):
                current = self.solution[self._num_nodes + i]
                lines.append(f"Current in {vs.id}: I{i + 1} = {current:.4f} A = {current * 1000:.4f} mA")
        trace.record(
            TracePhase.INTERPRETATION,
            "6. Interpretation of results",
            "Node voltages and source currents obtained from the solution vector:",
            EquationLines(tuple(lines)),
        )

    def _calculation_text(self, res: ComponentResult, voltages: Dict[str, float]) -> str:
        if res.kind is ComponentType.RESISTOR:
            node_a, node_b = res.nodes
            v_a, v_b = voltages[node_a], voltages[node_b]
            r_ohms = to_base_units(*self._value_and_unit(res.component_id))
            return (
                f"{res.component_id} ({node_a} -> {node_b}):\n"
                f"  V = V({node_a}) - V({node_b}) = {v_a:.4f} - {v_b:.4f} = {res.voltage:.4f} V\n"
                f"  I = V/R = {res.voltage:.4f} / {r_ohms:.4f} = {res.current:.6f} A = {res.current * 1000:.4f} mA\n"
                f"  P = V x I = {res.voltage:.4f} x {res.current:.6f} = {res.power:.6f} W"
            )
        note = " (declared value, not solved)" if res.kind is ComponentType.CURRENT_SOURCE else ""
        return (
            f"{res.component_id}:\n"
            f"  V = {res.voltage:.4f} V\n"
            f"  I = {res.current:.6f} A = {res.current * 1000:.4f} mA{note}\n"
            f"  P = {res.power:.6f} W"
        )

    def _value_and_unit(self, component_id: str) -> Tuple[float, str]:
        comp = self.circuit.get_component(component_id)
        return comp.value, comp.unit

    def _verify_power(self, results: Tuple[ComponentResult, ...], trace: StepTrace) -> PowerBalance:
        resistors = [r for r in results if r.kind is ComponentType.RESISTOR]
        sources = [r for r in results if r.kind is ComponentType.VOLTAGE_SOURCE]
        balance = PowerBalance(
            dissipated=sum(r.power for r in resistors),
            supplied=sum(r.power for r in sources),
            tolerance=POWER_BALANCE_TOLERANCE_WATTS,
        )

        lines: List[str] = ["Total power dissipated in resistors:"]
        lines += [f"  {r.component_id}: {r.power:.6f} W" for r in resistors]
        lines.append(f"  TOTAL DISSIPATED: {balance.dissipated:.6f} W")
        lines.append("")
        lines.append("Total power supplied by sources:")
        lines += [f"  {r.component_id}: {r.power:.6f} W" for r in sources]
        lines.append(f"  TOTAL SUPPLIED: {balance.supplied:.6f} W")
        lines.append("")
        lines.append(f"Difference: {balance.difference:.6f} W")
        lines.append("PASS: energy balance verified" if balance.is_balanced else "CHECK: energy balance not met")

        if not balance.is_balanced:
            logger.warning(
                f"Energy balance for '{self.circuit.name}' differs by {balance.difference:.6f} W "
                f"(tolerance {balance.tolerance} W)."
            )
        trace.record(
            TracePhase.VERIFICATION,
            "8. Verification of results",
            "Energy balance (conservation of energy):",
            EquationLines(tuple(lines)),
        )
        return balance
