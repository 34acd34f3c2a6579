# src/dcmna_core/simulation/mna.py

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..data_structures import Circuit, Component
from ..trace import EquationLines, StepTrace, TracePhase, matrix_block
from ..units import to_base_units
from .exceptions import MnaInputError
from .results import LinearSystem


logger = logging.getLogger(__name__)


class MnaAssembler:
    """
    Constructs the Modified Nodal Analysis (MNA) system A·x = b for a DC circuit.

    It is responsible for:
    1.  Assigning an index to every non-ground node (declaration order) and to
        every voltage source (declaration order, offset by the node count).
    2.  Stamping resistor conductances: +G on the diagonal of each non-ground
        terminal, -G on the mutual entry when both terminals are non-ground.
    3.  Stamping voltage sources: ±1 in the source column of the terminal rows
        and one auxiliary constraint row V(P) - V(M) = value.
    4.  Recording the identification, conductance, equation and matrix steps
        of the derivation trace.

    Current sources are carried by the data model but are not stamped.
    """
    def __init__(self, circuit: Circuit):
        """
        Initializes the MnaAssembler.

        Args:
            circuit: The circuit to assemble. It must satisfy the data model
                     invariants (see ``SemanticValidator``).

        Raises:
            MnaInputError: If the circuit has no non-ground node or a component
                           references an unknown node.
        """
        self.circuit: Circuit = circuit
        self.ground_id: str = circuit.ground_node_id

        self.node_map: Dict[str, int] = {}
        self.source_map: Dict[str, int] = {}
        self.num_nodes: int = 0
        self.size: int = 0

        self._assign_indices()
        self._check_references()

        logger.info(
            f"MNA Assembler initialized for circuit '{circuit.name}'. "
            f"Node unknowns: {self.num_nodes}, voltage sources: {len(self.source_map)}, system size: {self.size}."
        )

    def _assign_indices(self):
        nodes = self.circuit.non_ground_nodes
        self.node_map = {node.id: idx for idx, node in enumerate(nodes)}
        self.num_nodes = len(nodes)
        self.source_map = {vs.id: idx for idx, vs in enumerate(self.circuit.voltage_sources)}
        self.size = self.num_nodes + len(self.source_map)

    def _check_references(self):
        if self.num_nodes == 0:
            raise MnaInputError(
                circuit_name=self.circuit.name,
                details="The circuit has no node besides ground, so there are no unknowns to solve for."
            )
        for comp in self.circuit.components:
            for node_id in comp.nodes:
                if node_id != self.ground_id and node_id not in self.node_map:
                    raise MnaInputError(
                        circuit_name=self.circuit.name,
                        details=f"Component '{comp.id}' references node '{node_id}', which is not declared."
                    )

    def node_index(self, node_id: str) -> Optional[int]:
        """The unknown index of a node, or None for ground."""
        if node_id == self.ground_id:
            return None
        return self.node_map[node_id]

    def source_column(self, source_id: str) -> int:
        """The unknown index of a voltage source's branch current."""
        return self.num_nodes + self.source_map[source_id]

    @property
    def unknown_labels(self) -> Tuple[str, ...]:
        return tuple(
            [f"V{i + 1}" for i in range(self.num_nodes)]
            + [f"I{i + 1}" for i in range(len(self.source_map))]
        )

    def assemble(self, trace: StepTrace) -> LinearSystem:
        """
        Builds (A, b) and appends the assembly records to ``trace``.

        Returns:
            A fresh ``LinearSystem``; nothing is shared with previous calls.
        """
        circuit = self.circuit
        A = np.zeros((self.size, self.size), dtype=float)
        b = np.zeros(self.size, dtype=float)

        self._record_identification(trace)
        conductances = self._compute_conductances(trace)

        equations: List[str] = []
        for node in circuit.non_ground_nodes:
            equations.append(self._stamp_node_row(A, node.id, conductances))
        for vs in circuit.voltage_sources:
            equations.append(self._stamp_source_row(A, b, vs))

        description = "Applying Kirchhoff's Current Law (KCL) at every non-ground node, plus one constraint per voltage source:"
        if circuit.current_sources:
            ids = ", ".join(cs.id for cs in circuit.current_sources)
            logger.warning(f"Circuit '{circuit.name}': current source(s) {ids} are not stamped into the MNA system.")
            description += f"\nNote: current source(s) {ids} are not included in the system of equations."
        trace.record(TracePhase.EQUATIONS, "3. Nodal equations", description, EquationLines(tuple(equations)))

        labels = self.unknown_labels
        annotations = [f"[{label}] = [{b[i] + 0.0:.4f}]" for i, label in enumerate(labels)]
        trace.record(
            TracePhase.MATRIX,
            "4. Matrix system [A][x] = [b]",
            f"Matrix form of the system of equations, x = [{', '.join(labels)}]:",
            matrix_block(A, annotations=annotations),
        )
        logger.debug(f"Assembled {self.size}x{self.size} MNA system for '{circuit.name}'.")
        return LinearSystem(matrix=A, rhs=b, unknown_labels=labels, num_node_unknowns=self.num_nodes)

    # --- Trace producers and stamping ---

    def _record_identification(self, trace: StepTrace):
        circuit = self.circuit
        unknowns = [f"V{i + 1} (voltage at node {node.id})" for i, node in enumerate(circuit.non_ground_nodes)]
        unknowns += [f"I{i + 1} (current through {vs.id})" for i, vs in enumerate(circuit.voltage_sources)]
        description = (
            "Method: Modified Nodal Analysis (MNA)\n"
            f"Total nodes: {len(circuit.node_ids)}\n"
            f"Unknown node voltages: {self.num_nodes} (ground '{self.ground_id}' excluded)\n"
            f"Voltage sources: {len(circuit.voltage_sources)}\n"
            f"Resistors: {len(circuit.resistors)}\n"
            f"Current sources: {len(circuit.current_sources)}\n"
            "\nUnknowns to solve for:"
        )
        trace.record(TracePhase.IDENTIFICATION, "1. Circuit identification", description, EquationLines(tuple(unknowns)))

    def _compute_conductances(self, trace: StepTrace) -> Dict[str, float]:
        conductances: Dict[str, float] = {}
        lines = []
        for r in self.circuit.resistors:
            r_ohms = to_base_units(r.value, r.unit)
            g = 1.0 / r_ohms
            conductances[r.id] = g
            lines.append(f"{r.id}: R = {r.value:g} {r.unit} = {r_ohms:.4f} Ω  ->  G = {g:.8f} S")
        trace.record(
            TracePhase.CONDUCTANCES,
            "2. Conversion to conductances",
            "Each resistance is converted to a conductance (G = 1/R):",
            EquationLines(tuple(lines)),
        )
        return conductances

    def _stamp_node_row(self, A: np.ndarray, node_id: str, conductances: Dict[str, float]) -> str:
        idx = self.node_map[node_id]
        terms: List[str] = []

        for r in self.circuit.resistors:
            node_a, node_b = r.nodes
            if node_id not in (node_a, node_b):
                continue
            other = node_b if node_a == node_id else node_a
            g = conductances[r.id]
            if other == self.ground_id:
                terms.append(f"G{r.id}·V{idx + 1}")
                A[idx, idx] += g
            else:
                other_idx = self.node_map[other]
                terms.append(f"G{r.id}·(V{idx + 1} - V{other_idx + 1})")
                A[idx, idx] += g
                A[idx, other_idx] -= g

        for vs in self.circuit.voltage_sources:
            pos, neg = vs.nodes
            col = self.source_column(vs.id)
            src_no = self.source_map[vs.id] + 1
            if pos == node_id:
                terms.append(f"+I{src_no}")
                A[idx, col] = 1.0
            elif neg == node_id:
                terms.append(f"-I{src_no}")
                A[idx, col] = -1.0

        return f"Node {node_id}: " + (" ".join(terms) if terms else "0") + " = 0"

    def _stamp_source_row(self, A: np.ndarray, b: np.ndarray, vs: Component) -> str:
        pos, neg = vs.nodes
        row = self.source_column(vs.id)
        pos_idx = self.node_index(pos)
        neg_idx = self.node_index(neg)
        value = to_base_units(vs.value, vs.unit)

        if pos_idx is not None and neg_idx is not None:
            lhs = f"V{pos_idx + 1} - V{neg_idx + 1}"
            A[row, pos_idx] = 1.0
            A[row, neg_idx] = -1.0
        elif pos_idx is not None:
            lhs = f"V{pos_idx + 1}"
            A[row, pos_idx] = 1.0
        elif neg_idx is not None:
            lhs = f"-V{neg_idx + 1}"
            A[row, neg_idx] = -1.0
        else:
            lhs = "0"
        b[row] = value
        return f"Source {vs.id}: {lhs} = {value:g} V"
