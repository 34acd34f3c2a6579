# src/dcmna_core/validation/semantic_validator.py
import logging
import math
from collections import Counter
from typing import List

import networkx as nx

from ..data_structures import AnalysisMethod, Circuit, ComponentType
from ..units import is_known_unit, to_base_units
from .issues import ValidationIssue, ValidationIssueLevel
from .issue_codes import SemanticIssueCode
from .exceptions import SemanticValidationError


logger = logging.getLogger(__name__)


class SemanticValidator:
    """
    Checks a ``Circuit`` against the structural rules the MNA pipeline relies on.

    The assembler and solver assume a well-formed circuit; this validator is the
    boundary where that precondition is made explicit. ERROR-level issues make
    the circuit unusable for analysis. WARNING and INFO issues describe
    conditions the pipeline handles on its own (e.g. a floating node is reported
    here but still reaches the solver, which then reports a singular system).
    """

    def __init__(self, circuit: Circuit):
        if not isinstance(circuit, Circuit):
            raise TypeError("SemanticValidator requires a Circuit object.")
        self.circuit = circuit
        self.issues: List[ValidationIssue] = []

    def validate(self) -> List[ValidationIssue]:
        """
        Runs every check and returns all issues found (errors, warnings and info).
        The caller decides whether ERROR-level issues halt the analysis; see
        ``raise_for_errors``.
        """
        self.issues = []
        logger.info(f"Starting semantic validation for '{self.circuit.name}'...")

        self._check_method()
        self._check_unique_ids()
        self._check_has_unknowns()
        self._check_component_references()
        self._check_component_values()
        self._check_terminals()
        self._check_connectivity()

        if self.issues:
            errors = sum(1 for i in self.issues if i.level == ValidationIssueLevel.ERROR)
            warnings = sum(1 for i in self.issues if i.level == ValidationIssueLevel.WARNING)
            infos = sum(1 for i in self.issues if i.level == ValidationIssueLevel.INFO)
            logger.info(f"Validation complete. Found: {errors} errors, {warnings} warnings, {infos} info messages.")
        else:
            logger.info("Validation complete with no issues found.")

        return self.issues

    def raise_for_errors(self) -> List[ValidationIssue]:
        """Validates and raises ``SemanticValidationError`` if any ERROR was found."""
        issues = self.validate()
        if any(issue.level == ValidationIssueLevel.ERROR for issue in issues):
            raise SemanticValidationError(issues)
        return issues

    def _add_issue(self, level: ValidationIssueLevel, code_enum: SemanticIssueCode, **kwargs):
        message = code_enum.format_message(**kwargs)
        details = dict(kwargs)
        if self.circuit.source_file_path:
            details['source_file'] = self.circuit.source_file_path
        self.issues.append(ValidationIssue(
            level=level, code=code_enum.code, message=message,
            component_id=kwargs.get('component_id'), circuit_name=self.circuit.name, details=details
        ))

    # --- Checks ---

    def _check_method(self):
        if self.circuit.method is AnalysisMethod.MESH:
            self._add_issue(ValidationIssueLevel.WARNING, SemanticIssueCode.CIRCUIT_METHOD_MESH)

    def _check_unique_ids(self):
        for node_id, count in Counter(n.id for n in self.circuit.nodes).items():
            if count > 1:
                self._add_issue(ValidationIssueLevel.ERROR, SemanticIssueCode.NODE_DUPLICATE_ID,
                                node_id=node_id, count=count)
        for comp_id, count in Counter(c.id for c in self.circuit.components).items():
            if count > 1:
                self._add_issue(ValidationIssueLevel.ERROR, SemanticIssueCode.COMP_DUPLICATE_ID,
                                component_id=comp_id, count=count)

    def _check_has_unknowns(self):
        if not self.circuit.non_ground_nodes:
            self._add_issue(ValidationIssueLevel.ERROR, SemanticIssueCode.CIRCUIT_NO_UNKNOWNS,
                            ground_id=self.circuit.ground_node_id)

    def _check_component_references(self):
        declared = set(self.circuit.node_ids)
        for comp in self.circuit.components:
            for node_id in comp.nodes:
                if node_id not in declared:
                    self._add_issue(ValidationIssueLevel.ERROR, SemanticIssueCode.COMP_UNKNOWN_NODE,
                                    component_id=comp.id, node_id=node_id,
                                    declared_nodes=sorted(declared))

    def _check_component_values(self):
        for comp in self.circuit.components:
            try:
                value = float(comp.value)
            except (TypeError, ValueError):
                value = math.nan

            if comp.kind is ComponentType.RESISTOR:
                if not math.isfinite(value) or to_base_units(value, comp.unit) <= 0:
                    self._add_issue(ValidationIssueLevel.ERROR, SemanticIssueCode.COMP_BAD_VALUE,
                                    component_id=comp.id, component_type=comp.kind, value=comp.value,
                                    requirement="a finite, positive resistance")
                elif not is_known_unit(comp.unit):
                    self._add_issue(ValidationIssueLevel.INFO, SemanticIssueCode.COMP_UNIT_PASSTHROUGH,
                                    component_id=comp.id, unit=comp.unit, value=comp.value)
            elif not math.isfinite(value):
                self._add_issue(ValidationIssueLevel.ERROR, SemanticIssueCode.COMP_BAD_VALUE,
                                component_id=comp.id, component_type=comp.kind, value=comp.value,
                                requirement="a finite number")

            if comp.kind is ComponentType.CURRENT_SOURCE:
                self._add_issue(ValidationIssueLevel.WARNING, SemanticIssueCode.COMP_CURRENT_SOURCE_UNSTAMPED,
                                component_id=comp.id)

    def _check_terminals(self):
        for comp in self.circuit.components:
            node_a, node_b = comp.nodes
            if node_a != node_b:
                continue
            if comp.kind is ComponentType.VOLTAGE_SOURCE:
                self._add_issue(ValidationIssueLevel.ERROR, SemanticIssueCode.COMP_SHORTED_SOURCE,
                                component_id=comp.id, node_id=node_a, value=comp.value)
            else:
                self._add_issue(ValidationIssueLevel.WARNING, SemanticIssueCode.COMP_SELF_LOOP,
                                component_id=comp.id, node_id=node_a)

    def _check_connectivity(self):
        """
        Reports floating nodes and groups of nodes with no conductive path to
        ground. Current sources are not stamped, so they do not count as a path.
        """
        circuit = self.circuit
        graph = nx.MultiGraph()
        graph.add_nodes_from(circuit.node_ids)
        for comp in circuit.components:
            if comp.kind is ComponentType.CURRENT_SOURCE:
                continue
            node_a, node_b = comp.nodes
            if node_a in graph and node_b in graph:
                graph.add_edge(node_a, node_b, key=comp.id)

        connections = circuit.node_connections()
        floating = set()
        for node in circuit.non_ground_nodes:
            if not connections.get(node.id):
                floating.add(node.id)
                self._add_issue(ValidationIssueLevel.WARNING, SemanticIssueCode.NODE_FLOATING, node_id=node.id)

        ground_id = circuit.ground_node_id
        for group in nx.connected_components(graph):
            if ground_id in group:
                continue
            unreachable = [n.id for n in circuit.non_ground_nodes if n.id in group and n.id not in floating]
            if unreachable:
                self._add_issue(ValidationIssueLevel.WARNING, SemanticIssueCode.NODE_NO_GROUND_PATH,
                                node_ids=unreachable, ground_id=ground_id)
