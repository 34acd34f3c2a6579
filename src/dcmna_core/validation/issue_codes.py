# src/dcmna_core/validation/issue_codes.py
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class SemanticIssueCode(Enum):
    """
    Codes the SemanticValidator can report. Each value is (code, message template);
    templates are filled from the keyword details of the issue.
    """

    # --- Circuit Structure Issues (CIRCUIT_...) ---
    CIRCUIT_NO_UNKNOWNS = ("CIRCUIT_NO_UNKNOWNS", "Circuit has no node besides ground '{ground_id}'; there is nothing to solve for.")
    CIRCUIT_METHOD_MESH = ("CIRCUIT_METHOD_MESH", "Mesh analysis was requested; the circuit will be solved with Modified Nodal Analysis.")

    # --- Node Issues (NODE_...) ---
    NODE_DUPLICATE_ID = ("NODE_DUPLICATE_ID", "Node id '{node_id}' is declared {count} times.")
    NODE_FLOATING = ("NODE_FLOATING", "Node '{node_id}' is declared but has no component connections (completely floating).")
    NODE_NO_GROUND_PATH = ("NODE_NO_GROUND_PATH", "Node(s) {node_ids} have no path to ground '{ground_id}'; the system will be singular.")

    # --- Component Issues (COMP_...) ---
    COMP_DUPLICATE_ID = ("COMP_DUPLICATE_ID", "Component id '{component_id}' is declared {count} times.")
    COMP_UNKNOWN_NODE = ("COMP_UNKNOWN_NODE", "Component '{component_id}' references node '{node_id}', which is not declared. Declared nodes: {declared_nodes}.")
    COMP_BAD_VALUE = ("COMP_BAD_VALUE", "Component '{component_id}' ({component_type}) has value {value}, which must be {requirement}.")
    COMP_CURRENT_SOURCE_UNSTAMPED = ("COMP_CURRENT_SOURCE_UNSTAMPED", "Current source '{component_id}' is not included in the MNA system; its declared value is reported but does not affect the solution.")
    COMP_UNIT_PASSTHROUGH = ("COMP_UNIT_PASSTHROUGH", "Component '{component_id}' unit '{unit}' has no multiplier; value {value} is used unscaled.")
    COMP_SHORTED_SOURCE = ("COMP_SHORTED_SOURCE", "Voltage source '{component_id}' has both terminals on node '{node_id}' (short circuit); its {value} V constraint has no unique solution.")
    COMP_SELF_LOOP = ("COMP_SELF_LOOP", "Component '{component_id}' has both terminals on node '{node_id}' and has no effect on the circuit.")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    def format_message(self, **kwargs) -> str:
        try:
            return self.template.format(**kwargs)
        except KeyError as missing:
            # Template and validator disagree on keys.
            logger.error("Issue %s formatted without %s (got %s)", self.code, missing, sorted(kwargs))
            return f"{self.code}: {self.template}"
