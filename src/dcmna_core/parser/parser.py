# src/dcmna_core/parser/parser.py
import logging
import re
import string
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import cerberus
import yaml

from ..constants import DEFAULT_GROUND_NODE_ID
from ..data_structures import AnalysisMethod, Circuit, Component, ComponentType, Node
from ..errors import CircuitBuildError, DiagnosableError, format_diagnostic_report
from .exceptions import ParsingError, SchemaValidationError

logger = logging.getLogger(__name__)

# Identifier pattern for node, component and ground ids.
ID_REGEX = r"^[a-zA-Z_][a-zA-Z0-9_]*$"
ALLOWED_ID_CHARS = frozenset(string.ascii_letters + string.digits + "_")


class EnhancedValidator(cerberus.Validator):
    """Cerberus validator with the two extra rules netlists need."""

    def _validate_id_regex(self, constraint: bool, field: str, value: Any):
        """
        Node, component and ground ids must be plain identifiers.

        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if not constraint or not isinstance(value, str):
            return
        if re.fullmatch(ID_REGEX, value) is None:
            bad = sorted(set(value) - ALLOWED_ID_CHARS)
            self._error(
                field,
                f"'{value}' is not a valid identifier (letter or underscore first, then letters, "
                f"digits or underscores); forbidden character(s): {bad}",
            )

    def _validate_unique_elements_by_key(self, key: str, field: str, value: List[Dict]):
        """
        Every mapping in the list must carry a distinct value under ``key``.

        The rule's arguments are validated against this schema:
        {'type': 'string'}
        """
        if not isinstance(value, list):
            return
        counts = Counter(item.get(key) for item in value if isinstance(item, dict))
        repeated = sorted(str(k) for k, n in counts.items() if k is not None and n > 1)
        if repeated:
            self._error(field, f"Duplicate values found for key '{key}': {repeated}")


class NetlistParser:
    """
    Loads a DC netlist from YAML, validates its structure against a Cerberus
    schema and synthesizes the immutable `Circuit` the analysis consumes.

    Structural checks (types, identifiers, exactly two terminals, unique ids per
    list) happen here. Topological checks (unknown node references, floating
    nodes, paths to ground) are left to `SemanticValidator`.
    """
    _id_rule = {"type": "string", "required": True, "empty": False, "id_regex": True}

    _node_schema = {
        "id": _id_rule,
        "name": {"type": "string", "required": False, "default": ""},
    }

    _component_schema = {
        "id": _id_rule,
        "type": {"type": "string", "required": True, "allowed": [t.value for t in ComponentType]},
        "nodes": {
            "type": "list", "required": True, "minlength": 2, "maxlength": 2,
            "schema": {"type": "string", "empty": False, "id_regex": True},
        },
        "value": {"type": "number", "required": True},
        "unit": {"type": "string", "required": False, "default": ""},
    }

    _schema = {
        "circuit_name": {"type": "string", "required": False, "empty": False},
        "ground_net": {"type": "string", "required": False, "id_regex": True, "default": DEFAULT_GROUND_NODE_ID},
        "method": {"type": "string", "required": False, "allowed": [m.value for m in AnalysisMethod], "default": AnalysisMethod.NODAL.value},
        "nodes": {"type": "list", "required": True, "minlength": 1, "unique_elements_by_key": "id", "schema": {"type": "dict", "schema": _node_schema}},
        "components": {"type": "list", "required": True, "minlength": 1, "unique_elements_by_key": "id", "schema": {"type": "dict", "schema": _component_schema}},
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False
        logger.debug("NetlistParser ready (unknown keys rejected).")

    # --- Public, user-facing API ---

    def load_circuit(self, yaml_path: Union[str, Path]) -> Circuit:
        """
        Loads a netlist file into a `Circuit`.

        Raises:
            CircuitBuildError: For any failure, carrying a formatted diagnostic report.
        """
        return self._guarded(lambda: self.parse_file(yaml_path), str(yaml_path))

    def build_circuit(self, data: Dict[str, Any], source_name: Optional[str] = None) -> Circuit:
        """
        Builds a `Circuit` from an already-loaded netlist mapping.

        Raises:
            CircuitBuildError: For any failure, carrying a formatted diagnostic report.
        """
        return self._guarded(lambda: self.parse_dict(data), source_name or "<in-memory netlist>")

    # --- Diagnosable-raising API ---

    def parse_file(self, yaml_path: Union[str, Path]) -> Circuit:
        """Parses one YAML netlist; raises `ParsingError` or `SchemaValidationError`."""
        resolved_path = Path(yaml_path).resolve()
        logger.info(f"Parsing netlist file: {resolved_path}")
        content = self._load_yaml(resolved_path)
        return self.parse_dict(content, file_path=resolved_path)

    def parse_dict(self, data: Dict[str, Any], file_path: Optional[Path] = None) -> Circuit:
        """Validates a netlist mapping and converts it into a `Circuit`."""
        if not isinstance(data, dict):
            raise ParsingError(details="The root of the netlist must be a dictionary (mapping).", file_path=file_path)
        if not self._validator.validate(data):
            raise SchemaValidationError(self._validator.errors, file_path)

        validated = self._validator.document
        default_name = file_path.stem if file_path is not None else "circuit"

        nodes = tuple(
            Node(id=raw["id"], name=raw.get("name", ""))
            for raw in validated["nodes"]
        )
        components = tuple(
            Component(
                id=raw["id"],
                kind=ComponentType(raw["type"]),
                nodes=(raw["nodes"][0], raw["nodes"][1]),
                value=float(raw["value"]),
                unit=raw.get("unit", ""),
            )
            for raw in validated["components"]
        )
        circuit = Circuit(
            name=validated.get("circuit_name", default_name),
            nodes=nodes,
            components=components,
            method=AnalysisMethod(validated.get("method", AnalysisMethod.NODAL.value)),
            ground_node_id=validated.get("ground_net", DEFAULT_GROUND_NODE_ID),
            source_file_path=str(file_path) if file_path is not None else None,
        )
        logger.debug(f"Parsed circuit '{circuit.name}': {len(nodes)} nodes, {len(components)} components.")
        return circuit

    def _guarded(self, build, source: str) -> Circuit:
        try:
            circuit = build()
            logger.info(f"--- Netlist '{source}' loaded as circuit '{circuit.name}'. ---")
            return circuit
        except DiagnosableError as e:
            raise CircuitBuildError(e.get_diagnostic_report()) from e
        except Exception as e:
            report = format_diagnostic_report(
                error_type=f"An Unexpected Error Occurred ({type(e).__name__})",
                details=f"The netlist loader encountered an unexpected internal error: {e}",
                suggestion="This may indicate a bug in dcmna_core. Please review the traceback.",
                context={'source_file': source}
            )
            raise CircuitBuildError(report) from e

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        if not source.is_file():
            raise ParsingError(details=f"Netlist file not found: {source}", file_path=source)
        try:
            content = yaml.safe_load(source.read_text(encoding="utf-8"))
        except OSError as e:
            raise ParsingError(details=f"Netlist file could not be read: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e

        if content is None:
            raise ParsingError(details="The netlist file is empty.", file_path=source)
        if not isinstance(content, dict):
            raise ParsingError(details="The root of the YAML file must be a dictionary (mapping).", file_path=source)
        return content
