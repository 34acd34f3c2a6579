# src/dcmna_core/data_structures.py
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .constants import DEFAULT_GROUND_NODE_ID

logger = logging.getLogger(__name__)


class ComponentType(Enum):
    """The element variants a circuit may contain. Values match netlist type names."""
    RESISTOR = "Resistor"
    VOLTAGE_SOURCE = "VoltageSource"
    CURRENT_SOURCE = "CurrentSource"

    def __str__(self):
        return self.value


class AnalysisMethod(Enum):
    """Analysis method selector carried by a circuit."""
    NODAL = "nodal"
    MESH = "mesh"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Node:
    """
    An electrical node of a circuit. ``name`` is a display label only; identity
    is carried by ``id``.
    """
    id: str
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class Component:
    """
    A two-terminal circuit element.

    ``nodes`` is polarity-significant: for sources the first node is the positive
    terminal; for resistors it fixes the sign convention of the reported voltage
    and current. ``value`` is expressed in ``unit`` (e.g. ``2`` and ``'kΩ'``).
    """
    id: str
    kind: ComponentType
    nodes: Tuple[str, str]
    value: float
    unit: str = ""

    @property
    def first_node(self) -> str:
        return self.nodes[0]

    @property
    def second_node(self) -> str:
        return self.nodes[1]


@dataclass(frozen=True)
class Circuit:
    """
    The complete, immutable description of a circuit to analyse.

    It is a data container and holds no imperative logic. Structural invariants
    (unique ids, resolvable node references, at least one non-ground node) are
    checked at the analysis boundary by ``SemanticValidator``, not here.
    """
    name: str
    nodes: Tuple[Node, ...]
    components: Tuple[Component, ...]
    method: AnalysisMethod = AnalysisMethod.NODAL
    ground_node_id: str = DEFAULT_GROUND_NODE_ID
    # Not part of equality: two circuits loaded from different files are the same circuit.
    source_file_path: Optional[str] = field(default=None, compare=False)

    @property
    def non_ground_nodes(self) -> Tuple[Node, ...]:
        """Nodes that carry an unknown potential, in declaration order."""
        return tuple(n for n in self.nodes if n.id != self.ground_node_id)

    @property
    def node_ids(self) -> Tuple[str, ...]:
        """All node identifiers, with the ground id included even if undeclared."""
        ids = tuple(n.id for n in self.nodes)
        if self.ground_node_id not in ids:
            ids = ids + (self.ground_node_id,)
        return ids

    def components_of(self, kind: ComponentType) -> Tuple[Component, ...]:
        """Components of the given kind, in declaration order."""
        return tuple(c for c in self.components if c.kind is kind)

    @property
    def resistors(self) -> Tuple[Component, ...]:
        return self.components_of(ComponentType.RESISTOR)

    @property
    def voltage_sources(self) -> Tuple[Component, ...]:
        return self.components_of(ComponentType.VOLTAGE_SOURCE)

    @property
    def current_sources(self) -> Tuple[Component, ...]:
        return self.components_of(ComponentType.CURRENT_SOURCE)

    def get_component(self, component_id: str) -> Component:
        for comp in self.components:
            if comp.id == component_id:
                return comp
        raise KeyError(component_id)

    def node_connections(self) -> Dict[str, Tuple[str, ...]]:
        """Maps every node id to the ids of the components touching it."""
        connections: Dict[str, list] = {node_id: [] for node_id in self.node_ids}
        for comp in self.components:
            for node_id in comp.nodes:
                if node_id in connections and comp.id not in connections[node_id]:
                    connections[node_id].append(comp.id)
        return {node_id: tuple(ids) for node_id, ids in connections.items()}
