# tests/conftest.py
import pytest

from dcmna_core.data_structures import AnalysisMethod, Circuit, Component, ComponentType, Node


_KINDS = {
    "Resistor": ComponentType.RESISTOR,
    "VoltageSource": ComponentType.VOLTAGE_SOURCE,
    "CurrentSource": ComponentType.CURRENT_SOURCE,
}


def make_circuit(
    components_def: list,  # List of tuples: (id, type, (node_a, node_b), value, unit)
    node_ids: list = None,
    circuit_name: str = "TestCircuit",
    ground_id: str = "gnd",
    method: AnalysisMethod = AnalysisMethod.NODAL,
) -> Circuit:
    """
    Programmatically creates a Circuit.
    components_def: e.g., [("R1", "Resistor", ("n1", "gnd"), 1, "kΩ")]
    node_ids: declared node ids in order; defaults to every node referenced by
              the components, in order of first appearance, followed by ground.
    """
    if node_ids is None:
        node_ids = []
        for _, _, nodes, _, _ in components_def:
            for node_id in nodes:
                if node_id != ground_id and node_id not in node_ids:
                    node_ids.append(node_id)
        node_ids.append(ground_id)

    components = tuple(
        Component(id=cid, kind=_KINDS[ctype], nodes=tuple(nodes), value=value, unit=unit)
        for cid, ctype, nodes, value, unit in components_def
    )
    return Circuit(
        name=circuit_name,
        nodes=tuple(Node(id=n) for n in node_ids),
        components=components,
        method=method,
        ground_node_id=ground_id,
    )


@pytest.fixture
def divider_circuit():
    """12 V source across a single 1 kΩ resistor."""
    return make_circuit(
        [
            ("V1", "VoltageSource", ("n1", "gnd"), 12, "V"),
            ("R1", "Resistor", ("n1", "gnd"), 1, "kΩ"),
        ],
        circuit_name="Divider",
    )


@pytest.fixture
def ladder_circuit():
    """10 V source feeding R1 = 2 kΩ into R2 = 3 kΩ in parallel with R3 = 2 kΩ."""
    return make_circuit(
        [
            ("V1", "VoltageSource", ("n1", "gnd"), 10, "V"),
            ("R1", "Resistor", ("n1", "n2"), 2, "kΩ"),
            ("R2", "Resistor", ("n2", "gnd"), 3, "kΩ"),
            ("R3", "Resistor", ("n2", "gnd"), 2, "kΩ"),
        ],
        circuit_name="Ladder",
    )


@pytest.fixture
def contradictory_sources_circuit():
    """Two ideal sources forcing different potentials onto the same node."""
    return make_circuit(
        [
            ("V1", "VoltageSource", ("n1", "gnd"), 10, "V"),
            ("V2", "VoltageSource", ("n1", "gnd"), 5, "V"),
            ("R1", "Resistor", ("n1", "gnd"), 1, "kΩ"),
        ],
        circuit_name="Contradiction",
    )


@pytest.fixture
def ladder_yaml():
    return """
circuit_name: Ladder
ground_net: gnd
method: nodal
nodes:
  - {id: n1, name: Node 1}
  - {id: n2, name: Node 2}
  - {id: gnd, name: Ground}
components:
  - {id: V1, type: VoltageSource, nodes: [n1, gnd], value: 10, unit: V}
  - {id: R1, type: Resistor, nodes: [n1, n2], value: 2, unit: kΩ}
  - {id: R2, type: Resistor, nodes: [n2, gnd], value: 3, unit: kΩ}
  - {id: R3, type: Resistor, nodes: [n2, gnd], value: 2, unit: kΩ}
"""


@pytest.fixture
def write_netlist(tmp_path):
    """Writes YAML text to a file in tmp_path and returns its path."""
    def _write(content: str, name: str = "netlist.yaml"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
