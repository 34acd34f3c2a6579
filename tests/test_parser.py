# tests/test_parser.py
import pytest

from dcmna_core import CircuitBuildError, run_analysis
from dcmna_core.data_structures import AnalysisMethod, ComponentType
from dcmna_core.parser import NetlistParser, ParsingError, SchemaValidationError


@pytest.fixture
def parser():
    return NetlistParser()


class TestValidNetlists:

    def test_parse_ladder(self, parser, write_netlist, ladder_yaml):
        path = write_netlist(ladder_yaml)
        circuit = parser.parse_file(path)

        assert circuit.name == "Ladder"
        assert circuit.ground_node_id == "gnd"
        assert circuit.method is AnalysisMethod.NODAL
        assert [n.id for n in circuit.nodes] == ["n1", "n2", "gnd"]
        assert circuit.nodes[0].label == "Node 1"
        assert [c.id for c in circuit.components] == ["V1", "R1", "R2", "R3"]

        r1 = circuit.get_component("R1")
        assert r1.kind is ComponentType.RESISTOR
        assert r1.nodes == ("n1", "n2")
        assert r1.value == 2.0
        assert r1.unit == "kΩ"
        assert circuit.source_file_path == str(path.resolve())

    def test_defaults(self, parser, write_netlist):
        path = write_netlist(
            """
nodes:
  - id: a
components:
  - {id: R1, type: Resistor, nodes: [a, gnd], value: 100}
""",
            name="minimal_divider.yaml",
        )
        circuit = parser.parse_file(path)

        assert circuit.name == "minimal_divider"
        assert circuit.ground_node_id == "gnd"
        assert circuit.method is AnalysisMethod.NODAL
        assert circuit.nodes[0].name == ""
        assert circuit.components[0].unit == ""

    def test_mesh_method_and_custom_ground(self, parser):
        circuit = parser.parse_dict({
            "circuit_name": "Custom",
            "ground_net": "ref",
            "method": "mesh",
            "nodes": [{"id": "a"}, {"id": "ref"}],
            "components": [
                {"id": "V1", "type": "VoltageSource", "nodes": ["a", "ref"], "value": 1.5, "unit": "V"},
                {"id": "R1", "type": "Resistor", "nodes": ["a", "ref"], "value": 3},
            ],
        })
        assert circuit.method is AnalysisMethod.MESH
        assert circuit.ground_node_id == "ref"
        assert [n.id for n in circuit.non_ground_nodes] == ["a"]
        assert circuit.source_file_path is None

    def test_parsed_netlist_analyses_like_the_programmatic_circuit(self, parser, write_netlist, ladder_yaml, ladder_circuit):
        from_file = parser.load_circuit(write_netlist(ladder_yaml))

        assert from_file.components == ladder_circuit.components
        assert [n.id for n in from_file.nodes] == [n.id for n in ladder_circuit.nodes]
        result = run_analysis(from_file)
        assert result.node_voltages["n2"] == pytest.approx(3.75)


class TestFileErrors:

    def test_missing_file(self, parser, tmp_path):
        with pytest.raises(ParsingError, match="not found"):
            parser.parse_file(tmp_path / "does_not_exist.yaml")

    def test_invalid_yaml_syntax(self, parser, write_netlist):
        path = write_netlist("nodes: [a, b\ncomponents: {")
        with pytest.raises(ParsingError, match="Invalid YAML syntax"):
            parser.parse_file(path)

    def test_empty_file(self, parser, write_netlist):
        with pytest.raises(ParsingError, match="empty"):
            parser.parse_file(write_netlist(""))

    def test_root_must_be_a_mapping(self, parser, write_netlist):
        with pytest.raises(ParsingError, match="dictionary"):
            parser.parse_file(write_netlist("- just\n- a list\n"))

    def test_load_circuit_wraps_into_build_error(self, parser, tmp_path):
        with pytest.raises(CircuitBuildError) as excinfo:
            parser.load_circuit(tmp_path / "missing.yaml")

        report = str(excinfo.value)
        assert "YAML Parsing or File Error" in report
        assert "missing.yaml" in report
        assert isinstance(excinfo.value.__cause__, ParsingError)


class TestSchemaErrors:

    @staticmethod
    def _netlist(**overrides):
        data = {
            "nodes": [{"id": "n1"}, {"id": "gnd"}],
            "components": [{"id": "R1", "type": "Resistor", "nodes": ["n1", "gnd"], "value": 1, "unit": "kΩ"}],
        }
        data.update(overrides)
        return data

    def test_missing_components(self, parser):
        data = self._netlist()
        del data["components"]
        with pytest.raises(SchemaValidationError) as excinfo:
            parser.parse_dict(data)
        assert "components" in excinfo.value.errors

    def test_unknown_top_level_key(self, parser):
        with pytest.raises(SchemaValidationError):
            parser.parse_dict(self._netlist(sweep={"type": "linear"}))

    def test_unknown_component_type(self, parser):
        components = [{"id": "C1", "type": "Capacitor", "nodes": ["n1", "gnd"], "value": 1}]
        with pytest.raises(SchemaValidationError):
            parser.parse_dict(self._netlist(components=components))

    def test_component_needs_exactly_two_nodes(self, parser):
        components = [{"id": "R1", "type": "Resistor", "nodes": ["n1", "gnd", "n1"], "value": 1}]
        with pytest.raises(SchemaValidationError):
            parser.parse_dict(self._netlist(components=components))

    def test_value_must_be_numeric(self, parser):
        components = [{"id": "R1", "type": "Resistor", "nodes": ["n1", "gnd"], "value": "1k"}]
        with pytest.raises(SchemaValidationError):
            parser.parse_dict(self._netlist(components=components))

    def test_invalid_identifier(self, parser):
        components = [{"id": "R-1", "type": "Resistor", "nodes": ["n1", "gnd"], "value": 1}]
        with pytest.raises(SchemaValidationError) as excinfo:
            parser.parse_dict(self._netlist(components=components))
        assert "forbidden character" in str(excinfo.value)

    def test_duplicate_component_ids(self, parser):
        components = [
            {"id": "R1", "type": "Resistor", "nodes": ["n1", "gnd"], "value": 1},
            {"id": "R1", "type": "Resistor", "nodes": ["n1", "gnd"], "value": 2},
        ]
        with pytest.raises(SchemaValidationError) as excinfo:
            parser.parse_dict(self._netlist(components=components))
        assert "Duplicate values found for key 'id'" in str(excinfo.value)

    def test_unknown_method(self, parser):
        with pytest.raises(SchemaValidationError):
            parser.parse_dict(self._netlist(method="thevenin"))

    def test_build_circuit_wraps_schema_errors(self, parser):
        with pytest.raises(CircuitBuildError) as excinfo:
            parser.build_circuit(self._netlist(method="thevenin"), source_name="inline")
        assert "YAML Schema Validation Error" in str(excinfo.value)

    def test_build_circuit_rejects_non_mapping(self, parser):
        with pytest.raises(CircuitBuildError) as excinfo:
            parser.build_circuit(["not", "a", "mapping"])
        assert "dictionary" in str(excinfo.value)
