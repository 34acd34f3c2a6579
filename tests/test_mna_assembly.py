# tests/test_mna_assembly.py
import numpy as np
import pytest

from dcmna_core.simulation import MnaAssembler, MnaInputError, solve_linear_system
from dcmna_core.trace import EquationLines, MatrixBlock, StepTrace, TracePhase

from conftest import make_circuit


class TestIndexing:

    def test_nodes_and_sources_follow_declaration_order(self, ladder_circuit):
        assembler = MnaAssembler(ladder_circuit)

        assert assembler.node_map == {"n1": 0, "n2": 1}
        assert assembler.source_map == {"V1": 0}
        assert assembler.size == 3
        assert assembler.unknown_labels == ("V1", "V2", "I1")
        assert assembler.node_index("gnd") is None
        assert assembler.source_column("V1") == 2

    def test_ground_declared_first_is_still_excluded(self):
        circuit = make_circuit(
            [("R1", "Resistor", ("n1", "gnd"), 10, "Ω")],
            node_ids=["gnd", "n1"],
        )
        assert MnaAssembler(circuit).node_map == {"n1": 0}

    def test_circuit_with_only_ground_is_rejected(self):
        circuit = make_circuit([("R1", "Resistor", ("gnd", "gnd"), 10, "Ω")], node_ids=["gnd"])
        with pytest.raises(MnaInputError, match="no node besides ground"):
            MnaAssembler(circuit)

    def test_unknown_node_reference_is_rejected(self):
        circuit = make_circuit([("R1", "Resistor", ("n1", "nX"), 10, "Ω")], node_ids=["n1", "gnd"])
        with pytest.raises(MnaInputError) as excinfo:
            MnaAssembler(circuit)
        assert "nX" in str(excinfo.value)
        assert "MNA Input Error" in excinfo.value.get_diagnostic_report()


class TestStamping:

    def test_ladder_matrix(self, ladder_circuit):
        system = MnaAssembler(ladder_circuit).assemble(StepTrace())

        g1, g2, g3 = 1 / 2000, 1 / 3000, 1 / 2000
        expected_A = np.array([
            [g1, -g1, 1.0],
            [-g1, g1 + g2 + g3, 0.0],
            [1.0, 0.0, 0.0],
        ])
        np.testing.assert_allclose(system.matrix, expected_A, rtol=1e-14)
        np.testing.assert_array_equal(system.rhs, [0.0, 0.0, 10.0])
        assert system.num_node_unknowns == 2

    def test_resistor_only_network_is_symmetric(self):
        circuit = make_circuit([
            ("R1", "Resistor", ("n1", "n2"), 100, "Ω"),
            ("R2", "Resistor", ("n2", "n3"), 220, "Ω"),
            ("R3", "Resistor", ("n3", "n1"), 470, "Ω"),
            ("R4", "Resistor", ("n1", "gnd"), 1, "kΩ"),
            ("R5", "Resistor", ("n3", "gnd"), 2.2, "kΩ"),
        ])
        A = MnaAssembler(circuit).assemble(StepTrace()).matrix

        np.testing.assert_allclose(A, A.T, rtol=0, atol=0)
        assert np.all(np.diag(A) > 0)

    def test_source_stamps_are_mirrored(self):
        circuit = make_circuit([
            ("V1", "VoltageSource", ("n1", "n2"), 5, "V"),
            ("R1", "Resistor", ("n1", "gnd"), 1, "kΩ"),
            ("R2", "Resistor", ("n2", "gnd"), 1, "kΩ"),
        ])
        system = MnaAssembler(circuit).assemble(StepTrace())
        A = system.matrix

        assert (A[0, 2], A[1, 2]) == (1.0, -1.0)
        assert (A[2, 0], A[2, 1]) == (1.0, -1.0)
        assert A[2, 2] == 0.0
        assert system.rhs[2] == 5.0
        np.testing.assert_allclose(A, A.T)

        outcome = solve_linear_system(system.matrix, system.rhs)
        np.testing.assert_allclose(outcome.solution, [2.5, -2.5, -0.0025], atol=1e-12)

    def test_source_with_positive_terminal_on_ground(self):
        circuit = make_circuit([
            ("V1", "VoltageSource", ("gnd", "n1"), 5, "V"),
            ("R1", "Resistor", ("n1", "gnd"), 1, "kΩ"),
        ])
        system = MnaAssembler(circuit).assemble(StepTrace())

        assert system.matrix[1, 0] == -1.0
        assert system.matrix[0, 1] == -1.0
        outcome = solve_linear_system(system.matrix, system.rhs)
        assert outcome.solution[0] == pytest.approx(-5.0)

    def test_current_sources_are_not_stamped(self, divider_circuit):
        with_source = make_circuit([
            ("V1", "VoltageSource", ("n1", "gnd"), 12, "V"),
            ("R1", "Resistor", ("n1", "gnd"), 1, "kΩ"),
            ("I1", "CurrentSource", ("n1", "gnd"), 0.002, "A"),
        ])
        plain = MnaAssembler(divider_circuit).assemble(StepTrace())
        stamped = MnaAssembler(with_source).assemble(StepTrace())

        np.testing.assert_array_equal(plain.matrix, stamped.matrix)
        np.testing.assert_array_equal(plain.rhs, stamped.rhs)

    def test_each_assembly_is_fresh_and_read_only(self, ladder_circuit):
        assembler = MnaAssembler(ladder_circuit)
        first = assembler.assemble(StepTrace())
        second = assembler.assemble(StepTrace())

        assert first.matrix is not second.matrix
        np.testing.assert_array_equal(first.matrix, second.matrix)
        assert not first.matrix.flags.writeable
        assert not first.rhs.flags.writeable


class TestAssemblyTrace:

    def test_records_cover_the_four_assembly_phases(self, divider_circuit):
        trace = StepTrace()
        MnaAssembler(divider_circuit).assemble(trace)

        assert [r.phase for r in trace] == [
            TracePhase.IDENTIFICATION,
            TracePhase.CONDUCTANCES,
            TracePhase.EQUATIONS,
            TracePhase.MATRIX,
        ]

    def test_record_contents(self, divider_circuit):
        trace = StepTrace()
        MnaAssembler(divider_circuit).assemble(trace)
        identification, conductances, equations, matrix = trace.records

        assert identification.payload.lines == ("V1 (voltage at node n1)", "I1 (current through V1)")
        assert conductances.payload.lines == ("R1: R = 1 kΩ = 1000.0000 Ω  ->  G = 0.00100000 S",)
        assert isinstance(equations.payload, EquationLines)
        assert equations.payload.lines == ("Node n1: GR1·V1 +I1 = 0", "Source V1: V1 = 12 V")
        assert isinstance(matrix.payload, MatrixBlock)
        assert not matrix.payload.augmented
        assert matrix.payload.annotations == ("[V1] = [0.0000]", "[I1] = [12.0000]")

    def test_current_source_note_in_equations(self):
        circuit = make_circuit([
            ("V1", "VoltageSource", ("n1", "gnd"), 12, "V"),
            ("R1", "Resistor", ("n1", "gnd"), 1, "kΩ"),
            ("I1", "CurrentSource", ("n1", "gnd"), 0.002, "A"),
        ])
        trace = StepTrace()
        MnaAssembler(circuit).assemble(trace)

        assert "I1 are not included" in trace.records[2].description
