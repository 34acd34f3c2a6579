# tests/test_solver.py
import numpy as np
import pytest
import scipy.linalg

from dcmna_core.constants import PIVOT_TOLERANCE
from dcmna_core.simulation import solve_linear_system
from dcmna_core.trace import EquationLines, MatrixBlock, TracePhase


def _titles(outcome):
    return [step.title for step in outcome.steps]


class TestGaussianElimination:

    def test_matches_scipy_reference(self):
        rng = np.random.default_rng(1234)
        A = rng.normal(size=(6, 6)) + 6.0 * np.eye(6)
        b = rng.normal(size=6)

        outcome = solve_linear_system(A, b)

        assert not outcome.singular
        np.testing.assert_allclose(outcome.solution, scipy.linalg.solve(A, b), rtol=1e-10, atol=1e-12)

    def test_caller_arrays_are_not_mutated(self):
        A = np.array([[0.0, 2.0, 1.0], [1.0, 1.0, 0.0], [3.0, 0.0, 1.0]])
        b = np.array([1.0, 2.0, 3.0])
        A_before, b_before = A.copy(), b.copy()

        solve_linear_system(A, b)

        np.testing.assert_array_equal(A, A_before)
        np.testing.assert_array_equal(b, b_before)

    def test_accepts_nested_lists(self):
        outcome = solve_linear_system([[2, 0], [0, 4]], [2, 8])
        np.testing.assert_allclose(outcome.solution, [1.0, 2.0])

    def test_solution_is_read_only(self):
        outcome = solve_linear_system([[2.0]], [4.0])
        with pytest.raises(ValueError):
            outcome.solution[0] = 0.0

    def test_rejects_non_square_input(self):
        with pytest.raises(ValueError, match="square"):
            solve_linear_system(np.ones((2, 3)), np.ones(2))
        with pytest.raises(ValueError, match="Right-hand side"):
            solve_linear_system(np.eye(2), np.ones(3))


class TestPivoting:

    def test_swap_is_recorded_when_a_lower_row_is_larger(self):
        outcome = solve_linear_system([[0.0, 1.0], [1.0, 1.0]], [1.0, 3.0])

        assert "Step 1a: swap row 1 with row 2" in _titles(outcome)
        np.testing.assert_allclose(outcome.solution, [2.0, 1.0])

    def test_ties_keep_the_lowest_row(self):
        # |A[0,0]| == |A[1,0]|: the strict comparison keeps row 1 as pivot.
        outcome = solve_linear_system([[1.0, 2.0], [-1.0, 1.0]], [3.0, 0.0])

        assert not any("swap" in title for title in _titles(outcome))
        np.testing.assert_allclose(outcome.solution, [1.0, 1.0])

    def test_negligible_factors_are_skipped(self):
        outcome = solve_linear_system([[1.0, 0.0], [1e-12, 1.0]], [1.0, 2.0])

        assert _titles(outcome) == ["Initial augmented matrix", "Row echelon form", "Back substitution"]
        np.testing.assert_allclose(outcome.solution, [1.0, 2.0])

    def test_factor_equal_to_tolerance_is_skipped(self):
        outcome = solve_linear_system([[1.0, 0.0], [PIVOT_TOLERANCE, 1.0]], [1.0, 2.0])

        assert _titles(outcome) == ["Initial augmented matrix", "Row echelon form", "Back substitution"]
        np.testing.assert_allclose(outcome.solution, [1.0, 2.0])

    def test_factor_just_above_tolerance_is_applied(self):
        outcome = solve_linear_system([[1.0, 0.0], [PIVOT_TOLERANCE * 10, 1.0]], [1.0, 2.0])

        assert len(_titles(outcome)) == 4
        assert _titles(outcome)[1].startswith("Step 1b: R2 = R2")

    def test_elimination_record_carries_exact_factor(self):
        outcome = solve_linear_system([[4.0, 1.0], [2.0, 3.0]], [5.0, 5.0])

        step = outcome.steps[1]
        assert step.title == "Step 1b: R2 = R2 - (0.5000) x R1"
        assert "factor = 0.5" in step.description
        assert step.payload.rows[1][0].strip() == "0.0000"
        np.testing.assert_allclose(outcome.solution, [1.0, 1.0])


class TestSingularSystems:

    def test_dependent_rows_are_reported_as_singular(self):
        outcome = solve_linear_system([[1.0, 2.0], [2.0, 4.0]], [1.0, 2.0])

        assert outcome.singular
        assert outcome.solution is None
        assert outcome.singular_pivot_row == 1
        assert _titles(outcome) == [
            "Initial augmented matrix",
            "Step 1a: swap row 1 with row 2",
            "Step 1b: R2 = R2 - (0.5000) x R1",
        ]

    def test_zero_matrix_fails_on_first_pivot(self):
        outcome = solve_linear_system(np.zeros((3, 3)), np.ones(3))

        assert outcome.singular
        assert outcome.singular_pivot_row == 0
        assert len(outcome.steps) == 1

    def test_pivot_just_below_tolerance_is_singular(self):
        tiny = PIVOT_TOLERANCE / 10
        outcome = solve_linear_system([[tiny]], [1.0])
        assert outcome.singular

    def test_pivot_equal_to_tolerance_is_not_singular(self):
        outcome = solve_linear_system([[PIVOT_TOLERANCE]], [PIVOT_TOLERANCE])

        assert not outcome.singular
        np.testing.assert_allclose(outcome.solution, [1.0])

    def test_tolerance_override(self):
        outcome = solve_linear_system([[1e-12]], [1e-12], tolerance=1e-15)
        np.testing.assert_allclose(outcome.solution, [1.0])


class TestRecordedSteps:

    def test_all_records_belong_to_elimination_phase(self):
        outcome = solve_linear_system([[0.0, 1.0], [1.0, 1.0]], [1.0, 3.0])
        assert all(step.phase is TracePhase.ELIMINATION for step in outcome.steps)

    def test_matrix_snapshots_are_augmented_and_formatted(self):
        outcome = solve_linear_system([[2.0, 1.0], [1.0, 3.0]], [3.0, 4.0])

        initial = outcome.steps[0]
        assert isinstance(initial.payload, MatrixBlock)
        assert initial.payload.augmented
        assert initial.payload.rows[0] == ("    2.0000", "    1.0000", "    3.0000")
        assert initial.render_lines()[0] == "[    2.0000     1.0000 |     3.0000]"

    def test_back_substitution_lists_every_unknown(self):
        outcome = solve_linear_system([[2.0, 0.0], [0.0, 4.0]], [1.0, 1.0])

        final = outcome.steps[-1]
        assert final.title == "Back substitution"
        assert isinstance(final.payload, EquationLines)
        assert final.payload.lines == ("x1 = 0.500000", "x2 = 0.250000")
