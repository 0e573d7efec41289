import random
from unittest import TestCase, mock

import numpy as np
from numpy.testing import assert_array_equal

from nonogram.axis import Axis
from nonogram.combinations import generate_combinations
from nonogram.errors import NoSolution
from nonogram.field import EMPTY, FILLED, UNKNOWN, field_to_str, line_groups, line_to_str, str_to_field
from nonogram.problem import Problem
from nonogram.solver import Cell, Solutions, State, solve


# Gecode's "Nonunique" nonogram, known to have 43 solutions.
NONUNIQUE_ROWS = [
    [2, 2], [2, 2], [4], [1, 1], [1, 1], [1, 1, 1, 1], [1, 1], [1, 4],
    [1, 1, 1], [1, 1, 4], [1, 3], [1, 2], [5], [2, 2], [3, 3],
]
NONUNIQUE_COLS = [
    [5], [1, 2, 4], [2, 1, 3], [2, 2, 1, 1], [1, 1, 1, 1], [1, 5],
    [2, 1, 1, 3, 2], [2, 1, 1, 1, 1], [1, 4, 1], [1, 1], [1],
]


def solution_strs(row_hints, col_hints, seed=0) -> set[str]:
    return {field_to_str(field) for field in solve(row_hints, col_hints, random.Random(seed))}


def assert_consistent(test: TestCase, state: State):
    for axis in (state.horizontal, state.vertical):
        for row in axis.solved:
            test.assertFalse(row.ones & row.zeros)
    for i, row in enumerate(state.horizontal.solved):
        for j, col in enumerate(state.vertical.solved):
            test.assertEqual((row.ones[j], row.zeros[j]), (col.ones[i], col.zeros[i]))


class SolverTestCase(TestCase):
    def test_single_full_row(self):
        fields = solve([[5]], [[1]] * 5)
        self.assertEqual(len(fields), 1)
        self.assertEqual(line_to_str(fields[0][0]), "*****")

    def test_single_empty_row(self):
        fields = solve([[]], [[]] * 5)
        self.assertEqual(len(fields), 1)
        self.assertEqual(line_to_str(fields[0][0]), "XXXXX")

    def test_single_cell_in_row(self):
        fields = solve([[1]], [[1], [], []])
        self.assertEqual(len(fields), 1)
        assert_array_equal(fields[0], np.array([[FILLED, EMPTY, EMPTY]]))

    def test_contradiction_at_root(self):
        with self.assertRaises(NoSolution):
            solve([[1]], [[]])
        solutions = Solutions()
        with self.assertRaises(NoSolution):
            State(Problem(vertical=[[]], horizontal=[[1]])).solve(solutions)
        self.assertEqual(len(solutions), 0)

    def test_two_diagonals(self):
        self.assertEqual(solution_strs([[1], [1]], [[1], [1]]), {"*X\nX*", "X*\n*X"})

    def test_solve_by_propagation_only(self):
        row_hints = [[5], [1], [5], [1], [5]]
        col_hints = [[3, 1], [1, 1, 1], [1, 1, 1], [1, 1, 1], [1, 3]]
        state = State(Problem(vertical=col_hints, horizontal=row_hints))
        state.simplify()
        self.assertTrue(state.is_solved)
        self.assertEqual([line_to_str(line) for line in state.to_field()], [
            "*****",
            "*XXXX",
            "*****",
            "XXXX*",
            "*****",
        ])
        assert_consistent(self, state)

    def test_partial_propagation(self):
        state = State(Problem(vertical=[[1], [1]], horizontal=[[1], [1]]))
        state.simplify()
        self.assertFalse(state.is_solved)
        assert_array_equal(state.to_field(), np.full((2, 2), UNKNOWN))
        self.assertEqual(state.unsolved_cells(), [Cell(0, 0), Cell(0, 1), Cell(1, 0), Cell(1, 1)])

    def test_nonunique_puzzle(self):
        solutions = solution_strs(NONUNIQUE_ROWS, NONUNIQUE_COLS)
        self.assertEqual(len(solutions), 43)

    def test_solution_set_is_deterministic(self):
        expected = solution_strs(NONUNIQUE_ROWS, NONUNIQUE_COLS, seed=1)
        for seed in range(2, 6):
            with self.subTest(seed=seed):
                self.assertEqual(solution_strs(NONUNIQUE_ROWS, NONUNIQUE_COLS, seed=seed), expected)

    def test_solutions_are_valid(self):
        for field in solve(NONUNIQUE_ROWS, NONUNIQUE_COLS, random.Random(7)):
            self.assertFalse(np.any(field == UNKNOWN))
            for hints, line in zip(NONUNIQUE_ROWS, field):
                self.assertEqual(line_groups(line), tuple(hints))
            for hints, line in zip(NONUNIQUE_COLS, field.T):
                self.assertEqual(line_groups(line), tuple(hints))

    def test_solved_states_match_generated_combinations(self):
        problem = Problem(vertical=NONUNIQUE_COLS, horizontal=NONUNIQUE_ROWS)
        solutions = Solutions()
        State(problem).solve(solutions, random.Random(3))
        for state in solutions:
            assert_consistent(self, state)
            for groups, row in zip(problem.horizontal, state.horizontal.solved):
                self.assertIn(row.ones, generate_combinations(problem.width, groups))
            for groups, col in zip(problem.vertical, state.vertical.solved):
                self.assertIn(col.ones, generate_combinations(problem.height, groups))

    def test_branch_disproves_guess(self):
        # Row 0 must be filled at (0, 0); guessing it empty is refuted.
        state = State(Problem(vertical=[[1], [], []], horizontal=[[1]]))
        solutions = Solutions()
        self.assertTrue(state.branch(solutions, Cell(0, 0), False))
        self.assertEqual(len(solutions), 0)
        self.assertTrue(state.horizontal.solved[0].ones[0])
        self.assertTrue(state.vertical.solved[0].ones[0])

    def test_branch_explores_both_values(self):
        state = State(Problem(vertical=[[1], [1]], horizontal=[[1], [1]]))
        state.simplify()
        solutions = Solutions()
        self.assertFalse(state.branch(solutions, Cell(0, 0), True, random.Random(0)))
        self.assertEqual([field_to_str(field) for field in solutions.fields()], ["*X\nX*", "X*\n*X"])

    def test_knowledge_only_grows(self):
        state = State(Problem(vertical=NONUNIQUE_COLS, horizontal=NONUNIQUE_ROWS))
        state.simplify()
        before = [(row.ones, row.zeros) for row in state.horizontal.solved]
        cell = state.unsolved_cells()[0]
        for value in (True, False):
            guessed = state.copy()
            guessed.assume(cell, value)
            try:
                guessed.simplify()
            except NoSolution:
                continue
            break
        else:
            self.fail(f"Both values of {cell} were refuted on a solvable puzzle")

        self.assertLess(len(guessed.unsolved_cells()), len(state.unsolved_cells()))
        for (ones, zeros), row in zip(before, guessed.horizontal.solved):
            self.assertEqual(row.ones & ones, ones)
            self.assertEqual(row.zeros & zeros, zeros)
        assert_consistent(self, guessed)

    def test_knowledge_only_grows_during_search(self):
        rounds = []
        original_process = Axis.process

        def checked_process(axis, other):
            before = list(axis.solved)
            progressed = original_process(axis, other)
            for prev, row in zip(before, axis.solved):
                self.assertEqual(row.ones & prev.ones, prev.ones)
                self.assertEqual(row.zeros & prev.zeros, prev.zeros)
                self.assertFalse(row.ones & row.zeros)
            rounds.append(progressed)
            return progressed

        with mock.patch.object(Axis, "process", checked_process):
            fields = solve(NONUNIQUE_ROWS, NONUNIQUE_COLS, random.Random(11))
        self.assertEqual(len(fields), 43)
        self.assertIn(True, rounds)

    def test_copy_does_not_share_solved_rows(self):
        state = State(Problem(vertical=[[1], [1]], horizontal=[[1], [1]]))
        clone = state.copy()
        clone.assume(Cell(1, 1), True)
        clone.simplify()
        self.assertTrue(clone.is_solved)
        self.assertFalse(state.is_solved)
        self.assertEqual(state.path, ["root"])
        self.assertEqual(clone.path, ["root", "(1,1) = 1"])
        assert_array_equal(clone.to_field(), str_to_field("*X\nX*"))

    def test_rendering(self):
        state = State(Problem(vertical=[[1]] * 6, horizontal=[[6]] + [[]] * 5))
        state.simplify()
        self.assertEqual(str(state), "11111┃1\n" + "00000┃0\n" * 4 + "━━━━━╋━\n" + "00000┃0\n")

    def test_branch_decisions_are_logged(self):
        with self.assertLogs("nonogram.solver", level="DEBUG") as logs:
            solve([[1], [1]], [[1], [1]], random.Random(0))
        self.assertTrue(any("Guess Cell(" in line for line in logs.output))
        self.assertTrue(any("Solution found at root/" in line for line in logs.output))
