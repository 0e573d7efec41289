import logging
import random
import threading
from typing import Iterator, NamedTuple, Optional, Sequence

import numpy as np

from .axis import Axis
from .errors import NoSolution
from .field import classify_line, new_field
from .problem import Problem


logger = logging.getLogger(__name__)


class Cell(NamedTuple):
    row: int
    col: int


class Solutions:
    """Append-only collection of solved states, shared by every branch of a search."""

    def __init__(self):
        self._states: list["State"] = []
        self._lock = threading.Lock()

    def append(self, state: "State") -> None:
        with self._lock:
            self._states.append(state)

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator["State"]:
        return iter(list(self._states))

    def __getitem__(self, idx: int) -> "State":
        return self._states[idx]

    def fields(self) -> list[np.ndarray]:
        return [state.to_field() for state in self]


class State:
    def __init__(self, problem: Problem):
        self.problem = problem
        self.vertical = Axis(problem.vertical, problem.height)
        self.horizontal = Axis(problem.horizontal, problem.width)
        self.path = ["root"]

    def copy(self) -> "State":
        result = State.__new__(State)
        result.problem = self.problem
        result.vertical = self.vertical.copy()
        result.horizontal = self.horizontal.copy()
        result.path = list(self.path)
        return result

    @property
    def is_solved(self) -> bool:
        return self.vertical.is_solved and self.horizontal.is_solved

    def solve(self, solutions: Solutions, rng=None) -> None:
        """
        Record every solution reachable from this state in `solutions`.

        Raises NoSolution if there is none. The state is consumed: after the
        call it holds whatever branch was explored last.
        """
        rng = rng or random
        while True:
            self.simplify()
            if self.is_solved:
                logger.debug("Solution found at %s", "/".join(self.path))
                solutions.append(self.copy())
                return

            cell = rng.choice(self.unsolved_cells())
            value = rng.choice((True, False))
            logger.debug("Guess %s = %d at %s", cell, value, "/".join(self.path))
            if not self.branch(solutions, cell, value, rng):
                return

    def branch(self, solutions: Solutions, cell: Cell, value: bool, rng=None) -> bool:
        """
        Split the search on `cell`, trying `value` first.

        Returns True if `value` was disproved: the opposite value is then
        assumed here and the caller must keep simplifying. Returns False once
        both values have been explored.
        """
        copy = self.copy()
        copy.assume(cell, value)
        try:
            copy.solve(solutions, rng)
        except NoSolution:
            logger.debug("Disproved %s", "/".join(copy.path))
            self.assume(cell, not value)
            return True

        self.assume(cell, not value)
        try:
            self.solve(solutions, rng)
        except NoSolution:
            logger.debug("Disproved %s, earlier solutions are the only ones", "/".join(self.path))
        return False

    def simplify(self) -> None:
        """Propagate known cells between rows and columns until nothing changes."""
        step = 0
        while True:
            v_progressed = self.vertical.process(self.horizontal)
            h_progressed = self.horizontal.process(self.vertical)
            if not (v_progressed or h_progressed):
                break
            step += 1
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("After step %s [%d]:\n%s", "/".join(self.path), step, self)

    def unsolved_cells(self) -> list[Cell]:
        result = []
        for i, row in enumerate(self.horizontal.solved):
            for j in range(self.problem.width):
                col = self.vertical.solved[j]
                assert (row.ones[j], row.zeros[j]) == (col.ones[i], col.zeros[i]), f"Axes disagree on {(i, j)}"
                if not row.ones[j] and not row.zeros[j]:
                    result.append(Cell(i, j))
        return result

    def assume(self, cell: Cell, value: bool) -> None:
        self.horizontal.assume(cell.row, cell.col, value)
        self.vertical.assume(cell.col, cell.row, value)
        self.path.append(f"({cell.row},{cell.col}) = {int(value)}")

    def to_field(self) -> np.ndarray:
        field = new_field(self.problem.height, self.problem.width)
        for i, row in enumerate(self.horizontal.solved):
            field[i] = classify_line(int(row.ones), int(row.zeros), self.problem.width)
        return field

    def __str__(self) -> str:
        width = self.problem.width
        lines = []
        for i, row in enumerate(self.horizontal.solved):
            if i > 0 and i % 5 == 0:
                lines.append("".join(("╋" if j > 0 and j % 5 == 0 else "") + "━" for j in range(width)))
            line = ""
            for j in range(width):
                if j > 0 and j % 5 == 0:
                    line += "┃"
                if row.ones[j]:
                    assert not row.zeros[j]
                    line += "1"
                elif row.zeros[j]:
                    line += "0"
                else:
                    line += " "
            lines.append(line)
        return "".join(line + "\n" for line in lines)


def solve(
    row_hints: Sequence[Sequence[int]], col_hints: Sequence[Sequence[int]], rng: Optional[random.Random] = None
) -> list[np.ndarray]:
    """All solutions as FILLED/EMPTY fields; raises NoSolution if there are none."""
    solutions = Solutions()
    State(Problem(vertical=col_hints, horizontal=row_hints)).solve(solutions, rng)
    return solutions.fields()
