from typing import NamedTuple, Sequence

import numpy as np

from .bitmap import EMPTY_BITMAP, Bitmap
from .combinations import generate_combinations
from .errors import NoSolution


class SolvedRow(NamedTuple):
    ones: Bitmap = EMPTY_BITMAP
    zeros: Bitmap = EMPTY_BITMAP


def to_words(combinations: Sequence[Bitmap]) -> np.ndarray:
    return np.fromiter((int(c) for c in combinations), dtype=np.uint64, count=len(combinations))


class Axis:
    """
    Lines of one direction: candidate combinations, known cells and dirty flags.

    Candidate arrays are never modified in place, so copies may share them.
    """

    def __init__(self, groups: Sequence[Sequence[int]], other_size: int):
        self.other_size = other_size
        self.combinations: list[np.ndarray] = [
            to_words(generate_combinations(other_size, line_groups)) for line_groups in groups
        ]
        self.solved: list[SolvedRow] = [SolvedRow() for _ in groups]
        self.dirty: Bitmap = Bitmap.ones(0, len(groups))

    @property
    def size(self) -> int:
        return len(self.combinations)

    @property
    def is_solved(self) -> bool:
        return all(len(combs) == 1 for combs in self.combinations)

    def copy(self) -> "Axis":
        result = Axis.__new__(Axis)
        result.other_size = self.other_size
        result.combinations = list(self.combinations)
        result.solved = list(self.solved)
        result.dirty = self.dirty
        return result

    def process(self, other: "Axis") -> bool:
        """Narrow every dirty line and push newly known cells to `other`. True on progress."""
        result = False
        full = np.uint64(int(Bitmap.ones(0, self.other_size)))
        for i, combs in enumerate(self.combinations):
            assert len(combs)
            if not self.dirty[i]:
                continue

            row = self.solved[i]
            ones = np.uint64(int(row.ones))
            zeros = np.uint64(int(row.zeros))
            combs = combs[((combs & ones) == ones) & ((combs & zeros) == 0)]
            if not len(combs):
                raise NoSolution(f"No combination fits line {i}: ones={row.ones}, zeros={row.zeros}")
            self.combinations[i] = combs

            common_ones = Bitmap(int(np.bitwise_and.reduce(combs)))
            common_zeros = Bitmap(int(np.bitwise_and.reduce(~combs) & full))
            assert not (common_ones & common_zeros)

            if self.update(i, "ones", common_ones, other):
                result = True
            if self.update(i, "zeros", common_zeros, other):
                result = True
        self.dirty = EMPTY_BITMAP
        return result

    def update(self, i: int, plane: str, value: Bitmap, other: "Axis") -> bool:
        previous: Bitmap = getattr(self.solved[i], plane)
        changed = previous ^ value
        if not changed:
            return False
        assert previous & value == previous, f"Line {i} lost known {plane}: {previous} -> {value}"
        self.solved[i] = self.solved[i]._replace(**{plane: value})
        other.dirty |= changed

        for j in changed.indexes():
            other_row = other.solved[j]
            other.solved[j] = other_row._replace(**{plane: getattr(other_row, plane).set(i, value[j])})
        return True

    def assume(self, line: int, pos: int, value: bool) -> None:
        plane = "ones" if value else "zeros"
        row = self.solved[line]
        self.solved[line] = row._replace(**{plane: getattr(row, plane).set(pos)})
        self.dirty = self.dirty.set(line)
