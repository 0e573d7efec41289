"""
Grids of solved cells as numpy arrays.

A field holds one int8 code per cell: FILLED, EMPTY, or UNKNOWN when
propagation has not decided the cell yet.
"""
import numpy as np


FILLED = 1
EMPTY = -1
UNKNOWN = 0


VALUE_STR_MAP = {
    FILLED: "*",
    EMPTY: "X",
    UNKNOWN: ".",
}
STR_VALUE_MAP = {v: k for k, v in VALUE_STR_MAP.items()}


def new_field(num_rows: int, num_cols: int) -> np.ndarray:
    return np.full((num_rows, num_cols), UNKNOWN, dtype=np.int8)


def classify_line(ones: int, zeros: int, size: int) -> np.ndarray:
    """Cell codes for the first `size` bits of a line's known-filled and known-empty words."""
    shifts = np.arange(size, dtype=np.uint64)
    filled = (np.uint64(ones) >> shifts) & np.uint64(1) == 1
    empty = (np.uint64(zeros) >> shifts) & np.uint64(1) == 1
    assert not np.any(filled & empty)
    return np.select([filled, empty], [FILLED, EMPTY], UNKNOWN).astype(np.int8)


def line_to_str(line: np.ndarray) -> str:
    return ''.join(VALUE_STR_MAP[c] for c in line)


def field_to_str(field: np.ndarray) -> str:
    return "\n".join(map(line_to_str, field))


def str_to_line(s: str) -> np.ndarray:
    return np.asarray([STR_VALUE_MAP[c] for c in s], dtype=np.int8)


def str_to_field(s: str) -> np.ndarray:
    return np.stack([str_to_line(line) for line in s.strip().splitlines()])


def line_groups(line: np.ndarray) -> tuple[int, ...]:
    """Run lengths of filled cells; the line must not contain unknown cells."""
    assert np.all(line != UNKNOWN)
    padded = np.concatenate(([False], line == FILLED, [False]))
    edges, = np.nonzero(np.diff(padded.astype(np.int8)))
    return tuple(int(n) for n in edges[1::2] - edges[::2])
