from typing import Sequence

from .bitmap import EMPTY_BITMAP, MAX_SIZE, Bitmap
from .errors import ProblemError


def min_length(groups: Sequence[int]) -> int:
    """Shortest line holding `groups` with single-cell gaps."""
    if not groups:
        return 0
    return sum(groups) + len(groups) - 1


def generate_combinations(size: int, groups: Sequence[int]) -> list[Bitmap]:
    """
    Every placement of `groups` on a line of `size` cells.

    Placements are ordered by increasing leading gaps, the first group
    varying slowest.
    """
    if size > MAX_SIZE:
        raise ProblemError(f"Line of {size} cells exceeds the maximum of {MAX_SIZE}")
    if any(group < 1 for group in groups):
        raise ProblemError(f"Groups must be positive: {list(groups)}")
    volatility = size - min_length(groups)
    if volatility < 0:
        raise ProblemError(f"Groups {list(groups)} do not fit in {size} cells")

    result: list[Bitmap] = []
    _place(result, EMPTY_BITMAP, 0, volatility, tuple(groups))
    return result


def _place(result: list[Bitmap], current: Bitmap, pos: int, volatility: int, groups: tuple[int, ...]) -> None:
    if not groups:
        result.append(current)
        return
    group, rest = groups[0], groups[1:]
    for gap in range(volatility + 1):
        start = pos + gap
        _place(result, current | Bitmap.ones(start, start + group), start + group + 1, volatility - gap, rest)
