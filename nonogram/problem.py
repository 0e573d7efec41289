import json
from dataclasses import dataclass
from typing import Any, Sequence, TextIO

from .bitmap import MAX_SIZE
from .combinations import min_length
from .errors import ProblemError


Groups = tuple[tuple[int, ...], ...]


def normalize_groups(lines: Sequence[Sequence[int]]) -> Groups:
    try:
        return tuple(tuple(int(group) for group in line) for line in lines)
    except (TypeError, ValueError) as err:
        raise ProblemError(f"Groups must be lists of integers: {lines!r}") from err


@dataclass(frozen=True)
class Problem:
    """Group lengths by column (`vertical`) and by row (`horizontal`)."""

    vertical: Groups
    horizontal: Groups

    def __post_init__(self):
        object.__setattr__(self, "vertical", normalize_groups(self.vertical))
        object.__setattr__(self, "horizontal", normalize_groups(self.horizontal))
        self.validate()

    @property
    def width(self) -> int:
        return len(self.vertical)

    @property
    def height(self) -> int:
        return len(self.horizontal)

    def validate(self) -> None:
        for name, size in (("width", self.width), ("height", self.height)):
            if size > MAX_SIZE:
                raise ProblemError(f"Grid {name} {size} exceeds the maximum of {MAX_SIZE}")
        for direction, lines, size in (
            ("column", self.vertical, self.height),
            ("row", self.horizontal, self.width),
        ):
            for idx, groups in enumerate(lines):
                if any(group < 1 for group in groups):
                    raise ProblemError(f"{direction.capitalize()} {idx} has non-positive groups: {list(groups)}")
                if min_length(groups) > size:
                    raise ProblemError(f"{direction.capitalize()} {idx} groups {list(groups)} do not fit in {size} cells")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Problem":
        if not isinstance(data, dict):
            raise ProblemError(f"Expected a JSON object, got {type(data).__name__}")
        if "v" in data and "h" in data:
            return cls(vertical=data["v"], horizontal=data["h"])
        if "col_hints" in data and "row_hints" in data:
            return cls(vertical=data["col_hints"], horizontal=data["row_hints"])
        raise ProblemError(f"Expected keys 'v'/'h' or 'col_hints'/'row_hints', got {sorted(data)}")

    @classmethod
    def read(cls, f: TextIO) -> "Problem":
        try:
            data = json.load(f)
        except ValueError as err:
            raise ProblemError(f"Invalid JSON: {err}") from err
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: str) -> "Problem":
        with open(path) as f:
            return cls.read(f)
