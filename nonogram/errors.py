class NoSolution(Exception):
    """No combination of some line agrees with the cells known so far."""


class ProblemError(ValueError):
    """The puzzle definition cannot describe any grid."""
