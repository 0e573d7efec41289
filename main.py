import logging
import os
import sys
from time import monotonic

from nonogram.errors import NoSolution, ProblemError
from nonogram.field import line_to_str
from nonogram.problem import Problem
from nonogram.solver import Solutions, State


RECURSION_LIMIT = 100_000


def solve_problem(problem: Problem) -> Solutions:
    solutions = Solutions()
    State(problem).solve(solutions)
    return solutions


if __name__ == '__main__':
    logging.basicConfig(level=os.environ.get("NONOGRAM_LOG_LEVEL", "WARNING").upper())
    sys.setrecursionlimit(RECURSION_LIMIT)

    if len(sys.argv) > 1 and sys.argv[1] == "solve":
        try:
            problem = Problem.read(sys.stdin)
        except ProblemError as err:
            print(f"Invalid problem: {err}")
            sys.exit(2)
        start = monotonic()
        try:
            solutions = solve_problem(problem)
        except NoSolution:
            print("No solution")
            sys.exit(1)
        for field in solutions.fields():
            for line in field:
                print(line_to_str(line))
            print("")
        print(f"Elapsed: {(monotonic() - start) * 1000:.0f} ms")

    elif len(sys.argv) > 1:
        for path in sys.argv[1:]:
            try:
                solutions = solve_problem(Problem.load(path))
            except (OSError, ProblemError) as err:
                print(f"{path}: {err}")
                continue
            except NoSolution:
                print("No solution")
                sys.exit(1)
            print(f"Solved: {len(solutions)} solutions")
            for state in solutions:
                print(state)
    else:
        print(f"Usage: {sys.argv[0]} solve < problem.json | {sys.argv[0]} FILE...")
        sys.exit(2)
