"""N-Queens board model, successor enumeration, and solvers."""

from .board import Board
from .brute_force import bf_nqueens, brute_force_solutions
from .errors import (
    HillClimbingError,
    NoSolutionsExist,
    NQueensError,
    OutOfRange,
    SolutionNotFound,
    Unoccupied,
)
from .hill_climbing import ClimbResult, climb, hc_nqueens, hill_climbing_solution
from .successors import SuccessorIterator
from .utils import conflicts, conflicts_on2, is_valid_solution

__all__ = [
    "Board",
    "SuccessorIterator",
    "climb",
    "ClimbResult",
    "hill_climbing_solution",
    "hc_nqueens",
    "brute_force_solutions",
    "bf_nqueens",
    "conflicts",
    "conflicts_on2",
    "is_valid_solution",
    "NQueensError",
    "OutOfRange",
    "Unoccupied",
    "HillClimbingError",
    "NoSolutionsExist",
    "SolutionNotFound",
]
