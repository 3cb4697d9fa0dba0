import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nqsearch.brute_force import bf_nqueens
from nqsearch.hill_climbing import hc_nqueens

print("Running hc_nqueens() for N=8, 16, 24")
for n in (8, 16, 24):
    success, restarts, steps, elapsed, best, evals, timeout, board = hc_nqueens(
        n, max_restarts=200, time_limit=5.0, rng=random.Random(n)
    )
    print(f"  N={n} -> success={success}, restarts={restarts}, steps={steps}, evals={evals}, elapsed={elapsed:.4f}s")
    if success:
        assert board.is_valid()
        print("  -> sample solution:", board.rows())
    else:
        print(f"  -> best conflicts={best}, timeout={timeout}")

print("Running bf_nqueens() for N=8")
solutions, checked, elapsed = bf_nqueens(8)
print(f"  -> {len(solutions)} solutions, {checked} permutations, elapsed={elapsed:.4f}s")
assert len(solutions) == 92

print("Smoke test finished.")
