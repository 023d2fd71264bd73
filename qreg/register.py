# register.py

import numpy as np

from qreg.logging_config import get_logger
from qreg.operators import (
    ERR_THRESH, X, Z, H,
    build_single, build_controlled, build_ccnot, build_cswap, validate_qubits,
)

logger = get_logger(__name__)


class Register:
    """
    A register of n qubits held as a dense real state vector of length 2^n.

    Qubits are addressed 1..n; qubit 1 is the most significant bit of a
    basis index. Every gate builds its full operator, left-multiplies it into
    the state and replaces the state. ``measure`` collapses the whole register
    to one basis state in a single draw from ``rng``.

    The operator size grows as 4^n, so registers beyond a dozen or so qubits
    are impractical.
    """

    def __init__(self, n: int = 5, rng=None, seed=None):
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
            raise ValueError(f"Register size must be a positive integer, got {n!r}")
        self.n = int(n)
        # anything with random() -> float in [0, 1)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.reset()

    def reset(self):
        """Put the register back in |0...0⟩."""
        self.state = np.zeros(2 ** self.n, dtype=float)
        self.state[0] = 1.0

    def _apply(self, op, label):
        self.state = op @ self.state
        logger.debug("%s on %d-qubit register", label, self.n)

    # ----------------------------------------------------------------
    # Gates
    # ----------------------------------------------------------------

    def apply_not(self, i):
        """Pauli X on qubit i."""
        self._apply(build_single(X, i, self.n), f"NOT {i}")

    def apply_z(self, i):
        """Pauli Z on qubit i."""
        self._apply(build_single(Z, i, self.n), f"Z {i}")

    def apply_hadamard(self, i):
        """Hadamard on qubit i; amplitudes within ERR_THRESH of 1 snap to 1."""
        self._apply(build_single(H, i, self.n), f"HADAMARD {i}")
        self.state[np.abs(1.0 - self.state) < ERR_THRESH] = 1.0

    def apply_cnot(self, i, j):
        """X on qubit j conditioned on qubit i."""
        self._apply(build_controlled(i, j, X, self.n), f"CNOT {i}→{j}")

    def apply_swap(self, i, j):
        """Swap qubits i and j as three CNOTs."""
        validate_qubits(self.n, i, j)
        self.apply_cnot(i, j)
        self.apply_cnot(j, i)
        self.apply_cnot(i, j)

    def apply_ccnot(self, i, j, k):
        """Toffoli: X on k when both i and j are 1."""
        self._apply(build_ccnot(i, j, k, self.n), f"CCNOT {i},{j}→{k}")

    def apply_cswap(self, i, j, k):
        """Fredkin: swap j and k when i is 1."""
        self._apply(build_cswap(i, j, k, self.n), f"CSWAP {i}:{j}↔{k}")

    # ----------------------------------------------------------------
    # Measurement
    # ----------------------------------------------------------------

    def measure(self, r=None):
        """
        Collapse the whole register to one basis state.

        Basis indices are walked in ascending order, each owning the bucket
        [start, start + amplitude² + ERR_THRESH); the index whose bucket holds
        ``r`` (drawn from ``rng`` unless given) becomes the new one-hot state.
        Returns the outcome as an n-bit string, qubit 1 first.

        A draw of exactly 1.0 is accepted, the error margin on each bucket
        keeps it inside the register; anything outside [0, 1] raises ValueError.
        """
        if r is None:
            r = self.rng.random()
        r = float(r)
        if not (0.0 <= r <= 1.0):
            raise ValueError(f"Measurement draw must lie in [0, 1], got {r}")

        bucket_start = 0.0
        for idx, p in enumerate(self.probabilities()):
            bucket_end = bucket_start + p + ERR_THRESH
            if bucket_start <= r < bucket_end:
                break
            bucket_start = bucket_end
        else:
            raise AssertionError(
                f"Draw {r} fell outside every bucket: ||psi||^2={self.norm2()}")

        collapsed = np.zeros_like(self.state)
        collapsed[idx] = 1.0
        self.state = collapsed
        bits = format(idx, f"0{self.n}b")
        logger.debug("MEASURE r=%.6f → |%s⟩", r, bits)
        return bits

    # ----------------------------------------------------------------
    # State helpers
    # ----------------------------------------------------------------

    def full_state_vector(self):
        return self.state.copy()

    def probabilities(self):
        return self.state ** 2

    def norm2(self) -> float:
        return float(np.dot(self.state, self.state))

    def check_normalized(self, tol=1e-12):
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise AssertionError(f"Normalization failed: ||psi||^2={n2}")
