"""
readout.py

Formats a register's state vector as a sum of kets, e.g.
``1/2|00> + 1/2|01> - 1/2|10> + 1/2|11>``.
"""

import numpy as np

from qreg.operators import ERR_THRESH, ONE_OVER_SQRT_2

# Amplitudes rendered symbolically, checked in this order
KNOWN_AMPLITUDES = (
    (ONE_OVER_SQRT_2, "1/√2"),
    (1.0 / (np.sqrt(2) * 2), "1/2√2"),
    (1.0 / (np.sqrt(2) * 4), "1/4√2"),
    (0.5, "1/2"),
    (0.25, "1/4"),
)


def as_binary(i: int, n: int) -> str:
    """Basis index ``i`` as a zero-padded n-bit string."""
    return format(int(i), f"0{n}b")


def format_amplitude(a, tol=ERR_THRESH) -> str:
    """
    Render a non-negative amplitude: symbolic when it matches a known
    constant, empty when exactly 1, the plain number otherwise.
    """
    for value, text in KNOWN_AMPLITUDES:
        if value - tol < a < value + tol:
            return text
    if a == 1:
        return ""
    return repr(float(a))


def format_register(state: np.ndarray, n: int = None, tol=ERR_THRESH) -> str:
    """
    Ket expression for every basis state whose amplitude is not zero
    (within ``tol``). Negative coefficients join with " - ".
    """
    state = np.asarray(state).ravel()
    if n is None:
        n = int(np.log2(state.shape[0]))

    out = []
    for idx, amp in enumerate(state):
        if abs(amp) < tol:
            continue
        term = f"{format_amplitude(abs(amp), tol)}|{as_binary(idx, n)}>"
        if not out:
            out.append(f"-{term}" if amp < 0 else term)
        else:
            out.append(f" - {term}" if amp < 0 else f" + {term}")
    return "".join(out)
