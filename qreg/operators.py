# operators.py

"""
Builds the 2^n × 2^n operators for the register's gate set.

Every operator is a Kronecker product of per-qubit 2×2 factors composed in
qubit order 1..n (qubit 1 is the most significant bit of a basis index), or
a sum/product of such products. Nothing here holds state; operators are
built for one multiplication and thrown away.
"""

import numpy as np

from qreg.errors import InvalidQubitIndex

# Standard 2×2 operators (all real)
I = np.array([[1, 0], [0, 1]], dtype=float)
X = np.array([[0, 1], [1, 0]], dtype=float)
Z = np.array([[1, 0], [0, -1]], dtype=float)

ONE_OVER_SQRT_2 = 1.0 / np.sqrt(2)
ERR_THRESH = 1e-14

H = np.array([[ONE_OVER_SQRT_2, ONE_OVER_SQRT_2],
              [ONE_OVER_SQRT_2, -ONE_OVER_SQRT_2]], dtype=float)

# |0⟩, |1⟩ and their projectors
KET0 = np.array([[1], [0]], dtype=float)
KET1 = np.array([[0], [1]], dtype=float)
P0 = np.kron(KET0, KET0.T)
P1 = np.kron(KET1, KET1.T)


def validate_qubits(n, *idxs, distinct=True):
    """
    Each idx must be an int in [1, n]; with ``distinct`` no two may be equal.
    """
    for i in idxs:
        if isinstance(i, bool) or not isinstance(i, (int, np.integer)):
            raise InvalidQubitIndex(f"Invalid qubit index: {i!r}")
        if not (1 <= i <= n):
            raise InvalidQubitIndex(f"Qubit index {i} out of range 1..{n}")
    if distinct and len(set(idxs)) != len(idxs):
        raise InvalidQubitIndex(f"Qubits {idxs} must be distinct")


def tensor_operator(factors, n):
    """
    Kronecker product of ``factors[q]`` (or I) over positions q = 1..n.

    For n = 1 the single factor is returned as is, with no identity folded in.
    """
    op = factors.get(1, I)
    for q in range(2, n + 1):
        op = np.kron(op, factors.get(q, I))
    return op


def build_single(op, target, n):
    """I ⊗ … ⊗ op(target) ⊗ … ⊗ I."""
    validate_qubits(n, target)
    return tensor_operator({target: op}, n)


def build_controlled(control, target, op, n):
    """
    Apply ``op`` to ``target`` when ``control`` is 1, identity otherwise.

    Sum of two terms:
      |0⟩⟨0| on the control, identity everywhere else
      |1⟩⟨1| on the control tensored with ``op`` on the target
    """
    validate_qubits(n, control, target)
    return build_single(P0, control, n) + tensor_operator({control: P1, target: op}, n)


def _restricted_controlled(outer, control, target, op, n):
    # controlled-op on (control, target), restricted to the outer = 1 subspace
    return (tensor_operator({outer: P1, control: P0}, n)
            + tensor_operator({outer: P1, control: P1, target: op}, n))


def build_ccnot(i, j, k, n, op=X):
    """
    Doubly-controlled ``op`` (Toffoli for op = X), controls i and j, target k.

    Three terms: i off; i on and j off; both on with ``op`` on k.
    """
    validate_qubits(n, i, j, k)
    return build_single(P0, i, n) + _restricted_controlled(i, j, k, op, n)


def build_cswap(i, j, k, n):
    """
    Controlled swap (Fredkin) of j and k, conditioned on i.

    The on term is swap-as-three-CNOTs, each CNOT confined to i = 1.
    """
    validate_qubits(n, i, j, k)
    outer = _restricted_controlled(i, j, k, X, n)
    inner = _restricted_controlled(i, k, j, X, n)
    return build_single(P0, i, n) + outer @ inner @ outer
