"""
errors.py

Exception types raised while building operators and reading circuits.
"""


class CircuitError(Exception):
    """Base class for every error raised by the simulator."""


class InvalidQubitIndex(CircuitError, IndexError):
    """
    A qubit index is outside [1, n], or a gate was given the same qubit
    twice where it needs distinct qubits.
    """


class InvalidOpcode(CircuitError, ValueError):
    """An instruction names a gate the register does not implement."""


class MalformedInstruction(CircuitError, ValueError):
    """An instruction has the wrong number of operands, or a non-integer one."""
