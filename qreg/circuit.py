"""
circuit.py

Reads circuit files and turns their lines into instructions for a Register.

A circuit file holds one instruction per line, tokens separated by
whitespace:

    hadamard 1
    cnot 1 2
    measure

Opcodes are case-insensitive; operands are 1-based qubit indices. Blank lines
and anything after a ``#`` are ignored.
"""

from dataclasses import dataclass
from typing import Tuple

from qreg.errors import InvalidOpcode, InvalidQubitIndex, MalformedInstruction
from qreg.logging_config import get_logger
from qreg.operators import validate_qubits

logger = get_logger(__name__)

# opcode → number of qubit operands
OPCODES = {
    "not": 1,
    "z": 1,
    "hadamard": 1,
    "cnot": 2,
    "swap": 2,
    "ccnot": 3,
    "cswap": 3,
    "measure": 0,
}


@dataclass(frozen=True)
class Instruction:
    opcode: str
    qubits: Tuple[int, ...] = ()

    def __str__(self):
        return " ".join([self.opcode.upper(), *map(str, self.qubits)])


# ------------------------------------------------------------------------
# Reading
# ------------------------------------------------------------------------
def read_circuit(filename):
    """
    Read a circuit file into a list of token lists, one per instruction line.
    """
    circuit = []
    with open(filename, "r", encoding="utf-8-sig") as f:
        try:
            for raw in f:
                line = raw.split("#", 1)[0].strip()
                if line:
                    circuit.append(line.split())
        except UnicodeDecodeError as e:
            raise MalformedInstruction(f"{filename} is not a UTF-8 text file: {e}") from e
    return circuit


def parse_qubit(token, n: int) -> int:
    try:
        q = int(token)
    except (TypeError, ValueError):
        raise MalformedInstruction(f"Qubit operand must be an integer, got {token!r}") from None
    if not (1 <= q <= n):
        raise InvalidQubitIndex(f"Qubit index {q} out of range 1..{n}")
    return q


def parse_instruction(tokens, n: int) -> Instruction:
    """
    Validate one token list against a register of ``n`` qubits.
    """
    if not tokens:
        raise MalformedInstruction("Empty instruction")
    opcode = str(tokens[0]).lower()
    if opcode not in OPCODES:
        raise InvalidOpcode(f"Unknown opcode: {tokens[0]}")

    operands = tokens[1:]
    expected = OPCODES[opcode]
    if len(operands) != expected:
        raise MalformedInstruction(
            f"{opcode.upper()} expects {expected} operand(s), got {len(operands)}")

    qubits = tuple(parse_qubit(t, n) for t in operands)
    validate_qubits(n, *qubits)
    return Instruction(opcode, qubits)


def parse_circuit(lines, n: int):
    """
    Parse every token list; errors carry the 1-based line they came from.
    """
    instructions = []
    for lineno, tokens in enumerate(lines, start=1):
        try:
            instructions.append(parse_instruction(tokens, n))
        except (InvalidOpcode, InvalidQubitIndex, MalformedInstruction) as e:
            raise type(e)(f"line {lineno}: {e}") from e
    return instructions


# ------------------------------------------------------------------------
# Dispatch
# ------------------------------------------------------------------------
gate_handlers = {
    "not": lambda reg, i: reg.apply_not(i),
    "z": lambda reg, i: reg.apply_z(i),
    "hadamard": lambda reg, i: reg.apply_hadamard(i),
    "cnot": lambda reg, i, j: reg.apply_cnot(i, j),
    "swap": lambda reg, i, j: reg.apply_swap(i, j),
    "ccnot": lambda reg, i, j, k: reg.apply_ccnot(i, j, k),
    "cswap": lambda reg, i, j, k: reg.apply_cswap(i, j, k),
    "measure": lambda reg: reg.measure(),
}


def apply_instruction(register, instruction: Instruction):
    """
    Apply one instruction. Returns (message, result) where result is the
    measured bit string for MEASURE and None otherwise.
    """
    handler = gate_handlers.get(instruction.opcode)
    if handler is None:
        raise InvalidOpcode(f"Unknown opcode: {instruction.opcode}")
    result = handler(register, *instruction.qubits)
    if instruction.opcode == "measure":
        return f"MEASURE → |{result}>", result
    return str(instruction), None


def run_circuit(register, instructions):
    """Apply every instruction in order; returns the measurement outcomes."""
    outcomes = []
    for instruction in instructions:
        msg, result = apply_instruction(register, instruction)
        logger.debug(msg)
        if result is not None:
            outcomes.append(result)
    return outcomes
