import io
import logging
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

import numpy as np

from qreg.circuit import (
    Instruction,
    apply_instruction,
    parse_circuit,
    parse_instruction,
    read_circuit,
    run_circuit,
)
from qreg.config import DEFAULT_CONFIG, SimulatorConfig
from qreg.errors import CircuitError, InvalidOpcode, InvalidQubitIndex, MalformedInstruction
from qreg.logging_config import get_logger, setup_logging
from qreg.operators import (
    ONE_OVER_SQRT_2, I, X, Z, H, P0, P1,
    build_ccnot, build_controlled, build_cswap, build_single, tensor_operator,
)
from qreg.readout import as_binary, format_amplitude, format_register
from qreg.register import Register
from cli import CircuitSimulator, interactive_cli
from main import build_parser, config_from_args, main


class FixedDraw:
    """Stands in for the measurement rng with a pinned value."""
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def one_hot(index, size):
    vec = np.zeros(size)
    vec[index] = 1.0
    return vec


def write_circuit(text):
    fd, path = tempfile.mkstemp(suffix=".circuit")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)
    return path


def write_circuit_bytes(data):
    fd, path = tempfile.mkstemp(suffix=".circuit")
    with os.fdopen(fd, "wb") as f:
        f.write(data)
    return path


# -------------------------------------------------------------------
# Operator construction
# -------------------------------------------------------------------
class TestOperators(unittest.TestCase):
    def test_single_returns_op_when_n_is_1(self):
        self.assertIs(build_single(H, 1, 1), H)

    def test_single_op_on_first_of_two(self):
        np.testing.assert_array_equal(build_single(X, 1, 2), [
            [0, 0, 1, 0],
            [0, 0, 0, 1],
            [1, 0, 0, 0],
            [0, 1, 0, 0],
        ])

    def test_single_op_on_second_of_two(self):
        np.testing.assert_array_equal(build_single(X, 2, 2), [
            [0, 1, 0, 0],
            [1, 0, 0, 0],
            [0, 0, 0, 1],
            [0, 0, 1, 0],
        ])

    def test_tensor_operator_defaults_to_identity(self):
        np.testing.assert_array_equal(tensor_operator({}, 3), np.eye(8))
        np.testing.assert_array_equal(tensor_operator({2: Z}, 2), np.kron(I, Z))

    def test_controlled_is_sum_of_projector_terms(self):
        expected = np.kron(P0, I) + np.kron(P1, X)
        np.testing.assert_array_equal(build_controlled(1, 2, X, 2), expected)

    def test_controlled_with_control_below_target(self):
        np.testing.assert_array_equal(build_controlled(2, 1, X, 2), [
            [1, 0, 0, 0],
            [0, 0, 0, 1],
            [0, 0, 1, 0],
            [0, 1, 0, 0],
        ])

    def test_toffoli_matrix(self):
        np.testing.assert_array_equal(build_ccnot(1, 2, 3, 3), [
            [1, 0, 0, 0, 0, 0, 0, 0],
            [0, 1, 0, 0, 0, 0, 0, 0],
            [0, 0, 1, 0, 0, 0, 0, 0],
            [0, 0, 0, 1, 0, 0, 0, 0],
            [0, 0, 0, 0, 1, 0, 0, 0],
            [0, 0, 0, 0, 0, 1, 0, 0],
            [0, 0, 0, 0, 0, 0, 0, 1],
            [0, 0, 0, 0, 0, 0, 1, 0],
        ])

    def test_fredkin_matrix(self):
        np.testing.assert_array_equal(build_cswap(1, 2, 3, 3), [
            [1, 0, 0, 0, 0, 0, 0, 0],
            [0, 1, 0, 0, 0, 0, 0, 0],
            [0, 0, 1, 0, 0, 0, 0, 0],
            [0, 0, 0, 1, 0, 0, 0, 0],
            [0, 0, 0, 0, 1, 0, 0, 0],
            [0, 0, 0, 0, 0, 0, 1, 0],
            [0, 0, 0, 0, 0, 1, 0, 0],
            [0, 0, 0, 0, 0, 0, 0, 1],
        ])

    def test_every_operator_is_orthogonal(self):
        n = 4
        ops = [build_single(g, q, n) for g in (X, Z, H) for q in range(1, n + 1)]
        ops += [build_controlled(i, j, X, n)
                for i in range(1, n + 1) for j in range(1, n + 1) if i != j]
        ops += [build_ccnot(3, 1, 4, n), build_ccnot(4, 2, 1, n),
                build_cswap(2, 4, 1, n), build_cswap(4, 1, 3, n)]
        for op in ops:
            self.assertEqual(op.shape, (16, 16))
            np.testing.assert_allclose(op.T @ op, np.eye(16), atol=1e-14)

    def test_out_of_range_index_raises(self):
        with self.assertRaises(InvalidQubitIndex):
            build_single(X, 0, 3)
        with self.assertRaises(InvalidQubitIndex):
            build_single(X, 4, 3)
        with self.assertRaises(InvalidQubitIndex):
            build_controlled(1, 5, X, 3)

    def test_non_integer_index_raises(self):
        with self.assertRaises(InvalidQubitIndex):
            build_single(X, "1", 3)
        with self.assertRaises(InvalidQubitIndex):
            build_single(X, True, 3)

    def test_aliased_qubits_raise(self):
        with self.assertRaises(InvalidQubitIndex):
            build_controlled(2, 2, X, 3)
        with self.assertRaises(InvalidQubitIndex):
            build_ccnot(1, 2, 1, 3)
        with self.assertRaises(InvalidQubitIndex):
            build_cswap(1, 3, 3, 3)


# -------------------------------------------------------------------
# Register gates
# -------------------------------------------------------------------
class TestRegisterInit(unittest.TestCase):
    def test_single_qubit_starts_at_zero(self):
        np.testing.assert_array_equal(Register(1).state, [1, 0])

    def test_default_register_is_five_qubits(self):
        reg = Register()
        self.assertEqual(reg.n, 5)
        np.testing.assert_array_equal(reg.state, one_hot(0, 32))

    def test_bad_size_raises(self):
        for n in (0, -2, 2.5, True):
            with self.assertRaises(ValueError):
                Register(n)

    def test_reset(self):
        reg = Register(2)
        reg.apply_hadamard(1)
        reg.reset()
        np.testing.assert_array_equal(reg.state, one_hot(0, 4))


class TestSingleQubitGates(unittest.TestCase):
    def test_not_single(self):
        reg = Register(1)
        reg.apply_not(1)
        np.testing.assert_array_equal(reg.state, [0, 1])

    def test_not_second_of_two(self):
        reg = Register(2)
        reg.apply_not(2)
        np.testing.assert_array_equal(reg.state, one_hot(1, 4))

    def test_not_first_of_two(self):
        reg = Register(2)
        reg.apply_not(1)
        np.testing.assert_array_equal(reg.state, one_hot(2, 4))

    def test_z_ignores_zero(self):
        reg = Register(1)
        reg.apply_z(1)
        np.testing.assert_array_equal(reg.state, [1, 0])

    def test_z_flips_phase_of_one(self):
        reg = Register(2)
        reg.apply_not(1)
        reg.apply_not(2)
        reg.apply_z(2)
        np.testing.assert_array_equal(reg.state, [0, 0, 0, -1])

    def test_hadamard_single(self):
        reg = Register(1)
        reg.apply_hadamard(1)
        np.testing.assert_array_equal(reg.state, [ONE_OVER_SQRT_2, ONE_OVER_SQRT_2])

    def test_hadamard_middle_of_five(self):
        reg = Register()
        reg.apply_hadamard(3)
        expected = np.zeros(32)
        expected[[0, 4]] = ONE_OVER_SQRT_2
        np.testing.assert_array_equal(reg.state, expected)

    def test_hadamard_twice_snaps_back_to_exact_one(self):
        reg = Register(1)
        reg.apply_hadamard(1)
        reg.apply_hadamard(1)
        self.assertEqual(reg.state[0], 1.0)
        np.testing.assert_allclose(reg.state, [1, 0], atol=1e-15)

    def test_lecture_notes_circuit(self):
        reg = Register(2)
        reg.apply_hadamard(1)
        reg.apply_cnot(1, 2)
        reg.apply_not(2)
        reg.apply_hadamard(1)
        np.testing.assert_allclose(reg.state, [0.5, 0.5, -0.5, 0.5], atol=1e-15)


class TestControlledGates(unittest.TestCase):
    def test_cnot_control_off(self):
        reg = Register(2)
        reg.apply_cnot(1, 2)
        np.testing.assert_array_equal(reg.state, one_hot(0, 4))

    def test_cnot_flips_target(self):
        reg = Register(2)
        reg.apply_not(1)
        reg.apply_cnot(1, 2)
        np.testing.assert_array_equal(reg.state, one_hot(3, 4))

    def test_cnot_flips_target_back(self):
        reg = Register(2)
        reg.apply_not(1)
        reg.apply_not(2)
        reg.apply_cnot(1, 2)
        np.testing.assert_array_equal(reg.state, one_hot(2, 4))

    def test_cnot_skipping_a_qubit(self):
        reg = Register(3)
        reg.apply_not(1)
        reg.apply_cnot(1, 3)
        np.testing.assert_array_equal(reg.state, one_hot(5, 8))

    def test_cnot_control_after_target(self):
        reg = Register(3)
        for q in (1, 2, 3):
            reg.apply_not(q)
        reg.apply_cnot(3, 1)
        np.testing.assert_array_equal(reg.state, one_hot(3, 8))

    def test_epr_pair(self):
        reg = Register(2)
        reg.apply_hadamard(1)
        reg.apply_cnot(1, 2)
        np.testing.assert_allclose(reg.state, [ONE_OVER_SQRT_2, 0, 0, ONE_OVER_SQRT_2])

    def test_swap(self):
        reg = Register(2)
        reg.apply_not(2)
        reg.apply_swap(1, 2)
        np.testing.assert_array_equal(reg.state, one_hot(2, 4))

        reg = Register(3)
        reg.apply_not(1)
        reg.apply_not(3)
        reg.apply_swap(1, 2)
        np.testing.assert_array_equal(reg.state, one_hot(3, 8))

    def test_swap_reversed_indices(self):
        reg = Register(4)
        reg.apply_not(4)
        reg.apply_swap(2, 4)
        np.testing.assert_array_equal(reg.state, one_hot(4, 16))

    def test_swap_same_qubit_raises(self):
        with self.assertRaises(InvalidQubitIndex):
            Register(3).apply_swap(2, 2)

    def test_ccnot(self):
        reg = Register(3)
        reg.apply_ccnot(1, 2, 3)
        np.testing.assert_array_equal(reg.state, one_hot(0, 8))

        reg.apply_not(1)
        reg.apply_ccnot(1, 2, 3)
        np.testing.assert_array_equal(reg.state, one_hot(4, 8))

        reg.apply_not(2)
        reg.apply_ccnot(1, 2, 3)
        np.testing.assert_array_equal(reg.state, one_hot(7, 8))

    def test_ccnot_on_five_qubits(self):
        reg = Register()
        reg.apply_not(2)
        reg.apply_not(4)
        reg.apply_ccnot(4, 2, 5)
        np.testing.assert_array_equal(reg.state, one_hot(11, 32))

    def test_cswap(self):
        reg = Register(3)
        reg.apply_cswap(1, 2, 3)
        np.testing.assert_array_equal(reg.state, one_hot(0, 8))

        reg = Register(3)
        reg.apply_not(1)
        reg.apply_not(3)
        reg.apply_cswap(1, 2, 3)
        np.testing.assert_array_equal(reg.state, one_hot(6, 8))

        reg = Register(3)
        reg.apply_not(1)
        reg.apply_not(2)
        reg.apply_cswap(1, 2, 3)
        np.testing.assert_array_equal(reg.state, one_hot(5, 8))

    def test_cswap_on_five_qubits(self):
        reg = Register()
        for q in (2, 3, 4):
            reg.apply_not(q)
        reg.apply_cswap(4, 1, 3)
        np.testing.assert_array_equal(reg.state, one_hot(26, 32))

    def test_gate_out_of_range_raises(self):
        reg = Register(2)
        with self.assertRaises(InvalidQubitIndex):
            reg.apply_not(3)
        with self.assertRaises(InvalidQubitIndex):
            reg.apply_ccnot(1, 2, 3)
        np.testing.assert_array_equal(reg.state, one_hot(0, 4))


class TestGateProperties(unittest.TestCase):
    # (gate, number of qubits it acts on)
    GATES = [
        (Register.apply_hadamard, 1),
        (Register.apply_not, 1),
        (Register.apply_z, 1),
        (Register.apply_cnot, 2),
        (Register.apply_swap, 2),
        (Register.apply_ccnot, 3),
        (Register.apply_cswap, 3),
    ]

    def random_state(self, n, rng, depth=12):
        reg = Register(n)
        gates = [(g, arity) for g, arity in self.GATES if arity <= n]
        for _ in range(depth):
            gate, arity = gates[int(rng.integers(0, len(gates)))]
            qs = [int(q) for q in rng.permutation(np.arange(1, n + 1))[:arity]]
            gate(reg, *qs)
        return reg

    def test_norm_is_preserved(self):
        rng = np.random.default_rng(123)
        for n in (1, 2, 3, 4, 5):
            for _ in range(5):
                reg = self.random_state(n, rng)
                reg.check_normalized()

    def test_norm_is_preserved_through_swaps(self):
        rng = np.random.default_rng(29)
        reg = self.random_state(3, rng)
        for i, j in ((1, 2), (3, 1), (2, 3)):
            reg.apply_swap(i, j)
            reg.check_normalized()

    def test_hadamard_is_self_inverse(self):
        rng = np.random.default_rng(7)
        reg = self.random_state(4, rng)
        before = reg.full_state_vector()
        for q in range(1, 5):
            reg.apply_hadamard(q)
            reg.apply_hadamard(q)
            np.testing.assert_allclose(reg.state, before, atol=1e-12)

    def test_swap_and_not_are_exact_involutions(self):
        rng = np.random.default_rng(11)
        reg = self.random_state(4, rng)
        before = reg.full_state_vector()
        reg.apply_swap(1, 3)
        reg.apply_swap(1, 3)
        np.testing.assert_array_equal(reg.state, before)
        reg.apply_not(2)
        reg.apply_not(2)
        np.testing.assert_array_equal(reg.state, before)

    def test_check_normalized_flags_drift(self):
        reg = Register(1)
        reg.state = np.array([1.0, 0.1])
        with self.assertRaises(AssertionError):
            reg.check_normalized()


# -------------------------------------------------------------------
# Measurement
# -------------------------------------------------------------------
class TestMeasure(unittest.TestCase):
    def lecture_state(self, rng=None):
        reg = Register(2, rng=rng)
        reg.apply_hadamard(1)
        reg.apply_cnot(1, 2)
        reg.apply_not(2)
        reg.apply_hadamard(1)
        return reg

    def test_collapses_to_first_bucket(self):
        reg = Register(1, rng=FixedDraw(0))
        reg.apply_hadamard(1)
        self.assertEqual(reg.measure(), "0")
        np.testing.assert_array_equal(reg.state, [1, 0])

    def test_collapses_to_last_bucket_at_one(self):
        reg = Register(1, rng=FixedDraw(1))
        reg.apply_hadamard(1)
        self.assertEqual(reg.measure(), "1")
        np.testing.assert_array_equal(reg.state, [0, 1])

    def test_different_draws_select_different_outcomes(self):
        reg = self.lecture_state(FixedDraw(0.2))
        self.assertEqual(reg.measure(), "00")
        np.testing.assert_array_equal(reg.state, one_hot(0, 4))

        reg = self.lecture_state(FixedDraw(0.6))
        self.assertEqual(reg.measure(), "10")
        np.testing.assert_array_equal(reg.state, one_hot(2, 4))

    def test_explicit_draw_overrides_rng(self):
        reg = self.lecture_state(FixedDraw(0.0))
        self.assertEqual(reg.measure(r=0.9), "11")

    def test_seeded_rng_is_reproducible(self):
        outcomes = set()
        for _ in range(3):
            reg = Register(3, seed=42)
            for q in (1, 2, 3):
                reg.apply_hadamard(q)
            outcomes.add(reg.measure())
        self.assertEqual(len(outcomes), 1)

    def test_measurement_keeps_unit_norm(self):
        reg = self.lecture_state(np.random.default_rng(5))
        reg.measure()
        self.assertEqual(reg.norm2(), 1.0)
        self.assertEqual(np.count_nonzero(reg.state), 1)

    def test_broken_state_raises(self):
        reg = Register(1)
        reg.state = np.zeros(2)
        with self.assertRaises(AssertionError):
            reg.measure(0.5)

    def test_draw_outside_unit_interval_raises(self):
        reg = Register(1)
        reg.apply_hadamard(1)
        before = reg.full_state_vector()
        for r in (-0.1, 1.5, float("nan")):
            with self.assertRaises(ValueError):
                reg.measure(r)
        np.testing.assert_array_equal(reg.state, before)

    def test_probabilities(self):
        reg = self.lecture_state()
        np.testing.assert_allclose(reg.probabilities(), [0.25] * 4, atol=1e-15)
        reg.measure(0.6)
        np.testing.assert_array_equal(reg.probabilities(), one_hot(2, 4))


# -------------------------------------------------------------------
# Circuit reading and dispatch
# -------------------------------------------------------------------
class TestCircuitParsing(unittest.TestCase):
    def test_read_circuit_tokens(self):
        path = write_circuit("some pile\nof\n\n# comment\ntokens to parse  # trailing\n")
        try:
            self.assertEqual(read_circuit(path),
                             [["some", "pile"], ["of"], ["tokens", "to", "parse"]])
        finally:
            os.remove(path)

    def test_read_circuit_rejects_non_utf8(self):
        path = write_circuit_bytes(b"not 1\n\xff\xfe\n")
        try:
            with self.assertRaises(MalformedInstruction) as ctx:
                read_circuit(path)
        finally:
            os.remove(path)
        self.assertIn(path, str(ctx.exception))

    def test_opcode_is_case_insensitive(self):
        self.assertEqual(parse_instruction(["cNot", "1", "2"], 3), Instruction("cnot", (1, 2)))
        self.assertEqual(parse_instruction(["MEASURE"], 3), Instruction("measure"))

    def test_unknown_opcode(self):
        with self.assertRaises(InvalidOpcode):
            parse_instruction(["toffoli", "1", "2", "3"], 3)

    def test_wrong_operand_count(self):
        with self.assertRaises(MalformedInstruction):
            parse_instruction(["cnot", "1"], 3)
        with self.assertRaises(MalformedInstruction):
            parse_instruction(["measure", "1"], 3)
        with self.assertRaises(MalformedInstruction):
            parse_instruction([], 3)

    def test_non_integer_operand(self):
        with self.assertRaises(MalformedInstruction):
            parse_instruction(["not", "one"], 3)

    def test_out_of_range_and_aliased_operands(self):
        with self.assertRaises(InvalidQubitIndex):
            parse_instruction(["not", "0"], 3)
        with self.assertRaises(InvalidQubitIndex):
            parse_instruction(["hadamard", "4"], 3)
        with self.assertRaises(InvalidQubitIndex):
            parse_instruction(["cswap", "1", "2", "2"], 3)

    def test_errors_carry_line_number(self):
        with self.assertRaises(InvalidOpcode) as ctx:
            parse_circuit([["not", "1"], ["bogus"]], 2)
        self.assertIn("line 2", str(ctx.exception))

    def test_error_hierarchy(self):
        self.assertTrue(issubclass(InvalidQubitIndex, IndexError))
        self.assertTrue(issubclass(InvalidOpcode, ValueError))
        self.assertTrue(issubclass(MalformedInstruction, ValueError))
        for cls in (InvalidQubitIndex, InvalidOpcode, MalformedInstruction):
            self.assertTrue(issubclass(cls, CircuitError))

    def test_apply_and_run(self):
        reg = Register(2, rng=FixedDraw(0.5))
        msg, result = apply_instruction(reg, Instruction("not", (1,)))
        self.assertEqual(msg, "NOT 1")
        self.assertIsNone(result)
        outcomes = run_circuit(reg, parse_circuit([["cnot", "1", "2"], ["measure"]], 2))
        self.assertEqual(outcomes, ["11"])


# -------------------------------------------------------------------
# Readout
# -------------------------------------------------------------------
class TestReadout(unittest.TestCase):
    def test_as_binary(self):
        self.assertEqual(as_binary(5, 4), "0101")
        self.assertEqual(as_binary(0, 1), "0")

    def test_format_amplitude(self):
        self.assertEqual(format_amplitude(ONE_OVER_SQRT_2), "1/√2")
        self.assertEqual(format_amplitude(1 / (2 * np.sqrt(2))), "1/2√2")
        self.assertEqual(format_amplitude(1 / (4 * np.sqrt(2))), "1/4√2")
        self.assertEqual(format_amplitude(0.4999999999999999), "1/2")
        self.assertEqual(format_amplitude(0.25), "1/4")
        self.assertEqual(format_amplitude(1.0), "")
        self.assertEqual(format_amplitude(0.3), "0.3")

    def test_zero_state(self):
        self.assertEqual(format_register(Register(1).state), "|0>")
        self.assertEqual(format_register(Register(2).state), "|00>")

    def test_hadamard_state(self):
        reg = Register(1)
        reg.apply_hadamard(1)
        self.assertEqual(format_register(reg.state, 1), "1/√2|0> + 1/√2|1>")

    def test_every_negative_term_uses_minus(self):
        reg = Register(2)
        reg.apply_hadamard(1)
        reg.apply_hadamard(2)
        reg.apply_z(1)
        self.assertEqual(format_register(reg.state, 2),
                         "1/2|00> + 1/2|01> - 1/2|10> - 1/2|11>")

    def test_leading_negative_term(self):
        reg = Register(1)
        reg.apply_not(1)
        reg.apply_z(1)
        self.assertEqual(format_register(reg.state, 1), "-|1>")

    def test_empty_vector(self):
        self.assertEqual(format_register(np.zeros(4), 2), "")


# -------------------------------------------------------------------
# App wrapper, configuration and entry point
# -------------------------------------------------------------------
class TestCircuitSimulator(unittest.TestCase):
    def simulate(self, lines, n=5, rng=None):
        sim = CircuitSimulator(SimulatorConfig(num_qubits=n), rng=rng)
        sim.circuit = lines
        sim.simulate()
        return sim

    def test_reads_from_provided_file(self):
        path = write_circuit("NOT 1\ncnot 1 2\n")
        try:
            sim = CircuitSimulator()
            sim.read_circuit(path)
            self.assertEqual(sim.circuit, [["NOT", "1"], ["cnot", "1", "2"]])
        finally:
            os.remove(path)

    def test_simulates_each_gate(self):
        cases = [
            ([["NOT", "1"]], 16, 1),
            ([["NOT", "1"], ["Z", "1"]], 16, -1),
            ([["not", "1"], ["cNot", "1", "2"]], 24, 1),
            ([["not", "1"], ["swap", "1", "2"]], 8, 1),
            ([["not", "1"], ["not", "2"], ["ccnot", "1", "2", "3"]], 28, 1),
            ([["not", "1"], ["not", "2"], ["cswap", "1", "2", "3"]], 20, 1),
        ]
        for lines, idx, amp in cases:
            with self.subTest(lines=lines):
                sim = self.simulate(lines)
                np.testing.assert_array_equal(sim.register.state, amp * one_hot(idx, 32))

    def test_simulates_hadamard(self):
        sim = self.simulate([["hadamard", "5"]])
        expected = np.zeros(32)
        expected[[0, 1]] = ONE_OVER_SQRT_2
        np.testing.assert_array_equal(sim.register.state, expected)

    def test_read_out(self):
        self.assertEqual(self.simulate([], n=1).print_register(), "|0>")
        self.assertEqual(self.simulate([["not", "1"]], n=1).print_register(), "|1>")
        self.assertEqual(self.simulate([["not", "1"]], n=2).print_register(), "|10>")
        self.assertEqual(self.simulate([["hadamard", "1"]], n=1).print_register(),
                         "1/√2|0> + 1/√2|1>")

    def test_lecture_notes_read_out(self):
        lines = [["hadamard", "1"], ["cnot", "1", "2"], ["not", "2"], ["hadamard", "1"]]
        self.assertEqual(self.simulate(lines, n=2).print_register(),
                         "1/2|00> + 1/2|01> - 1/2|10> + 1/2|11>")

    def test_measurement_collapses(self):
        lines = [["hadamard", "1"], ["cnot", "1", "2"], ["not", "2"],
                 ["hadamard", "1"], ["measure"]]
        self.assertEqual(self.simulate(lines, 2, FixedDraw(0.2)).print_register(), "|00>")
        self.assertEqual(self.simulate(lines, 2, FixedDraw(0.6)).print_register(), "|10>")

    def test_bad_instruction_raises(self):
        with self.assertRaises(InvalidOpcode):
            self.simulate([["frobnicate", "1"]])

    def test_execute_one_line(self):
        sim = CircuitSimulator(SimulatorConfig(num_qubits=2))
        msg, _ = sim.execute("not 2")
        self.assertEqual(msg, "NOT 2")
        self.assertEqual(sim.print_register(), "|01>")

    def test_interactive_session(self):
        sim = CircuitSimulator(SimulatorConfig(num_qubits=2))
        commands = ["not 1", "cnot 1 2", "bogus 1", "SHOW", "EXIT"]
        out = io.StringIO()
        with mock.patch("builtins.input", side_effect=commands), redirect_stdout(out):
            interactive_cli(sim)
        self.assertEqual(sim.print_register(), "|11>")
        self.assertIn("Unknown opcode", out.getvalue())
        self.assertIn("|11>", out.getvalue())

    def test_interactive_load_of_undecodable_file_keeps_going(self):
        path = write_circuit_bytes(b"\xff")
        sim = CircuitSimulator(SimulatorConfig(num_qubits=2))
        commands = [f"LOAD {path}", "not 2", "EXIT"]
        out = io.StringIO()
        try:
            with mock.patch("builtins.input", side_effect=commands), redirect_stdout(out):
                interactive_cli(sim)
        finally:
            os.remove(path)
        self.assertIn("not a UTF-8 text file", out.getvalue())
        self.assertEqual(sim.print_register(), "|01>")

    def test_default_config_is_shared_default(self):
        sim = CircuitSimulator()
        self.assertIs(sim.config, DEFAULT_CONFIG)
        self.assertEqual(sim.n, 5)


class TestConfig(unittest.TestCase):
    def test_defaults(self):
        config = SimulatorConfig()
        self.assertEqual(config.num_qubits, 5)
        self.assertEqual(config.circuit.name, "examplecircuit")

    def test_rejects_bad_size(self):
        for n in (0, -1, "3", 1.5):
            with self.assertRaises(ValueError):
                SimulatorConfig(num_qubits=n)

    def test_seeded_rng(self):
        a = SimulatorConfig(seed=3).make_rng().random()
        b = SimulatorConfig(seed=3).make_rng().random()
        self.assertEqual(a, b)


class TestLogging(unittest.TestCase):
    def test_setup_logging(self):
        logger = setup_logging(logging.INFO)
        self.assertEqual(logger.name, "qreg")
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(get_logger("qreg.register").name, "qreg.register")
        self.assertEqual(get_logger("cli").name, "qreg.cli")

    def test_gates_log_at_debug(self):
        reg = Register(2)
        with self.assertLogs("qreg", level="DEBUG") as logs:
            reg.apply_cnot(1, 2)
        self.assertTrue(any("CNOT" in line for line in logs.output))


class TestMain(unittest.TestCase):
    def parse(self, *argv):
        return config_from_args(build_parser().parse_args(list(argv)))

    def test_positional_forms(self):
        config = self.parse()
        self.assertEqual((config.num_qubits, config.circuit.name), (5, "examplecircuit"))
        config = self.parse("bell")
        self.assertEqual((config.num_qubits, config.circuit.name), (5, "bell"))
        config = self.parse("3", "bell", "--seed", "9")
        self.assertEqual((config.num_qubits, config.circuit.name, config.seed), (3, "bell", 9))

    def test_bad_register_size(self):
        with self.assertRaises(ValueError):
            self.parse("two", "bell")

    def test_runs_file(self):
        path = write_circuit("hadamard 1\ncnot 1 2\nnot 2\nhadamard 1\n")
        out = io.StringIO()
        try:
            with redirect_stdout(out):
                status = main(["2", path])
        finally:
            os.remove(path)
        self.assertEqual(status, 0)
        self.assertEqual(out.getvalue().strip(), "1/2|00> + 1/2|01> - 1/2|10> + 1/2|11>")

    def test_reports_bad_circuit(self):
        path = write_circuit("not 7\n")
        err = io.StringIO()
        try:
            with mock.patch("sys.stderr", err):
                status = main(["2", path])
        finally:
            os.remove(path)
        self.assertEqual(status, 1)
        self.assertIn("line 1", err.getvalue())

    def test_reports_undecodable_file(self):
        path = write_circuit_bytes(b"\xff")
        err = io.StringIO()
        try:
            with mock.patch("sys.stderr", err):
                status = main(["2", path])
        finally:
            os.remove(path)
        self.assertEqual(status, 1)
        self.assertIn("not a UTF-8 text file", err.getvalue())


if __name__ == "__main__":
    unittest.main()
