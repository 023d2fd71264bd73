# cli.py

"""
Command-line front end for the qubit register simulator: runs a circuit file
in one go, or applies instructions one at a time at an interactive prompt.
"""

from qreg.circuit import (
    read_circuit,
    parse_circuit,
    parse_instruction,
    apply_instruction,
    run_circuit,
)
from qreg.config import DEFAULT_CONFIG, SimulatorConfig
from qreg.errors import CircuitError
from qreg.logging_config import get_logger
from qreg.readout import as_binary, format_register
from qreg.register import Register

logger = get_logger(__name__)

# ANSI colors
COLORS = {
    "reset": "\033[0m",
    "red":   "\033[31m",
    "green": "\033[32m",
    "yellow":"\033[33m",
    "blue":  "\033[34m",
    "magenta":"\033[35m",
    "cyan":  "\033[36m"
}

def color_text(text, color):
    return f"{COLORS.get(color, COLORS['reset'])}{text}{COLORS['reset']}"

def print_help():
    print(f"""
{color_text('=== Qubit Register CLI ===','yellow')}

{color_text('Gates','cyan')}
  NOT <q>  |  Z <q>  |  HADAMARD <q>
  CNOT <control> <target>
  SWAP <q1> <q2>
  CCNOT <control1> <control2> <target>
  CSWAP <control> <q1> <q2>
  MEASURE                     # collapse the whole register

{color_text('Other','cyan')}
  LOAD <file>    Read and run a circuit file
  SHOW           Print the register as kets
  STATE          Print the raw amplitudes
  RESET          Back to |0...0>
  HELP, EXIT
""")

class CircuitSimulator:
    def __init__(self, config: SimulatorConfig = None, rng=None):
        self.config = config or DEFAULT_CONFIG
        self.n = self.config.num_qubits
        self.register = Register(self.n, rng=rng or self.config.make_rng())
        self.circuit = []

    def read_circuit(self, filename=None):
        filename = filename if filename is not None else self.config.circuit
        self.circuit = read_circuit(filename)
        logger.info("Read %d instruction(s) from %s", len(self.circuit), filename)
        return self.circuit

    def simulate(self):
        instructions = parse_circuit(self.circuit, self.n)
        outcomes = run_circuit(self.register, instructions)
        logger.info("Simulated %d instruction(s) on %d qubit(s)", len(instructions), self.n)
        return outcomes

    def execute(self, line):
        """Parse one textual instruction and apply it at once."""
        instruction = parse_instruction(line.strip().split(), self.n)
        return apply_instruction(self.register, instruction)

    def print_register(self):
        return format_register(self.register.state, self.n)

# ——— batch runner ——————————————————————————————————————————————————
def run_file(config: SimulatorConfig, rng=None):
    sim = CircuitSimulator(config, rng=rng)
    sim.read_circuit()
    sim.simulate()
    return sim.print_register()

# ——— interactive loop —————————————————————————————————————————————
def interactive_cli(sim: CircuitSimulator = None):
    sim = sim or CircuitSimulator()

    print(color_text(f"Welcome to the Qubit Register CLI! ({sim.n} qubits)", "green"))
    print_help()

    while True:
        try:
            inp = input(color_text(">> ", "yellow")).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not inp or inp.startswith("#"):
            continue

        parts = inp.split()
        cmd = parts[0].upper()
        if cmd == "EXIT":
            break
        if cmd == "HELP":
            print_help()
            continue
        if cmd == "SHOW":
            print(color_text(sim.print_register(), "magenta"))
            continue
        if cmd == "STATE":
            for idx, amp in enumerate(sim.register.state):
                print(f"  |{as_binary(idx, sim.n)}> {amp: .6f}")
            continue
        if cmd == "RESET":
            sim.register.reset()
            print(color_text("Register reset", "green"))
            continue

        if cmd == "LOAD":
            if len(parts) != 2:
                print(color_text("LOAD requires exactly one file name", "red"))
                continue
            try:
                sim.read_circuit(parts[1])
                sim.simulate()
                print(color_text(f"✔ {parts[1]}: {sim.print_register()}", "green"))
            except (CircuitError, OSError) as e:
                print(color_text(f"✗ {parts[1]}: {e}", "red"))
            continue

        # Otherwise treat as a gate instruction
        try:
            msg, _ = sim.execute(inp)
            print(color_text(f"✔ {msg}", "green"))
        except CircuitError as e:
            print(color_text(f"✗ {inp}: {e}", "red"))

if __name__ == "__main__":
    interactive_cli()
