"""
main.py

Entry point for the qubit register simulator.

    python main.py [n] [circuit]

With one positional argument it names the circuit file; with two, the first
is the register size. Without any, the default circuit runs on 5 qubits.
"""

import argparse
import logging
import sys

from cli import CircuitSimulator, color_text, interactive_cli, run_file
from qreg.config import SimulatorConfig
from qreg.errors import CircuitError
from qreg.logging_config import setup_logging


def build_parser():
    parser = argparse.ArgumentParser(description="Simulate a small qubit register.")
    parser.add_argument("args", nargs="*", metavar="[n] circuit",
                        help="register size (optional) and circuit file")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the measurement draw")
    parser.add_argument("-i", "--interactive", action="store_true",
                        help="start the interactive prompt instead of running a file")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="log INFO (-v) or DEBUG (-vv) to stderr")
    parser.add_argument("--log-file", default=None, help="also write logs to this file")
    return parser


def config_from_args(ns):
    """
    Build a SimulatorConfig from parsed arguments.

    Requires:
         at most two positionals.
    Ensures:
         Returns the config; raises ValueError on a bad register size.
    """
    if len(ns.args) > 2:
        raise ValueError("expected at most two arguments: [n] circuit")
    kwargs = {}
    if len(ns.args) == 2:
        try:
            kwargs["num_qubits"] = int(ns.args[0])
        except ValueError:
            raise ValueError(f"register size must be an integer, got {ns.args[0]!r}") from None
        kwargs["circuit"] = ns.args[1]
    elif len(ns.args) == 1:
        kwargs["circuit"] = ns.args[0]

    level = {0: logging.WARNING, 1: logging.INFO}.get(ns.verbose, logging.DEBUG)
    return SimulatorConfig(seed=ns.seed, log_level=level, log_file=ns.log_file, **kwargs)


def main(argv=None):
    """
    Run the simulator.

    Ensures:
         The readout is printed; returns the process exit status.
    """
    parser = build_parser()
    ns = parser.parse_args(argv)
    try:
        config = config_from_args(ns)
    except ValueError as e:
        parser.error(str(e))

    setup_logging(config.log_level, config.log_file)

    if ns.interactive:
        interactive_cli(CircuitSimulator(config))
        return 0

    try:
        print(run_file(config))
    except (CircuitError, OSError) as e:
        print(color_text(f"Error: {e}", "red"), file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
