"""
Configuration for a simulation run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import numpy as np


@dataclass
class SimulatorConfig:
    """Register size, circuit source and run options."""

    num_qubits: int = 5
    circuit: Path = field(default_factory=lambda: Path("examplecircuit"))

    # Seed for the measurement draw; None draws fresh entropy
    seed: Optional[int] = None

    log_level: int = logging.WARNING
    log_file: Optional[Path] = None

    def __post_init__(self):
        if isinstance(self.num_qubits, bool) or not isinstance(self.num_qubits, int):
            raise ValueError(f"Register size must be an integer, got {self.num_qubits!r}")
        if self.num_qubits < 1:
            raise ValueError(f"Register size must be positive, got {self.num_qubits}")
        self.circuit = Path(self.circuit)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)

    def make_rng(self) -> np.random.Generator:
        """Random source for ``Register.measure``."""
        return np.random.default_rng(self.seed)


# Default configuration instance
DEFAULT_CONFIG = SimulatorConfig()
