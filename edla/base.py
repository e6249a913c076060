"""
Shared data structures, parameters, and utility functions.

All parameter dataclasses and constants used across the engine.

Default values follow Kaneko's Error Diffusion learning program:
  - learning rate 0.8, sigmoid steepness 0.4, bias input 0.8
  - 2 recurrent timesteps per pattern
  - weights and thresholds drawn from [0, 1.0)
  - multi-layer forcing, loop cutting and self-loop cutting enabled
  - inhibitory input neurons enabled, selective (non-bidirectional) updates
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .errors import ConfigurationError


# ============================================================================
# CONSTANTS
# ============================================================================

MAX_OUTPUT_NETWORKS = 10    # Output-network slots supported per engine
ERROR_THRESHOLD = 0.5       # |target - output| above this counts as an error pattern
CONVERGENCE_ERROR = 0.1     # Epoch error total below this ends training
MAX_EPOCHS = 10000          # Hard stop for the training loop

PATTERN_TYPES = ('random', 'parity', 'mirror', 'real_random', 'one_hot')


# ============================================================================
# TOPOLOGY
# ============================================================================

@dataclass(frozen=True)
class NetworkTopology:
    """
    Dimensions of an ED network, fixed for a training run.

    Each logical input becomes an excitatory/inhibitory neuron pair, so the
    physical input width is twice n_inputs. Index layout:

      0, 1                         bias pair (+, -)
      2 .. input_width + 1         input pairs (even = +, odd = -)
      input_width + 2              output neuron (always +)
      input_width + 3 .. total + 1 hidden neurons; the last n_hidden2 of
                                   them form the second hidden block
    """
    n_inputs: int = 4           # Logical inputs (before doubling)
    n_outputs: int = 1          # Independent output networks
    n_hidden: int = 8           # First hidden block
    n_hidden2: int = 0          # Second hidden block (tail indices)

    def __post_init__(self):
        if self.n_inputs < 1:
            raise ConfigurationError(f"n_inputs must be >= 1, got {self.n_inputs}")
        if self.n_outputs < 1:
            raise ConfigurationError(f"n_outputs must be >= 1, got {self.n_outputs}")
        if self.n_outputs > MAX_OUTPUT_NETWORKS:
            raise ConfigurationError(
                f"n_outputs must be <= {MAX_OUTPUT_NETWORKS}, got {self.n_outputs}"
            )
        if self.n_hidden < 0 or self.n_hidden2 < 0:
            raise ConfigurationError(
                f"hidden widths must be >= 0, got {self.n_hidden} and {self.n_hidden2}"
            )

    @property
    def input_width(self) -> int:
        return 2 * self.n_inputs

    @property
    def total_neurons(self) -> int:
        # +1 is the output neuron slot; the bias pair lives in the two extra slots
        return self.input_width + 1 + self.n_hidden + self.n_hidden2

    @property
    def n_slots(self) -> int:
        """Length of every per-neuron array (indices 0 .. total_neurons + 1)."""
        return self.total_neurons + 2

    @property
    def output_index(self) -> int:
        return self.input_width + 2

    @property
    def hidden_start(self) -> int:
        return self.input_width + 3

    @property
    def second_block_start(self) -> int:
        return self.n_slots - self.n_hidden2


@dataclass(frozen=True)
class TopologyFlags:
    """Structural switches consumed by weight initialization and updates."""
    self_loops_disabled: bool = True      # No neuron connects to itself
    loop_cutting: bool = True             # Suppress hidden-to-hidden recurrence
    multi_layer: bool = True              # No direct input -> output connections
    bidirectional_updates: bool = False   # Use (excitatory - inhibitory) error on every source
    inhibitory_inputs: bool = True        # Keep connections from odd (inhibitory) input slots


# ============================================================================
# PARAMETER DATACLASSES
# ============================================================================

@dataclass(frozen=True)
class LearningParams:
    """Learning dynamics shared by the forward pass, diffuser and updater."""
    learning_rate: float = 0.8        # Weight update magnitude
    sigmoid_steepness: float = 0.4    # sigmoid(x) = 1 / (1 + exp(-2x / steepness))
    error_amplification: float = 1.0  # Scale of the error broadcast to hidden neurons
    bias: float = 0.8                 # Input value of both bias neurons
    timesteps: int = 2                # Recurrent sweeps per pattern (1 = feedforward)

    def __post_init__(self):
        if self.timesteps < 1:
            raise ConfigurationError(f"timesteps must be >= 1, got {self.timesteps}")
        if self.sigmoid_steepness <= 0:
            raise ConfigurationError(
                f"sigmoid_steepness must be positive, got {self.sigmoid_steepness}"
            )


@dataclass
class TrainingParams:
    """Epoch loop control for EDNetwork.train()."""
    max_epochs: int = MAX_EPOCHS
    convergence_error: float = CONVERGENCE_ERROR   # Residual error total
    error_threshold: float = ERROR_THRESHOLD
    stop_on_zero_error_count: bool = False
    verbose: int = 1            # 0 silent, 1 epoch lines, 2 pattern lines, 3 digit lines

    def __post_init__(self):
        if self.max_epochs < 1:
            raise ConfigurationError(f"max_epochs must be >= 1, got {self.max_epochs}")


# ============================================================================
# PATTERN UTILITIES
# ============================================================================

def _check_pattern_count(n_patterns: int):
    if n_patterns < 1:
        raise ConfigurationError(f"n_patterns must be >= 1, got {n_patterns}")


def create_binary_inputs(n_inputs: int, n_patterns: int) -> np.ndarray:
    """
    Systematic binary inputs: input i of pattern p is bit i of p.

    Pattern 0 -> [0, 0, ...], pattern 1 -> [1, 0, ...], pattern 2 -> [0, 1, ...]
    """
    _check_pattern_count(n_patterns)
    inputs = np.zeros((n_patterns, n_inputs))
    for p in range(n_patterns):
        for i in range(n_inputs):
            if p & (1 << i):
                inputs[p, i] = 1.0
    return inputs


def create_random_inputs(n_inputs: int, n_patterns: int,
                         rng: Optional[np.random.RandomState] = None) -> np.ndarray:
    """Continuous inputs drawn uniformly from [0, 1)."""
    _check_pattern_count(n_patterns)
    rng = rng or np.random.RandomState()
    return rng.random_sample((n_patterns, n_inputs))


def create_targets(inputs: np.ndarray, pattern_types: Sequence[str],
                   rng: Optional[np.random.RandomState] = None) -> np.ndarray:
    """
    Build one target column per output network.

    Pattern types:
      random      - random binary targets
      parity      - 1 for an odd number of inputs above 0.5 (XOR for 2 inputs)
      mirror      - 1 when the input vector reads the same reversed
      real_random - continuous targets in [0, 1)
      one_hot     - exactly one positive pattern per output, distinct across outputs
    """
    rng = rng or np.random.RandomState()
    n_patterns, n_inputs = inputs.shape
    targets = np.zeros((n_patterns, len(pattern_types)))
    used_one_hot = set()

    for out, kind in enumerate(pattern_types):
        if kind not in PATTERN_TYPES:
            raise ConfigurationError(
                f"unknown pattern type '{kind}', expected one of {PATTERN_TYPES}"
            )

        if kind == 'random':
            targets[:, out] = (rng.random_sample(n_patterns) > 0.5).astype(float)
        elif kind == 'parity':
            active = np.sum(inputs > 0.5, axis=1)
            targets[:, out] = (active % 2 == 1).astype(float)
        elif kind == 'mirror':
            for p in range(n_patterns):
                symmetric = all(inputs[p, i] == inputs[p, n_inputs - 1 - i]
                                for i in range(n_inputs // 2))
                targets[p, out] = 1.0 if symmetric else 0.0
        elif kind == 'real_random':
            targets[:, out] = rng.random_sample(n_patterns)
        elif kind == 'one_hot':
            free = [p for p in range(n_patterns) if p not in used_one_hot]
            if not free:
                raise ConfigurationError(
                    f"one_hot needs a distinct pattern per output, only {n_patterns} patterns"
                )
            chosen = free[rng.randint(len(free))]
            used_one_hot.add(chosen)
            targets[chosen, out] = 1.0

    return targets


def create_xor_dataset() -> Tuple[np.ndarray, np.ndarray]:
    """The four XOR patterns in systematic binary order."""
    return create_parity_dataset(2)


def create_parity_dataset(n_bits: int) -> Tuple[np.ndarray, np.ndarray]:
    """All 2^n_bits binary inputs with their parity as the single target."""
    inputs = create_binary_inputs(n_bits, 1 << n_bits)
    return inputs, create_targets(inputs, ['parity'])
