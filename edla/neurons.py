"""
Neuron types, activation, and the recurrent forward pass.

  - assign_neuron_types: alternating excitatory (+1) / inhibitory (-1) tags
  - sigmoid / sigmoid_derivative: activation and its ED surrogate derivative
  - ActivationState: per-output-network input and output buffers
  - run_forward_pass: input distribution plus recurrent settling over timesteps

The forward pass keeps two buffers per sweep. Every hidden/output neuron of a
sweep is computed from the previous sweep's inputs only, and the next buffer is
built afterwards, so neuron sums within a sweep never observe each other.
"""

import numpy as np
from dataclasses import dataclass
from typing import Sequence

from .base import NetworkTopology
from .errors import ConfigurationError


EXCITATORY = 1.0


# ============================================================================
# NEURON TYPES
# ============================================================================

def assign_neuron_types(total_neurons: int, output_index: int) -> np.ndarray:
    """
    Build the type vector for indices 0 .. total_neurons + 1.

    Index i gets ((i + 1) % 2) * 2 - 1, i.e. +1, -1, +1, ... starting at the
    excitatory bias neuron. The output neuron is always excitatory regardless
    of its parity. The returned array is read-only.
    """
    if output_index > total_neurons + 1:
        raise ConfigurationError(
            f"output_index {output_index} outside 0..{total_neurons + 1}"
        )

    types = np.array([((i + 1) % 2) * 2 - 1 for i in range(total_neurons + 2)],
                     dtype=float)
    types[output_index] = EXCITATORY
    types.flags.writeable = False
    return types


# ============================================================================
# ACTIVATION
# ============================================================================

def sigmoid(x, steepness: float):
    """1 / (1 + exp(-2x / steepness)); saturates to exactly 0 or 1 without warnings."""
    with np.errstate(over='ignore'):
        return 1.0 / (1.0 + np.exp(-2.0 * np.asarray(x, dtype=float) / steepness))


def sigmoid_derivative(output):
    """
    |o| * (1 - |o|).

    Uses the absolute output, not the signed one. A saturated output gives a
    derivative of exactly 0 and the connection stops learning for that pattern.
    """
    magnitude = np.abs(output)
    return magnitude * (1.0 - magnitude)


@dataclass
class ActivationState:
    """
    Neuron buffers for every output network, shape (n_outputs, n_slots).

    inputs  - value each neuron presents to its targets (bias, raw input, or
              fed-back output of the last sweep)
    outputs - sigmoid output of the last sweep (hidden/output slots only)
    """
    inputs: np.ndarray
    outputs: np.ndarray

    def predictions(self, topology: NetworkTopology) -> np.ndarray:
        """Output neuron activation of each output network."""
        return self.outputs[:, topology.output_index].copy()


def create_activation_state(topology: NetworkTopology, bias: float) -> ActivationState:
    """Zeroed buffers with both bias neurons presenting the bias input."""
    shape = (topology.n_outputs, topology.n_slots)
    inputs = np.zeros(shape)
    inputs[:, 0] = bias
    inputs[:, 1] = bias
    return ActivationState(inputs=inputs, outputs=np.zeros(shape))


# ============================================================================
# FORWARD PASS
# ============================================================================

def distribute_inputs(topology: NetworkTopology, previous_inputs: np.ndarray,
                      input_pattern: Sequence[float]) -> np.ndarray:
    """
    Copy the previous input buffer and load the pattern into the input pairs.

    Slots 2k+2 and 2k+3 both receive logical input k; sign differentiation
    comes only from the weight constraints.
    """
    inputs = previous_inputs.copy()
    for c in range(2, topology.input_width + 2):
        inputs[:, c] = input_pattern[c // 2 - 1]
    return inputs


def run_forward_pass(topology: NetworkTopology, weights: np.ndarray,
                     previous_inputs: np.ndarray, input_pattern: Sequence[float],
                     timesteps: int, loop_cutting: bool,
                     steepness: float) -> ActivationState:
    """
    Settle the network on one input pattern.

    With loop cutting the hidden/output inputs start from zero; otherwise they
    carry the fed-back state of the previous pattern. Each of the `timesteps`
    sweeps computes every hidden/output neuron from the previous buffer, then
    feeds the new outputs back into the hidden/output input slots. Bias and
    input slots are never overwritten by feedback.
    """
    first = topology.output_index
    inputs = distribute_inputs(topology, previous_inputs, input_pattern)
    if loop_cutting:
        inputs[:, first:] = 0.0

    outputs = np.zeros_like(inputs)
    for _ in range(timesteps):
        weighted_sums = np.matmul(weights[:, first:, :], inputs[:, :, np.newaxis])[:, :, 0]

        outputs = np.zeros_like(inputs)
        outputs[:, first:] = sigmoid(weighted_sums, steepness)

        next_inputs = inputs.copy()
        next_inputs[:, first:] = outputs[:, first:]
        inputs = next_inputs

    return ActivationState(inputs=inputs, outputs=outputs)
