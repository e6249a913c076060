"""
Connection weights: constrained initialization and the ED update rule.

  - initialize_weights: random magnitudes, structural rules, type-sign scaling
  - update_weights: simultaneous error diffusion update of every connection

Weights are stored as (n_outputs, n_slots, n_slots) indexed
[output_network, target, source], with a boolean mask of the same shape that
marks which connections exist. The updater consults the mask rather than the
weight value, so a learned weight that crosses zero stays a live connection
and a disabled connection can never become nonzero.

Sign constraint (weight = magnitude * type[source] * type[target]):
  Excitatory -> Excitatory: positive     Inhibitory -> Inhibitory: positive
  Excitatory -> Inhibitory: negative     Inhibitory -> Excitatory: negative
"""

import numpy as np
from typing import Tuple

from .base import NetworkTopology, TopologyFlags
from .neurons import ActivationState, sigmoid_derivative
from .diffusion import ErrorSignal


# ============================================================================
# INITIALIZATION
# ============================================================================

def initialize_weights(topology: NetworkTopology, neuron_types: np.ndarray,
                       flags: TopologyFlags, weight_range: float,
                       threshold_range: float,
                       rng: np.random.RandomState) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the constrained weight tensor and its connectivity mask.

    Rules are applied per (target, source) pair in a fixed order; later rules
    may disable or re-enable what earlier rules set:
      1. second-block targets take no input-pair sources
      2. loop cutting: no hidden-to-hidden links except self, nothing from the
         output neuron
      3. multi-layer: the output neuron takes no input-pair sources
      4. second-block targets take every hidden source (fresh draw)
      5. self connections: off if self_loops_disabled, else a fresh draw
      6. inhibitory inputs off: no odd sources below the output index
    Draw order is fixed, so the same seed rebuilds the same network.
    """
    shape = (topology.n_outputs, topology.n_slots, topology.n_slots)
    weights = np.zeros(shape)
    mask = np.zeros(shape, dtype=bool)

    n_in = topology.input_width
    out_idx = topology.output_index
    second_block = topology.second_block_start

    for net in range(topology.n_outputs):
        for target in range(out_idx, topology.n_slots):
            for source in range(topology.n_slots):
                is_input_pair = 2 <= source < n_in + 2

                if source < 2:
                    magnitude = threshold_range * rng.random_sample()
                else:
                    magnitude = weight_range * rng.random_sample()
                enabled = True

                if target >= second_block and is_input_pair:
                    enabled = False

                if flags.loop_cutting:
                    if target != source and target > out_idx and source > n_in + 1:
                        enabled = False
                    if source == out_idx:
                        enabled = False

                if flags.multi_layer and is_input_pair and target == out_idx:
                    enabled = False

                if target >= second_block and source >= topology.hidden_start:
                    magnitude = weight_range * rng.random_sample()
                    enabled = True

                if target == source:
                    if flags.self_loops_disabled:
                        enabled = False
                    else:
                        magnitude = weight_range * rng.random_sample()
                        enabled = True

                if not flags.inhibitory_inputs and source < n_in + 2 and source % 2 == 1:
                    enabled = False

                if enabled:
                    mask[net, target, source] = True
                    weights[net, target, source] = (
                        magnitude * neuron_types[source] * neuron_types[target]
                    )

    return weights, mask


# ============================================================================
# ERROR DIFFUSION UPDATE
# ============================================================================

def update_weights(topology: NetworkTopology, weights: np.ndarray, mask: np.ndarray,
                   activation: ActivationState, error: ErrorSignal,
                   neuron_types: np.ndarray, learning_rate: float,
                   bidirectional: bool):
    """
    Apply the ED rule to every existing connection, in place.

      delta = learning_rate * input[source] * |o_t| * (1 - |o_t|)

    Bidirectional mode:
      w += delta * type[target] * (exc[target] - inh[target])
    Selective mode (excitatory sources read the excitatory channel,
    inhibitory sources the inhibitory one):
      w += delta * channel[target] * type[source] * type[target]

    All deltas are computed from the same activation snapshot before any
    weight changes.
    """
    first = topology.output_index
    target_types = neuron_types[first:]

    derivative = sigmoid_derivative(activation.outputs[:, first:])
    delta = learning_rate * derivative[:, :, np.newaxis] * activation.inputs[:, np.newaxis, :]

    exc = error.excitatory[:, first:]
    inh = error.inhibitory[:, first:]

    if bidirectional:
        change = delta * (target_types * (exc - inh))[:, :, np.newaxis]
    else:
        excitatory_source = neuron_types > 0
        channel = np.where(excitatory_source[np.newaxis, np.newaxis, :],
                           exc[:, :, np.newaxis], inh[:, :, np.newaxis])
        sign = np.outer(target_types, neuron_types)
        change = delta * channel * sign[np.newaxis, :, :]

    weights[:, first:, :] += np.where(mask[:, first:, :], change, 0.0)


# ============================================================================
# CONNECTION STATISTICS
# ============================================================================

def count_connections(mask: np.ndarray) -> int:
    return int(np.count_nonzero(mask))


def mean_absolute_weight(weights: np.ndarray, mask: np.ndarray) -> float:
    live = np.abs(weights[mask])
    return float(np.mean(live)) if live.size else 0.0


def sign_violations(weights: np.ndarray, mask: np.ndarray,
                    neuron_types: np.ndarray) -> int:
    """Number of live, nonzero weights whose sign disagrees with type[s] * type[t]."""
    expected = np.sign(np.outer(neuron_types, neuron_types))
    actual = np.sign(weights)
    wrong = mask & (actual != 0) & (actual != expected[np.newaxis, :, :])
    return int(np.count_nonzero(wrong))
