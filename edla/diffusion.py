"""
Error diffusion: turning output error into a broadcast learning signal.

Backpropagation computes a different gradient for every layer. ED instead
splits each output network's prediction error by sign into an excitatory and
an inhibitory channel and hands the same (optionally amplified) pair to every
hidden neuron. The learning direction of each connection then follows from
the neuron types alone (see synapses.update_weights).
"""

import numpy as np
from dataclasses import dataclass
from typing import Sequence, Tuple

from .base import NetworkTopology, ERROR_THRESHOLD
from .neurons import ActivationState


@dataclass
class ErrorSignal:
    """Excitatory and inhibitory channels, shape (n_outputs, n_slots), all >= 0."""
    excitatory: np.ndarray
    inhibitory: np.ndarray

    @classmethod
    def zeros(cls, topology: NetworkTopology) -> 'ErrorSignal':
        shape = (topology.n_outputs, topology.n_slots)
        return cls(np.zeros(shape), np.zeros(shape))


@dataclass
class ConvergenceCounters:
    """Epoch statistics read by the convergence monitor."""
    error_total: float = 0.0
    error_count: int = 0

    def reset(self):
        self.error_total = 0.0
        self.error_count = 0


@dataclass
class EpochDelta:
    """What one pattern added to the epoch counters."""
    prediction_errors: np.ndarray
    error_total: float
    error_count: int


def split_error(prediction_error: float) -> Tuple[float, float]:
    """
    Route an error to one channel by its sign.

    Positive (output too low) -> (error, 0); otherwise -> (0, -error).
    Exactly one channel is zero and exc - inh == prediction_error.
    """
    if prediction_error > 0:
        return prediction_error, 0.0
    return 0.0, -prediction_error


def diffuse_error(topology: NetworkTopology, activation: ActivationState,
                  target_pattern: Sequence[float], amplification: float,
                  counters: ConvergenceCounters,
                  error_threshold: float = ERROR_THRESHOLD) -> Tuple[ErrorSignal, EpochDelta]:
    """
    Compute the split error of every output network and broadcast it.

    The output neuron keeps its unamplified split; every hidden neuron gets
    the same split scaled by `amplification`. |error| is added to the epoch
    total and errors above `error_threshold` are counted.
    """
    signal = ErrorSignal.zeros(topology)
    out_idx = topology.output_index
    hidden = slice(topology.hidden_start, topology.n_slots)

    errors = np.zeros(topology.n_outputs)
    pattern_total = 0.0
    pattern_count = 0

    for net in range(topology.n_outputs):
        prediction_error = float(target_pattern[net]) - activation.outputs[net, out_idx]
        errors[net] = prediction_error

        pattern_total += abs(prediction_error)
        if abs(prediction_error) > error_threshold:
            pattern_count += 1

        excitatory, inhibitory = split_error(prediction_error)
        signal.excitatory[net, out_idx] = excitatory
        signal.inhibitory[net, out_idx] = inhibitory

        signal.excitatory[net, hidden] = excitatory * amplification
        signal.inhibitory[net, hidden] = inhibitory * amplification

    counters.error_total += pattern_total
    counters.error_count += pattern_count

    return signal, EpochDelta(errors, pattern_total, pattern_count)
