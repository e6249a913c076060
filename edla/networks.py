"""
Network engine: one ED learning step per pattern, and the epoch loop on top.

Functional API over an explicitly owned EngineState:
  - initialize_network: type vector, constrained weights, zeroed buffers
  - train_on_pattern:   ForwardPass -> ErrorDiffusion -> WeightUpdate
  - predict:            forward pass only, state untouched
  - snapshot_weights / reset_epoch_counters / epoch_error_total / epoch_error_count

EDNetwork wraps an EngineState with the training loop: run epochs over a
pattern set until the epoch error total falls below the residual error or the
epoch limit is reached, recording the learning curve.

A pattern step always runs all three stages. Weight updates of one pattern are
complete before the next pattern's forward pass starts.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .base import (
    NetworkTopology, TopologyFlags, LearningParams, TrainingParams, ERROR_THRESHOLD,
)
from .errors import ConfigurationError, PatternShapeError
from .neurons import (
    ActivationState, assign_neuron_types, create_activation_state, run_forward_pass,
)
from .diffusion import ErrorSignal, ConvergenceCounters, diffuse_error
from .synapses import (
    initialize_weights, update_weights, count_connections, mean_absolute_weight,
)
from .visualization import format_pattern_line, format_digit_line


# ============================================================================
# ENGINE STATE
# ============================================================================

@dataclass
class EngineState:
    """Everything one ED network owns; nothing lives at module level."""
    topology: NetworkTopology
    flags: TopologyFlags
    params: LearningParams
    neuron_types: np.ndarray
    weights: np.ndarray
    mask: np.ndarray
    activation: ActivationState
    error: ErrorSignal
    counters: ConvergenceCounters


@dataclass
class PatternStats:
    """Result of one training step."""
    prediction_errors: np.ndarray
    did_exceed_threshold: bool


def initialize_network(topology: NetworkTopology, flags: Optional[TopologyFlags] = None,
                       weight_range: float = 1.0, threshold_range: float = 1.0,
                       seed: Optional[int] = 1,
                       params: Optional[LearningParams] = None) -> EngineState:
    """Create a freshly initialized engine. The same seed rebuilds the same weights."""
    if weight_range <= 0 or threshold_range <= 0:
        raise ConfigurationError(
            f"init ranges must be positive, got weight={weight_range}, "
            f"threshold={threshold_range}"
        )

    flags = flags or TopologyFlags()
    params = params or LearningParams()
    rng = np.random.RandomState(seed)

    neuron_types = assign_neuron_types(topology.total_neurons, topology.output_index)
    weights, mask = initialize_weights(topology, neuron_types, flags,
                                       weight_range, threshold_range, rng)

    return EngineState(
        topology=topology,
        flags=flags,
        params=params,
        neuron_types=neuron_types,
        weights=weights,
        mask=mask,
        activation=create_activation_state(topology, params.bias),
        error=ErrorSignal.zeros(topology),
        counters=ConvergenceCounters(),
    )


def _check_pattern(values: Sequence[float], expected: int, name: str) -> np.ndarray:
    pattern = np.asarray(values, dtype=float).ravel()
    if pattern.size != expected:
        raise PatternShapeError(f"{name} pattern has {pattern.size} values, expected {expected}")
    return pattern


# ============================================================================
# PATTERN STEP
# ============================================================================

def train_on_pattern(state: EngineState, input_pattern: Sequence[float],
                     target_pattern: Sequence[float],
                     error_threshold: float = ERROR_THRESHOLD) -> PatternStats:
    """Run one complete learning step on a single (input, target) pair."""
    topo = state.topology
    inputs = _check_pattern(input_pattern, topo.n_inputs, 'input')
    targets = _check_pattern(target_pattern, topo.n_outputs, 'target')
    p = state.params

    state.activation = run_forward_pass(
        topo, state.weights, state.activation.inputs, inputs,
        p.timesteps, state.flags.loop_cutting, p.sigmoid_steepness,
    )

    state.error, delta = diffuse_error(
        topo, state.activation, targets, p.error_amplification,
        state.counters, error_threshold,
    )

    update_weights(
        topo, state.weights, state.mask, state.activation, state.error,
        state.neuron_types, p.learning_rate, state.flags.bidirectional_updates,
    )

    return PatternStats(
        prediction_errors=delta.prediction_errors,
        did_exceed_threshold=delta.error_count > 0,
    )


def predict(state: EngineState, input_pattern: Sequence[float]) -> np.ndarray:
    """Output of every output network for one pattern, without learning."""
    topo = state.topology
    inputs = _check_pattern(input_pattern, topo.n_inputs, 'input')
    activation = run_forward_pass(
        topo, state.weights, state.activation.inputs, inputs,
        state.params.timesteps, state.flags.loop_cutting,
        state.params.sigmoid_steepness,
    )
    return activation.predictions(topo)


def snapshot_weights(state: EngineState) -> np.ndarray:
    """Read-only copy of the weight tensor for analysis and plotting."""
    snapshot = state.weights.copy()
    snapshot.flags.writeable = False
    return snapshot


def reset_epoch_counters(state: EngineState):
    state.counters.reset()


def epoch_error_total(state: EngineState) -> float:
    return state.counters.error_total


def epoch_error_count(state: EngineState) -> int:
    return state.counters.error_count


# ============================================================================
# TRAINING LOOP
# ============================================================================

def learning_status(error_count: int, n_checks: int) -> str:
    """Rate an epoch by its share of output errors; n_checks = patterns x outputs."""
    if error_count == 0:
        return "PERFECT"
    if error_count <= n_checks * 0.1:
        return "Excellent"
    if error_count <= n_checks * 0.3:
        return "Good"
    return "Learning..."


class EDNetwork:
    """
    Error Diffusion network with an epoch-based training loop.

    Each epoch presents every pattern once, in order, as a full learning
    step. Training ends when the epoch error total drops below the residual
    error (or, optionally, when no pattern exceeds the error threshold), or
    when max_epochs is reached.
    """

    def __init__(self, topology: NetworkTopology,
                 flags: Optional[TopologyFlags] = None,
                 params: Optional[LearningParams] = None,
                 training: Optional[TrainingParams] = None,
                 weight_range: float = 1.0,
                 threshold_range: float = 1.0,
                 seed: Optional[int] = 1):
        self.topology = topology
        self.training = training or TrainingParams()
        self.state = initialize_network(topology, flags, weight_range,
                                        threshold_range, seed, params)

        # History tracking
        self.error_total_history: List[float] = []
        self.error_count_history: List[int] = []
        self.weight_snapshots: List[float] = []
        self.epochs_run = 0
        self.converged = False

    @property
    def flags(self) -> TopologyFlags:
        return self.state.flags

    @property
    def params(self) -> LearningParams:
        return self.state.params

    @property
    def weights(self) -> np.ndarray:
        return self.state.weights

    @property
    def neuron_types(self) -> np.ndarray:
        return self.state.neuron_types

    def get_connection_count(self) -> int:
        return count_connections(self.state.mask)

    def get_mean_absolute_weight(self) -> float:
        return mean_absolute_weight(self.state.weights, self.state.mask)

    def get_output(self, input_pattern: Sequence[float]) -> np.ndarray:
        return predict(self.state, input_pattern)

    def train_pattern(self, input_pattern: Sequence[float],
                      target_pattern: Sequence[float]) -> PatternStats:
        return train_on_pattern(self.state, input_pattern, target_pattern,
                                self.training.error_threshold)

    def train_epoch(self, inputs: np.ndarray, targets: np.ndarray):
        """Present every pattern once; returns (error_total, error_count)."""
        reset_epoch_counters(self.state)
        verbose = self.training.verbose

        for input_pattern, target_pattern in zip(inputs, targets):
            self.train_pattern(input_pattern, target_pattern)
            if verbose >= 3:
                print(format_digit_line(self.state.activation.outputs[0],
                                        target_pattern[0], self.topology))
            elif verbose >= 2:
                print(format_pattern_line(self.state.activation.inputs[0],
                                          self.state.activation.outputs[0],
                                          target_pattern[0], self.topology))

        return epoch_error_total(self.state), epoch_error_count(self.state)

    def train(self, inputs: np.ndarray, targets: np.ndarray) -> bool:
        """Train until convergence or max_epochs. Returns True on convergence."""
        inputs = np.atleast_2d(np.asarray(inputs, dtype=float))
        if inputs.size == 0:
            raise ConfigurationError("training needs at least one pattern")
        targets = np.asarray(targets, dtype=float).reshape(len(inputs), -1)
        tp = self.training
        n_patterns = len(inputs)
        # Errors are counted per output network
        n_checks = n_patterns * self.topology.n_outputs
        verbose = tp.verbose

        if verbose:
            print(f"Training on {n_patterns} patterns for up to {tp.max_epochs} epochs...")
            print(f"Network: {self.topology.n_inputs} inputs (x2), "
                  f"{self.topology.n_hidden}+{self.topology.n_hidden2} hidden, "
                  f"{self.topology.n_outputs} outputs, "
                  f"{self.get_connection_count()} connections")

        self.weight_snapshots.append(self.get_mean_absolute_weight())

        for epoch in range(tp.max_epochs):
            error_total, error_count = self.train_epoch(inputs, targets)
            self.epochs_run += 1

            self.error_total_history.append(error_total)
            self.error_count_history.append(error_count)
            self.weight_snapshots.append(self.get_mean_absolute_weight())

            if verbose:
                print(f"  Epoch {self.epochs_run:4d} | "
                      f"Error total: {error_total:.6f} | "
                      f"Output errors: {error_count:3d}/{n_checks} | "
                      f"{learning_status(error_count, n_checks)}")

            if error_total < tp.convergence_error or (
                    tp.stop_on_zero_error_count and error_count == 0):
                self.converged = True
                break

        if verbose:
            self._print_summary(n_checks)
        return self.converged

    def _print_summary(self, n_checks: int):
        error_total = self.error_total_history[-1] if self.error_total_history else 0.0
        error_count = self.error_count_history[-1] if self.error_count_history else 0
        if self.converged:
            print(f"Converged in {self.epochs_run} epochs")
            print(f"Final total error: {error_total:.6f} "
                  f"(threshold: {self.training.convergence_error})")
            print(f"Final accuracy: "
                  f"{100.0 * (n_checks - error_count) / n_checks:.1f}%")
        else:
            print(f"Maximum epochs ({self.epochs_run}) reached")
            print(f"Final error: {error_total:.4f}")
            print(f"Output errors: {error_count}/{n_checks} "
                  f"({100.0 * error_count / n_checks:.1f}%)")

    def evaluate(self, inputs: np.ndarray, targets: np.ndarray) -> dict:
        """Forward-only pass over a pattern set, no learning."""
        inputs = np.atleast_2d(np.asarray(inputs, dtype=float))
        targets = np.asarray(targets, dtype=float).reshape(len(inputs), -1)
        outputs = np.array([self.get_output(x) for x in inputs])
        errors = np.abs(targets - outputs)
        return {
            'outputs': outputs,
            'error_total': float(np.sum(errors)),
            'error_count': int(np.sum(errors > self.training.error_threshold)),
        }
