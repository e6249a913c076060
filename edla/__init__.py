"""
Error Diffusion Learning

A training engine for Kaneko's Error Diffusion (ED) method: excitatory and
inhibitory neuron types with sign-constrained weights, a recurrent forward
pass, and one error signal broadcast to every hidden neuron instead of
backpropagated gradients.
"""

# Base types and utilities
from .base import (
    NetworkTopology,
    TopologyFlags,
    LearningParams,
    TrainingParams,
    MAX_OUTPUT_NETWORKS,
    ERROR_THRESHOLD,
    create_binary_inputs,
    create_random_inputs,
    create_targets,
    create_xor_dataset,
    create_parity_dataset,
)
from .errors import EDError, ConfigurationError, PatternShapeError

# Neurons and forward pass
from .neurons import (
    ActivationState,
    assign_neuron_types,
    sigmoid,
    sigmoid_derivative,
    run_forward_pass,
)

# Error diffusion
from .diffusion import (
    ErrorSignal,
    ConvergenceCounters,
    split_error,
    diffuse_error,
)

# Weights
from .synapses import initialize_weights, update_weights

# Engine and training loop
from .networks import (
    EngineState,
    PatternStats,
    EDNetwork,
    initialize_network,
    train_on_pattern,
    predict,
    snapshot_weights,
    reset_epoch_counters,
    epoch_error_total,
    epoch_error_count,
)

# Visualization
from .visualization import (
    plot_learning_curve,
    plot_weight_matrix,
    plot_training_results,
)

__version__ = "1.0.0"
__all__ = [
    # Base
    "NetworkTopology", "TopologyFlags", "LearningParams", "TrainingParams",
    "MAX_OUTPUT_NETWORKS", "ERROR_THRESHOLD",
    "create_binary_inputs", "create_random_inputs", "create_targets",
    "create_xor_dataset", "create_parity_dataset",
    "EDError", "ConfigurationError", "PatternShapeError",
    # Neurons
    "ActivationState", "assign_neuron_types", "sigmoid", "sigmoid_derivative",
    "run_forward_pass",
    # Diffusion
    "ErrorSignal", "ConvergenceCounters", "split_error", "diffuse_error",
    # Synapses
    "initialize_weights", "update_weights",
    # Networks
    "EngineState", "PatternStats", "EDNetwork", "initialize_network",
    "train_on_pattern", "predict", "snapshot_weights", "reset_epoch_counters",
    "epoch_error_total", "epoch_error_count",
    # Visualization
    "plot_learning_curve", "plot_weight_matrix", "plot_training_results",
]
