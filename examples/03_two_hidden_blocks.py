"""
Example 03: Two Hidden Blocks and Recurrence

Adds a second hidden block that reads only the first block, and runs
three recurrent timesteps per pattern. Three output networks learn
parity, mirror symmetry and a one-hot target on the same inputs.

Level: Advanced
Runtime: ~1 minute
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
from edla.base import (
    NetworkTopology, LearningParams, TrainingParams,
    create_binary_inputs, create_targets,
)
from edla.networks import EDNetwork
from edla.visualization import plot_training_results, format_weight_matrix


def main():
    print("=== Example 03: Two Hidden Blocks and Recurrence ===\n")

    rng = np.random.RandomState(7)
    inputs = create_binary_inputs(4, 16)
    targets = create_targets(inputs, ['parity', 'mirror', 'one_hot'], rng)

    topology = NetworkTopology(n_inputs=4, n_outputs=3, n_hidden=12, n_hidden2=6)
    print(f"Neuron slots per output network: {topology.n_slots}")
    print(f"Second block starts at index {topology.second_block_start}\n")

    network = EDNetwork(
        topology,
        params=LearningParams(timesteps=3),
        training=TrainingParams(max_epochs=3000, stop_on_zero_error_count=True),
        seed=7,
    )
    network.train(inputs, targets)

    # Per-output accuracy
    result = network.evaluate(inputs, targets)
    wrong = np.abs(targets - result['outputs']) > network.training.error_threshold
    print(f"\n=== Results ===")
    for out, name in enumerate(('parity', 'mirror', 'one_hot')):
        print(f"  {name:8s}: {int(np.sum(~wrong[:, out]))}/{len(inputs)} correct")

    print("\nWeights of output network 0:")
    print(format_weight_matrix(network.weights, topology))

    plot_training_results(network, inputs, targets,
                          save_path='03_two_hidden_blocks_results.png')


if __name__ == "__main__":
    main()
