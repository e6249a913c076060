"""
Example 01: XOR with Error Diffusion

Trains the smallest nonlinear problem with ED: two inputs (four physical
input neurons), eight hidden neurons and one output. Shows the learning
curve, the final outputs and the signed weight matrix.

Level: Beginner
Runtime: ~5 seconds
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from edla.base import NetworkTopology, TrainingParams, create_xor_dataset
from edla.networks import EDNetwork
from edla.visualization import plot_training_results, plot_weight_matrix


def main():
    print("=== Example 01: XOR with Error Diffusion ===\n")

    inputs, targets = create_xor_dataset()

    network = EDNetwork(
        NetworkTopology(n_inputs=2, n_outputs=1, n_hidden=8),
        training=TrainingParams(max_epochs=2000, stop_on_zero_error_count=True),
        seed=1,
    )
    print(f"Connections: {network.get_connection_count()}")
    print(f"Initial mean |weight|: {network.get_mean_absolute_weight():.4f}\n")

    network.train(inputs, targets)

    # Results
    print(f"\n=== Results ===")
    for x, t in zip(inputs, targets):
        y = network.get_output(x)[0]
        print(f"  {x.astype(int)} -> {y:.4f} (target {t[0]:.0f})")

    # Visualise
    plot_training_results(network, inputs, targets,
                          save_path='01_xor_learning_results.png')
    plot_weight_matrix(network, save_path='01_xor_weights.png')


if __name__ == "__main__":
    main()
