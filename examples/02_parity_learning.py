"""
Example 02: 4-bit Parity

The default problem of the classic ED program: all 16 binary patterns of
four inputs, target 1 for an odd number of active inputs. Compares how
many epochs different hidden widths need.

Level: Intermediate
Runtime: ~1 minute
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from edla.base import NetworkTopology, TrainingParams, create_parity_dataset
from edla.networks import EDNetwork
from edla.visualization import plot_learning_curve


def main():
    print("=== Example 02: 4-bit Parity ===\n")

    inputs, targets = create_parity_dataset(4)
    results = {}

    for n_hidden in (4, 8, 16):
        print(f"--- {n_hidden} hidden neurons ---")
        network = EDNetwork(
            NetworkTopology(n_inputs=4, n_outputs=1, n_hidden=n_hidden),
            training=TrainingParams(max_epochs=3000, verbose=0),
            seed=1,
        )
        converged = network.train(inputs, targets)
        results[n_hidden] = network

        final = network.error_count_history[-1]
        status = "converged" if converged else "not converged"
        print(f"  {status} after {network.epochs_run} epochs, "
              f"{final}/{len(inputs)} patterns wrong\n")

    # Summary
    print("=== Summary ===")
    for n_hidden, network in results.items():
        print(f"  {n_hidden:2d} hidden: {network.epochs_run:5d} epochs, "
              f"final error total {network.error_total_history[-1]:.4f}")

    plot_learning_curve(results[8], save_path='02_parity_learning_curve.png')


if __name__ == "__main__":
    main()
