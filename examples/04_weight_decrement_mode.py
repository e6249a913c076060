"""
Example 04: Selective vs Bidirectional Updates

In selective mode excitatory sources learn only from the excitatory error
channel and inhibitory sources only from the inhibitory one. Bidirectional
(weight decrement) mode applies the net error to every source. Both modes
train 3-bit parity from the same initial weights.

Level: Intermediate
Runtime: ~20 seconds
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import matplotlib.pyplot as plt
from edla.base import NetworkTopology, TopologyFlags, TrainingParams, create_parity_dataset
from edla.networks import EDNetwork


def main():
    print("=== Example 04: Selective vs Bidirectional Updates ===\n")

    inputs, targets = create_parity_dataset(3)
    topology = NetworkTopology(n_inputs=3, n_outputs=1, n_hidden=8)
    networks = {}

    for label, bidirectional in (('selective', False), ('bidirectional', True)):
        network = EDNetwork(
            topology,
            flags=TopologyFlags(bidirectional_updates=bidirectional),
            training=TrainingParams(max_epochs=1500, verbose=0),
            seed=3,
        )
        converged = network.train(inputs, targets)
        networks[label] = network
        print(f"{label:13s}: {'converged' if converged else 'stopped'} "
              f"after {network.epochs_run} epochs, "
              f"mean |weight| {network.get_mean_absolute_weight():.4f}")

    # Compare learning curves
    fig, ax = plt.subplots(figsize=(10, 5))
    for label, network in networks.items():
        ax.plot(network.error_total_history, linewidth=2, label=label)
    ax.axhline(y=0.1, color='r', linestyle='--', alpha=0.5, label='Residual error')
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Error Total')
    ax.set_title('Selective vs Bidirectional Updates')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig('04_weight_decrement_comparison.png', dpi=150)
    print("\nResults saved to: 04_weight_decrement_comparison.png")
    plt.show()


if __name__ == "__main__":
    main()
