"""
Visualization and text reports for ED training runs.

Figures (matplotlib):
  - plot_learning_curve: error total and error-pattern count per epoch
  - plot_weight_matrix: signed weight heatmap of one output network
  - plot_training_results: learning curve, weight evolution, outputs vs targets, weights

Text:
  - format_pattern_line: inputs, output vs target, first hidden activations
  - format_digit_line: compact 0-9 digit rendering of every activation
  - format_weight_matrix: row-per-target weight table
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Optional


# ============================================================================
# TEXT REPORTS
# ============================================================================

def _digit(value: float) -> str:
    return str(int(abs(value) * 9.999))


def format_pattern_line(inputs: np.ndarray, outputs: np.ndarray, target: float,
                        topology, n_hidden_shown: int = 4) -> str:
    """One line per pattern: excitatory input values, output, target, hidden outputs."""
    logical = [inputs[2 * k] for k in range(1, topology.n_inputs + 1)]
    hidden = outputs[topology.hidden_start:topology.hidden_start + n_hidden_shown]

    line = "inputs: " + " ".join(f"{v:4.2f}" for v in logical)
    line += f" -> {outputs[topology.output_index]:7.5f}, {target:4.2f}"
    if len(hidden):
        line += " hidden: " + " ".join(f"{v:7.4f}" for v in hidden)
    return line


def format_digit_line(outputs: np.ndarray, target: float, topology) -> str:
    """Target digit, output digit, then one digit per hidden neuron."""
    out_idx = topology.output_index
    hidden = outputs[topology.hidden_start:topology.n_slots]
    return (f"{_digit(target)}: {_digit(outputs[out_idx])} "
            + "".join(_digit(v) for v in hidden))


def format_weight_matrix(weights: np.ndarray, topology, output_network: int = 0) -> str:
    """Weights of every hidden/output target; columns are th+ th- in1+ in1- ..."""
    lines = []
    for target in range(topology.output_index, topology.n_slots):
        row = " ".join(f"{w:6.2f}" for w in weights[output_network, target])
        lines.append(f"Neuron {target:2d}: {row}")
    return "\n".join(lines)


# ============================================================================
# FIGURES
# ============================================================================

def plot_learning_curve(network, save_path: Optional[str] = 'learning_curve.png',
                        show: bool = True):
    """Error total and error-pattern count per epoch."""
    fig, axes = plt.subplots(2, 1, figsize=(10, 8))

    ax = axes[0]
    ax.plot(network.error_total_history, 'b-', linewidth=2)
    ax.axhline(y=network.training.convergence_error, color='r', linestyle='--',
               alpha=0.5, label='Residual error')
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Error Total')
    ax.set_title('Learning Curve')
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(network.error_count_history, 'm-', linewidth=2)
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Error Patterns')
    ax.set_title(f'Patterns Above Error Threshold ({network.training.error_threshold})')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    _finish(fig, save_path, show)
    return fig


def plot_weight_matrix(network, output_network: int = 0,
                       save_path: Optional[str] = 'weight_matrix.png',
                       show: bool = True):
    """Signed weights (target x source); disabled connections are blank."""
    topo = network.topology
    weights = network.weights[output_network, topo.output_index:, :]
    mask = network.state.mask[output_network, topo.output_index:, :]
    shown = np.where(mask, weights, np.nan)
    limit = np.nanmax(np.abs(shown)) if mask.any() else 1.0

    fig, ax = plt.subplots(figsize=(10, 6))
    im = ax.imshow(shown, cmap='RdBu_r', vmin=-limit, vmax=limit,
                   interpolation='nearest', aspect='auto')
    ax.set_xlabel('Source Neuron')
    ax.set_ylabel('Target Neuron')
    ax.set_yticks(range(weights.shape[0]))
    ax.set_yticklabels(range(topo.output_index, topo.n_slots))
    ax.axvline(x=1.5, color='gray', linewidth=0.8)
    ax.axvline(x=topo.input_width + 1.5, color='gray', linewidth=0.8)
    ax.set_title(f'Weights of Output Network {output_network} '
                 f'(red = positive, blue = negative)')
    fig.colorbar(im, ax=ax)

    plt.tight_layout()
    _finish(fig, save_path, show)
    return fig


def plot_training_results(network, inputs: np.ndarray, targets: np.ndarray,
                          save_path: Optional[str] = 'ed_training_results.png',
                          show: bool = True):
    """Learning curve, weight evolution, outputs vs targets, and weight distribution."""
    fig, axes = plt.subplots(2, 2, figsize=(14, 10))

    # Learning curve
    ax = axes[0, 0]
    ax.plot(network.error_total_history, 'b-o', linewidth=2, markersize=3)
    ax.axhline(y=network.training.convergence_error, color='r', linestyle='--',
               alpha=0.5, label='Residual error')
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Error Total')
    ax.set_title('Learning Curve')
    ax.legend()
    ax.grid(True, alpha=0.3)

    # Weight evolution
    ax = axes[0, 1]
    ax.plot(network.weight_snapshots, 'g-s', linewidth=2, markersize=3)
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Mean |Weight|')
    ax.set_title('Weight Evolution During Training')
    ax.grid(True, alpha=0.3)

    # Outputs vs targets
    ax = axes[1, 0]
    result = network.evaluate(inputs, targets)
    n_patterns = len(result['outputs'])
    x = np.arange(n_patterns)
    width = 0.35
    ax.bar(x - width / 2, np.asarray(targets).reshape(n_patterns, -1)[:, 0], width,
           label='Target', color='#90CAF9')
    ax.bar(x + width / 2, result['outputs'][:, 0], width,
           label='Output', color='#EF9A9A')
    ax.set_xlabel('Pattern')
    ax.set_ylabel('Activation')
    ax.set_title('Output Network 0: Outputs vs Targets')
    ax.legend()
    ax.grid(True, alpha=0.3, axis='y')

    # Weight distribution by sign
    ax = axes[1, 1]
    live = network.weights[network.state.mask]
    ax.hist(live[live > 0], bins=30, color='firebrick', alpha=0.7, label='Positive')
    ax.hist(live[live < 0], bins=30, color='steelblue', alpha=0.7, label='Negative')
    ax.set_xlabel('Weight')
    ax.set_ylabel('Count')
    ax.set_title('Final Weight Distribution')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    _finish(fig, save_path, show)
    return fig


def _finish(fig, save_path: Optional[str], show: bool):
    if save_path:
        fig.savefig(save_path, dpi=150)
        print(f"Results saved to: {save_path}")
    if show:
        plt.show()
