"""
Command-line interface for ED training runs.

Every option defaults to the value of the classic interactive ED program,
so `python -m edla` trains 4-bit parity with 8 hidden neurons.
"""

import argparse

import numpy as np

from .base import (
    NetworkTopology, TopologyFlags, LearningParams, TrainingParams, PATTERN_TYPES,
    create_binary_inputs, create_random_inputs, create_targets,
)
from .errors import EDError
from .networks import EDNetwork
from .visualization import format_weight_matrix, plot_training_results


def _on_off(value: str) -> bool:
    if value.lower() in ('1', 'on', 'true', 'yes'):
        return True
    if value.lower() in ('0', 'off', 'false', 'no'):
        return False
    raise argparse.ArgumentTypeError(f"expected on/off, got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='edla',
        description='Train an Error Diffusion network on generated patterns.',
    )

    data = parser.add_argument_group('patterns')
    data.add_argument('--seed', type=int, default=1, help='Random seed (default: 1)')
    data.add_argument('--inputs', type=int, default=4, help='Logical input neurons (default: 4)')
    data.add_argument('--patterns', type=int, default=16, help='Training patterns (default: 16)')
    data.add_argument('--outputs', type=int, default=1, help='Output neurons (default: 1)')
    data.add_argument('--pattern-type', choices=PATTERN_TYPES, default='parity',
                      help='Target type for every output (default: parity)')
    data.add_argument('--random-inputs', action='store_true',
                      help='Random inputs instead of systematic binary patterns')

    net = parser.add_argument_group('network')
    net.add_argument('--hidden', type=int, default=8, help='First hidden block (default: 8)')
    net.add_argument('--hidden2', type=int, default=0, help='Second hidden block (default: 0)')
    net.add_argument('--timesteps', type=int, default=2, help='Recurrent sweeps (default: 2)')
    net.add_argument('--weight-range', type=float, default=1.0)
    net.add_argument('--threshold-range', type=float, default=1.0)
    net.add_argument('--multi-layer', type=_on_off, default=True, metavar='ON|OFF')
    net.add_argument('--weight-decrement', type=_on_off, default=False, metavar='ON|OFF',
                     help='Bidirectional error application')
    net.add_argument('--loop-cutting', type=_on_off, default=True, metavar='ON|OFF')
    net.add_argument('--self-loop-cutting', type=_on_off, default=True, metavar='ON|OFF')
    net.add_argument('--inhibitory-inputs', type=_on_off, default=True, metavar='ON|OFF')

    learn = parser.add_argument_group('learning')
    learn.add_argument('--steepness', type=float, default=0.4, help='Sigmoid steepness (default: 0.4)')
    learn.add_argument('--amplification', type=float, default=1.0,
                       help='Error amplification for hidden neurons (default: 1.0)')
    learn.add_argument('--learning-rate', type=float, default=0.8)
    learn.add_argument('--bias', type=float, default=0.8)
    learn.add_argument('--residual', type=float, default=0.1,
                       help='Residual error total that ends training (default: 0.1)')
    learn.add_argument('--max-epochs', type=int, default=10000)

    out = parser.add_argument_group('output')
    out.add_argument('--verbose', type=int, default=1, choices=(0, 1, 2, 3),
                     help='0 silent, 1 epochs, 2 patterns, 3 digit display')
    out.add_argument('--show-weights', action='store_true',
                     help='Print the weight matrix of output network 0 after training')
    out.add_argument('--plot', metavar='PATH', default=None,
                     help='Save training figure to PATH')
    return parser


def run(args) -> int:
    rng = np.random.RandomState(args.seed)

    if args.random_inputs:
        inputs = create_random_inputs(args.inputs, args.patterns, rng)
    else:
        inputs = create_binary_inputs(args.inputs, args.patterns)
    targets = create_targets(inputs, [args.pattern_type] * args.outputs, rng)

    network = EDNetwork(
        NetworkTopology(args.inputs, args.outputs, args.hidden, args.hidden2),
        flags=TopologyFlags(
            self_loops_disabled=args.self_loop_cutting,
            loop_cutting=args.loop_cutting,
            multi_layer=args.multi_layer,
            bidirectional_updates=args.weight_decrement,
            inhibitory_inputs=args.inhibitory_inputs,
        ),
        params=LearningParams(
            learning_rate=args.learning_rate,
            sigmoid_steepness=args.steepness,
            error_amplification=args.amplification,
            bias=args.bias,
            timesteps=args.timesteps,
        ),
        training=TrainingParams(
            max_epochs=args.max_epochs,
            convergence_error=args.residual,
            verbose=args.verbose,
        ),
        weight_range=args.weight_range,
        threshold_range=args.threshold_range,
        seed=args.seed,
    )

    converged = network.train(inputs, targets)

    if args.show_weights:
        print(format_weight_matrix(network.weights, network.topology))

    if args.plot:
        plot_training_results(network, inputs, targets, save_path=args.plot, show=False)

    return 0 if converged else 1


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except EDError as e:
        parser.error(str(e))


if __name__ == "__main__":
    raise SystemExit(main())
