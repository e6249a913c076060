"""
Tests for neuron types, activation, and the recurrent forward pass.
"""

import warnings

import numpy as np
import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from edla.base import NetworkTopology, TopologyFlags
from edla.errors import ConfigurationError
from edla.neurons import (
    assign_neuron_types,
    create_activation_state,
    distribute_inputs,
    run_forward_pass,
    sigmoid,
    sigmoid_derivative,
)
from edla.networks import initialize_network


XOR_TOPOLOGY = NetworkTopology(n_inputs=2, n_outputs=1, n_hidden=8)


class TestNeuronTypes:
    """Test suite for the excitatory/inhibitory type vector."""

    def test_length_covers_every_index(self):
        """Test that the vector has one entry per index 0 .. total_neurons + 1."""
        topo = XOR_TOPOLOGY
        types = assign_neuron_types(topo.total_neurons, topo.output_index)
        assert len(types) == topo.n_slots

    def test_alternation(self):
        """Test that neighbouring neurons have opposite types away from the output."""
        topo = NetworkTopology(n_inputs=3, n_hidden=9, n_hidden2=4)
        types = assign_neuron_types(topo.total_neurons, topo.output_index)

        for i in range(len(types) - 1):
            if topo.output_index in (i, i + 1):
                continue
            assert types[i] == -types[i + 1], f"Types at {i} and {i + 1} should alternate"

    def test_bias_pair_types(self):
        """Test that the bias pair is (+, -) and input pairs start excitatory."""
        types = assign_neuron_types(XOR_TOPOLOGY.total_neurons, XOR_TOPOLOGY.output_index)
        assert types[0] == 1.0
        assert types[1] == -1.0
        assert types[2] == 1.0
        assert types[3] == -1.0

    def test_output_forced_excitatory(self):
        """Test that an odd output index is still excitatory."""
        types = assign_neuron_types(10, 5)
        assert types[5] == 1.0, "Output neuron must be excitatory"
        assert types[4] == 1.0
        assert types[6] == 1.0
        assert types[3] == -1.0

    @pytest.mark.parametrize("n_inputs,n_hidden", [(1, 0), (2, 8), (4, 3), (8, 16)])
    def test_output_always_excitatory(self, n_inputs, n_hidden):
        """Test the output neuron type across topologies."""
        topo = NetworkTopology(n_inputs=n_inputs, n_hidden=n_hidden)
        types = assign_neuron_types(topo.total_neurons, topo.output_index)
        assert types[topo.output_index] == 1.0

    def test_type_vector_is_read_only(self):
        """Test that the type vector cannot be mutated after creation."""
        types = assign_neuron_types(13, 6)
        with pytest.raises(ValueError):
            types[0] = -1.0

    def test_output_index_out_of_range(self):
        """Test that an impossible output index is rejected."""
        with pytest.raises(ConfigurationError):
            assign_neuron_types(5, 7)


class TestActivation:
    """Test suite for the sigmoid and its ED derivative."""

    def test_sigmoid_midpoint(self):
        assert sigmoid(0.0, 0.4) == pytest.approx(0.5)

    def test_sigmoid_steepness(self):
        """Test that a smaller steepness gives a sharper transition."""
        assert sigmoid(0.1, 0.2) > sigmoid(0.1, 0.4) > 0.5

    def test_sigmoid_formula(self):
        x = 0.3
        expected = 1.0 / (1.0 + np.exp(-2.0 * x / 0.4))
        assert sigmoid(x, 0.4) == pytest.approx(expected)

    def test_sigmoid_saturates_without_warnings(self):
        """Test that extreme inputs saturate to exactly 0 and 1 silently."""
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            assert sigmoid(-1e6, 0.4) == 0.0
            assert sigmoid(1e6, 0.4) == 1.0

    def test_derivative_uses_absolute_output(self):
        """Test that the derivative is |o|(1 - |o|), not o(1 - o)."""
        assert sigmoid_derivative(0.5) == pytest.approx(0.25)
        assert sigmoid_derivative(-0.5) == pytest.approx(0.25)
        assert sigmoid_derivative(0.2) == pytest.approx(0.16)

    def test_derivative_vanishes_at_saturation(self):
        """Test that saturated outputs give a derivative of exactly zero."""
        result = sigmoid_derivative(np.array([0.0, 1.0, -1.0]))
        assert np.all(result == 0.0)


class TestForwardPass:
    """Test suite for input distribution and recurrent settling."""

    def _state(self, flags=None, seed=3):
        return initialize_network(XOR_TOPOLOGY, flags=flags, seed=seed)

    def test_bias_slots_hold_bias(self):
        state = create_activation_state(XOR_TOPOLOGY, 0.8)
        assert np.all(state.inputs[:, 0] == 0.8)
        assert np.all(state.inputs[:, 1] == 0.8)

    def test_inputs_distributed_to_pairs(self):
        """Test that both neurons of a pair receive the same raw value."""
        previous = create_activation_state(XOR_TOPOLOGY, 0.8).inputs
        inputs = distribute_inputs(XOR_TOPOLOGY, previous, [0.25, 0.75])

        assert inputs[0, 2] == inputs[0, 3] == 0.25
        assert inputs[0, 4] == inputs[0, 5] == 0.75
        assert inputs[0, 0] == 0.8, "Bias slots must not be touched"

    def test_distribution_does_not_mutate_previous(self):
        previous = create_activation_state(XOR_TOPOLOGY, 0.8).inputs
        before = previous.copy()
        distribute_inputs(XOR_TOPOLOGY, previous, [1.0, 1.0])
        assert np.array_equal(previous, before)

    def test_determinism(self):
        """Test that identical weights and inputs give bit-identical outputs."""
        state = self._state()
        runs = [
            run_forward_pass(XOR_TOPOLOGY, state.weights, state.activation.inputs,
                             [1.0, 0.0], 2, True, 0.4)
            for _ in range(2)
        ]
        assert np.array_equal(runs[0].outputs, runs[1].outputs)
        assert np.array_equal(runs[0].inputs, runs[1].inputs)

    def test_outputs_in_unit_interval(self):
        state = self._state()
        result = run_forward_pass(XOR_TOPOLOGY, state.weights, state.activation.inputs,
                                  [1.0, 1.0], 2, True, 0.4)
        settled = result.outputs[:, XOR_TOPOLOGY.output_index:]
        assert np.all((settled >= 0.0) & (settled <= 1.0))

    def test_feedback_copies_outputs_to_inputs(self):
        """Test that hidden/output inputs hold the last sweep's outputs."""
        state = self._state()
        first = XOR_TOPOLOGY.output_index
        result = run_forward_pass(XOR_TOPOLOGY, state.weights, state.activation.inputs,
                                  [0.0, 1.0], 3, True, 0.4)

        assert np.array_equal(result.inputs[:, first:], result.outputs[:, first:])
        assert result.inputs[0, 4] == result.inputs[0, 5] == 1.0, \
            "Input slots must not be overwritten by feedback"

    def test_single_timestep_matches_direct_pass(self):
        """Test that timesteps=1 equals one direct weighted sum plus sigmoid."""
        state = self._state()
        topo = XOR_TOPOLOGY
        first = topo.output_index

        x0 = distribute_inputs(topo, state.activation.inputs, [1.0, 0.0])[0]
        x0[first:] = 0.0
        expected = sigmoid(state.weights[0, first:, :] @ x0, 0.4)

        result = run_forward_pass(topo, state.weights, state.activation.inputs,
                                  [1.0, 0.0], 1, True, 0.4)
        np.testing.assert_allclose(result.outputs[0, first:], expected, rtol=1e-12, atol=0)

    def test_single_timestep_without_loop_cutting(self):
        """Test the direct-pass equivalence when stale state feeds the first sweep."""
        flags = TopologyFlags(loop_cutting=False)
        state = self._state(flags)
        topo = XOR_TOPOLOGY
        first = topo.output_index

        previous = state.activation.inputs.copy()
        previous[:, first:] = np.linspace(0.1, 0.9, topo.n_slots - first)
        x0 = distribute_inputs(topo, previous, [0.0, 1.0])[0]
        expected = sigmoid(state.weights[0, first:, :] @ x0, 0.4)

        result = run_forward_pass(topo, state.weights, previous, [0.0, 1.0], 1, False, 0.4)
        np.testing.assert_allclose(result.outputs[0, first:], expected, rtol=1e-12, atol=0)

    def test_loop_cutting_clears_stale_state(self):
        """Test that previous hidden activity has no effect with loop cutting."""
        state = self._state()
        first = XOR_TOPOLOGY.output_index
        stale = state.activation.inputs.copy()
        stale[:, first:] = 0.9

        clean = run_forward_pass(XOR_TOPOLOGY, state.weights, state.activation.inputs,
                                 [1.0, 1.0], 2, True, 0.4)
        dirty = run_forward_pass(XOR_TOPOLOGY, state.weights, stale,
                                 [1.0, 1.0], 2, True, 0.4)
        assert np.array_equal(clean.outputs, dirty.outputs)

    def test_stale_state_carries_without_loop_cutting(self):
        """Test that hidden activity carries across patterns when loops are kept."""
        state = self._state(TopologyFlags(loop_cutting=False))
        first = XOR_TOPOLOGY.output_index
        stale = state.activation.inputs.copy()
        stale[:, first:] = 0.9

        clean = run_forward_pass(XOR_TOPOLOGY, state.weights, state.activation.inputs,
                                 [1.0, 1.0], 2, False, 0.4)
        dirty = run_forward_pass(XOR_TOPOLOGY, state.weights, stale,
                                 [1.0, 1.0], 2, False, 0.4)
        assert not np.array_equal(clean.outputs, dirty.outputs)

    def test_output_networks_are_independent(self):
        """Test that each output network settles on its own weights."""
        topo = NetworkTopology(n_inputs=2, n_outputs=2, n_hidden=4)
        state = initialize_network(topo, seed=5)
        result = run_forward_pass(topo, state.weights, state.activation.inputs,
                                  [1.0, 0.0], 2, True, 0.4)
        predictions = result.predictions(topo)

        assert predictions.shape == (2,)
        assert predictions[0] != predictions[1]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
