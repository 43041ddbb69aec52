import numpy as np
import pytest

from config import CONFIG, make_config
from ffnn import Network, TrainBuffer
from train import build_network, evaluate, fit, init_weights, predict, squared_error, train_epoch
from utils.data import XOR_INPUTS, XOR_TARGETS, DataLoader, generate_parity_data


OR_INPUTS = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
OR_TARGETS = np.array([[0.0], [1.0], [1.0], [1.0]])


# =============================================================================
# Config
# =============================================================================

def test_make_config_applies_overrides():
    config = make_config(learning_rate=0.1, hidden_sizes=[3, 3])
    assert config["learning_rate"] == 0.1
    assert config["hidden_sizes"] == [3, 3]


def test_make_config_copies_hidden_sizes():
    config = make_config()
    config["hidden_sizes"].append(99)
    assert 99 not in CONFIG["hidden_sizes"]


def test_make_config_rejects_unknown_keys():
    with pytest.raises(KeyError, match="momentum"):
        make_config(momentum=0.9)


def test_build_network_from_config():
    network = build_network(make_config(input_size=3, hidden_sizes=[5, 4], output_size=2, transfer="tanh"))
    assert network.layer_sizes == [3, 5, 4, 2]
    assert network.transfer.name == "tanh"


# =============================================================================
# Data
# =============================================================================

def test_xor_data():
    np.testing.assert_array_equal(XOR_INPUTS, [[0, 0], [0, 1], [1, 0], [1, 1]])
    np.testing.assert_array_equal(XOR_TARGETS, [[0], [1], [1], [0]])


def test_parity_data_shapes_and_labels():
    inputs, targets = generate_parity_data(3)
    assert inputs.shape == (8, 3)
    assert targets.shape == (8, 1)
    np.testing.assert_array_equal(targets[:, 0], inputs.sum(axis=1) % 2)


def test_parity_data_needs_bits():
    with pytest.raises(ValueError):
        generate_parity_data(0)


def test_data_loader_in_order():
    loader = DataLoader(OR_INPUTS, OR_TARGETS, shuffle=False)
    pairs = list(loader)
    assert len(loader) == 4
    for (x, t), x_expected, t_expected in zip(pairs, OR_INPUTS, OR_TARGETS):
        np.testing.assert_array_equal(x, x_expected)
        np.testing.assert_array_equal(t, t_expected)


def test_data_loader_shuffle_is_permutation(rng):
    inputs, targets = generate_parity_data(4)
    loader = DataLoader(inputs, targets, shuffle=True, rng=rng)
    seen = sorted(tuple(x) for x, _ in loader)
    assert seen == sorted(tuple(x) for x in inputs)


def test_data_loader_length_mismatch():
    with pytest.raises(ValueError):
        DataLoader(OR_INPUTS, OR_TARGETS[:3])


# =============================================================================
# Training loop
# =============================================================================

def test_squared_error():
    assert squared_error([1.0, 0.0], [0.0, 0.0]) == pytest.approx(0.5)
    assert squared_error([0.5], [0.5]) == 0.0


def test_init_weights_is_reproducible():
    a = Network(2, [3, 1])
    b = Network(2, [3, 1])
    init_weights(a, 0.5, np.random.default_rng(11))
    init_weights(b, 0.5, np.random.default_rng(11))
    for layer_a, layer_b in zip(a, b):
        np.testing.assert_array_equal(layer_a.weights, layer_b.weights)
        assert layer_a.weights.any()


def test_train_epoch_reduces_loss_on_or(rng):
    network = Network(2, [1])
    init_weights(network, 0.5, rng)
    loader = DataLoader(OR_INPUTS, OR_TARGETS, shuffle=False)
    buffer = TrainBuffer()

    first = train_epoch(network, loader, 1.0, buffer)
    for _ in range(200):
        last = train_epoch(network, loader, 1.0, buffer)

    assert last < first
    assert evaluate(network, OR_INPUTS, OR_TARGETS) < 0.05
    np.testing.assert_array_equal(predict(network, OR_INPUTS), OR_TARGETS)


def test_empty_dataset_raises_value_error():
    network = Network(2, [1])
    empty_inputs = np.empty((0, 2))
    empty_targets = np.empty((0, 1))

    with pytest.raises(ValueError, match="at least one sample"):
        train_epoch(network, DataLoader(empty_inputs, empty_targets, shuffle=False), 0.5)
    with pytest.raises(ValueError, match="at least one sample"):
        evaluate(network, empty_inputs, empty_targets)


def test_evaluate_does_not_change_weights(rng):
    network = Network(2, [3, 1])
    init_weights(network, 1.0, rng)
    before = [layer.weights.copy() for layer in network]
    evaluate(network, XOR_INPUTS, XOR_TARGETS)
    for layer, w in zip(network, before):
        np.testing.assert_array_equal(layer.weights, w)


def test_fit_stops_early_at_target_loss(rng):
    network = Network(2, [2, 1])
    init_weights(network, 1.0, rng)
    config = make_config(epochs=100, target_loss=1.0, log_every=1)
    losses = fit(network, XOR_INPUTS, XOR_TARGETS, config, rng)
    assert len(losses) == 1


def test_fit_runs_full_budget_without_target(rng):
    network = Network(2, [2, 1])
    init_weights(network, 1.0, rng)
    config = make_config(epochs=7, target_loss=None)
    assert len(fit(network, XOR_INPUTS, XOR_TARGETS, config, rng)) == 7


def test_fit_learns_xor():
    config = make_config(learning_rate=1.0, epochs=4000, hidden_sizes=[4], init_scale=1.0, target_loss=0.005)

    solved = False
    for seed in range(5):
        rng = np.random.default_rng(seed)
        network = build_network(config)
        init_weights(network, config["init_scale"], rng)
        fit(network, XOR_INPUTS, XOR_TARGETS, config, rng)
        if np.array_equal(predict(network, XOR_INPUTS), XOR_TARGETS):
            solved = True
            break

    assert solved
