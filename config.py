"""
Configuration for the from-scratch feed-forward network.

The defaults train a tiny 2-4-1 sigmoid network on XOR, which is small
enough to run in seconds on CPU while still needing a hidden layer and
real backpropagation to solve.
"""

CONFIG = {
    # ==========================================================================
    # MODEL ARCHITECTURE
    # ==========================================================================

    # Number of network inputs (2 for XOR)
    "input_size": 2,

    # Width of each hidden layer, first to last
    # An empty list gives a single-layer network (a perceptron)
    "hidden_sizes": [4],

    # Number of network outputs
    "output_size": 1,

    # Transfer function applied by every layer
    # One of: "sigmoid", "tanh", "heaviside"
    "transfer": "sigmoid",

    # Floating-point type of weights and scratch buffers
    "dtype": "float64",

    # ==========================================================================
    # TRAINING HYPERPARAMETERS
    # ==========================================================================

    # Step size for each online gradient-descent update
    "learning_rate": 0.5,

    # Maximum number of passes over the training set
    "epochs": 5000,

    # Weights and biases start uniform in [-init_scale, init_scale]
    # None uses 1 / sqrt(fan_in) per layer
    "init_scale": 1.0,

    # Seed for weight initialisation and shuffling
    "seed": 42,

    # Shuffle the sample order every epoch
    "shuffle": True,

    # Stop early once the mean epoch loss falls below this
    # None disables early stopping
    "target_loss": 0.005,

    # ==========================================================================
    # LOGGING
    # ==========================================================================

    # Log training progress every this many epochs
    "log_every": 500,
}


def make_config(**overrides):
    """
    Return a copy of CONFIG with some values replaced.

    Raises:
        KeyError: if an override names a key CONFIG does not have
    """
    unknown = set(overrides) - set(CONFIG)
    if unknown:
        raise KeyError(f"unknown config keys: {', '.join(sorted(unknown))}")
    config = dict(CONFIG)
    config["hidden_sizes"] = list(CONFIG["hidden_sizes"])
    config.update(overrides)
    return config
