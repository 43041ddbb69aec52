"""
Training Utilities from Scratch

This module implements:
- Squared error loss: what each online update is minimising
- Weight initialisation: breaking the symmetry of zero weights
- Training loop: one pass over the data, then many passes with logging
- Evaluation and prediction helpers

The per-sample update itself lives in Network.train; everything here is
bookkeeping around it.
"""

import logging

import numpy as np

from ffnn import Network, TrainBuffer, ComputeBuffer
from utils.data import DataLoader

logger = logging.getLogger(__name__)


def squared_error(output, target):
    """
    Half the summed squared difference between output and target.

        L = 0.5 * sum((y - t)^2)

    The 0.5 cancels the 2 from differentiating, so dL/dy = y - t, which is
    exactly the (output - target) factor in each layer's delta.
    """
    diff = np.asarray(output, dtype=np.float64) - np.asarray(target, dtype=np.float64)
    return 0.5 * float(np.sum(diff ** 2))


def build_network(config):
    """Construct a Network from a config dict (see config.py)."""
    nodes = list(config["hidden_sizes"]) + [config["output_size"]]
    return Network(
        config["input_size"],
        nodes,
        transfer=config["transfer"],
        dtype=np.dtype(config["dtype"]),
    )


def init_weights(network, scale=None, rng=None):
    """
    Randomize every weight and bias of the network in place.

    Args:
        network: Network to initialise
        scale: Half-width of the uniform range (None: 1 / sqrt(fan_in))
        rng: numpy.random.Generator for reproducibility
    """
    network.randomize(scale, rng)


def train_epoch(network, data_loader, rate, buffer=None):
    """
    Train for one epoch, one sample at a time.

    The loss reported for each sample is measured on the output of the
    forward pass inside Network.train, i.e. BEFORE that sample's update.

    Args:
        network: Network to train
        data_loader: DataLoader yielding (input, target) pairs
        rate: Learning rate
        buffer: TrainBuffer reused for every sample (created if None)

    Returns:
        Mean squared error over the epoch
    """
    if buffer is None:
        buffer = TrainBuffer(network.dtype)

    total_loss = 0.0
    num_samples = 0

    for x, t in data_loader:
        output = network.train(rate, x, t, buffer)
        total_loss += squared_error(output, t)
        num_samples += 1

    if num_samples == 0:
        raise ValueError("train_epoch needs at least one sample")

    return total_loss / num_samples


def evaluate(network, inputs, targets, buffer=None):
    """
    Mean squared error over a dataset, without touching the weights.

    Returns:
        Mean squared error
    """
    if len(inputs) == 0:
        raise ValueError("evaluate needs at least one sample")

    if buffer is None:
        buffer = ComputeBuffer(network.dtype)

    output = np.empty(network.outputs, dtype=network.dtype)
    total_loss = 0.0
    for x, t in zip(inputs, targets):
        network.compute(x, output, buffer)
        total_loss += squared_error(output, t)

    return total_loss / len(inputs)


def predict(network, inputs, threshold=0.5, buffer=None):
    """
    Binary predictions: 1 where an output reaches the threshold, else 0.

    Returns:
        Integer array of shape (num_samples, outputs)
    """
    if buffer is None:
        buffer = ComputeBuffer(network.dtype)

    outputs = np.empty((len(inputs), network.outputs), dtype=network.dtype)
    for row, x in zip(outputs, inputs):
        network.compute(x, row, buffer)

    return (outputs >= threshold).astype(int)


def fit(network, inputs, targets, config, rng=None):
    """
    Train until the epoch budget runs out or the loss is low enough.

    One TrainBuffer is reused for the whole run, so after the first
    sample no scratch memory is allocated.

    Args:
        network: Network to train (weights should already be initialised)
        inputs: Array of shape (num_samples, inputs)
        targets: Array of shape (num_samples, outputs)
        config: Config dict (learning_rate, epochs, shuffle, log_every,
                target_loss)
        rng: numpy.random.Generator for shuffling

    Returns:
        List of mean epoch losses
    """
    data_loader = DataLoader(inputs, targets, shuffle=config["shuffle"], rng=rng)
    buffer = TrainBuffer(network.dtype)

    epochs = config["epochs"]
    log_every = max(1, config["log_every"])
    target_loss = config["target_loss"]

    losses = []
    for epoch in range(epochs):
        avg_loss = train_epoch(network, data_loader, config["learning_rate"], buffer)
        losses.append(avg_loss)

        if epoch % log_every == 0 or epoch == epochs - 1:
            logger.info("epoch %5d/%d  loss %.6f", epoch, epochs, avg_loss)

        if target_loss is not None and avg_loss < target_loss:
            logger.info("reached target loss %.6f at epoch %d", target_loss, epoch)
            break

    return losses
