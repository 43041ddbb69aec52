#!/usr/bin/env python3
"""
Feed-Forward Network from Scratch - Main Entry Point

This script trains a small network on XOR to demonstrate that the
from-scratch engine works end to end.

What this demonstrates:
1. Fully connected layers with a flat weight + bias store
2. Pluggable transfer functions (sigmoid by default)
3. Forward evaluation with ping-pong scratch buffers
4. Online backpropagation reusing one training buffer
5. Solving a problem no single layer can solve

Usage:
    python main.py

Expected output:
- Loss should fall from ~0.13 to below 0.01
- All four XOR cases should be classified correctly
"""

import logging

import numpy as np

# Our from-scratch implementations
from config import CONFIG
from ffnn import ComputeBuffer
from train import build_network, init_weights, fit, evaluate, predict
from utils.data import XOR_INPUTS, XOR_TARGETS


def print_separator(title=""):
    """Print a visual separator."""
    print("\n" + "=" * 60)
    if title:
        print(f"  {title}")
        print("=" * 60)


def main():
    """Main training and evaluation loop."""
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print_separator("FEED-FORWARD NETWORK FROM SCRATCH")
    print("Training a small network to learn XOR")
    print("Using only Python and NumPy - no ML frameworks!")

    config = dict(CONFIG)
    rng = np.random.default_rng(config["seed"])

    # =========================================================================
    # Step 1: Build Model
    # =========================================================================
    print_separator("STEP 1: Building Model")

    network = build_network(config)
    init_weights(network, config["init_scale"], rng)

    print(f"\nTopology: {' -> '.join(str(s) for s in network.layer_sizes)}")
    print(f"Transfer function: {network.transfer.name}")
    num_params = sum(layer.num_weights for layer in network)
    print(f"Total trainable parameters: {num_params}")

    # =========================================================================
    # Step 2: Training
    # =========================================================================
    print_separator("STEP 2: Training")

    print(f"\n  Learning rate: {config['learning_rate']}")
    print(f"  Max epochs: {config['epochs']}")
    print(f"  Target loss: {config['target_loss']}")
    print("-" * 40)

    losses = fit(network, XOR_INPUTS, XOR_TARGETS, config, rng)

    print("-" * 40)
    print(f"\nTraining complete after {len(losses)} epochs")
    print(f"  Initial loss: {losses[0]:.4f}")
    print(f"  Final loss: {losses[-1]:.4f}")

    # =========================================================================
    # Step 3: Verification
    # =========================================================================
    print_separator("STEP 3: Verification")

    buffer = ComputeBuffer(network.dtype)
    print()
    for x, t in zip(XOR_INPUTS, XOR_TARGETS):
        y = network.compute(x, buffer=buffer)
        print(f"  {x.astype(int)} -> {y[0]:.4f}  (target {int(t[0])})")

    preds = predict(network, XOR_INPUTS, buffer=buffer)
    accuracy = np.mean(preds == XOR_TARGETS) * 100
    print(f"\n  Evaluation loss: {evaluate(network, XOR_INPUTS, XOR_TARGETS, buffer):.4f}")
    print(f"  Accuracy: {accuracy:.2f}%")

    print_separator("COMPLETE")


if __name__ == "__main__":
    main()
