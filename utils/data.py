"""
Data Utilities for Network Training

This module handles:
- Parity datasets (XOR and its n-bit generalisation)
- A data loader that feeds one (input, target) pair at a time

Parity is the classic test for a multi-layer network: no single layer can
separate odd from even bit counts, so solving it proves the hidden layers
and backpropagation actually work.
"""

import numpy as np


# =============================================================================
# PARITY DATA
# =============================================================================

def generate_parity_data(n):
    """
    Enumerate every n-bit input and its odd-parity label.

    Args:
        n: Number of input bits

    Returns:
        inputs: Array of shape (2^n, n), one bit pattern per row
        targets: Array of shape (2^n, 1), 1.0 where the row has an odd
                 number of ones, else 0.0

    Example:
        n = 2 gives XOR:
            [0, 0] -> 0
            [0, 1] -> 1
            [1, 0] -> 1
            [1, 1] -> 0
    """
    if n < 1:
        raise ValueError(f"need at least one bit, got {n}")

    combos = np.array(
        [list(map(int, format(i, f"0{n}b"))) for i in range(2 ** n)],
        dtype=np.float64,
    )
    targets = (np.sum(combos, axis=1) % 2).reshape(-1, 1)
    return combos, targets


XOR_INPUTS, XOR_TARGETS = generate_parity_data(2)


# =============================================================================
# DATA LOADER
# =============================================================================

class DataLoader:
    """
    Iterate over (input, target) pairs one sample at a time.

    Training is online (one weight update per sample), so there is no
    batching here, only optional shuffling every epoch.
    """

    def __init__(self, inputs, targets, shuffle=True, rng=None):
        """
        Initialize data loader.

        Args:
            inputs: Array of shape (num_samples, input_size)
            targets: Array of shape (num_samples, output_size)
            shuffle: Whether to shuffle data each epoch
            rng: numpy.random.Generator used for shuffling
        """
        self.inputs = np.asarray(inputs)
        self.targets = np.asarray(targets)
        if len(self.inputs) != len(self.targets):
            raise ValueError(
                f"inputs and targets differ in length: {len(self.inputs)} vs {len(self.targets)}"
            )
        self.shuffle = shuffle
        self.rng = rng if rng is not None else np.random.default_rng()
        self.num_samples = len(self.inputs)

    def __iter__(self):
        """Yield (input, target) rows."""
        indices = np.arange(self.num_samples)

        if self.shuffle:
            self.rng.shuffle(indices)

        for i in indices:
            yield self.inputs[i], self.targets[i]

    def __len__(self):
        """Number of samples per epoch."""
        return self.num_samples


if __name__ == "__main__":
    print("XOR data:")
    for x, t in zip(XOR_INPUTS, XOR_TARGETS):
        print(f"  {x} -> {t}")

    inputs, targets = generate_parity_data(3)
    print(f"\n3-bit parity: inputs {inputs.shape}, targets {targets.shape}")

    loader = DataLoader(inputs, targets, shuffle=True, rng=np.random.default_rng(0))
    print(f"Samples per epoch: {len(loader)}")
    for x, t in loader:
        print(f"  {x} -> {t}")
