"""
Reusable Scratch Buffers

Forward and backward passes need somewhere to put intermediate layer
activations. Allocating fresh arrays on every call is wasteful when the
same network is evaluated thousands of times, so the caller can hand in a
buffer and keep reusing it.

ComputeBuffer:
    Two growable arrays, A and B. Inference only ever needs the previous
    layer's output, so the network ping-pongs between them:

        input -> layer0 -> A -> layer1 -> B -> layer2 -> A -> ... -> output

TrainBuffer:
    One ComputeBuffer per layer. Training needs every layer's output at
    the same time, so slot k keeps layer k's activations in A and the
    error signal it sends to layer k-1 in B.

Both only ever grow. A buffer that was sized for a wide layer stays that
wide, so a later call with a narrower layer never reallocates.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


def _grow(array, size):
    """Return array if it holds at least size entries, else a larger copy."""
    if array.size >= size:
        return array
    grown = np.zeros(size, dtype=array.dtype)
    grown[:array.size] = array
    return grown


class ComputeBuffer:
    """Pair of growable scratch arrays, A and B."""

    def __init__(self, dtype=np.float64):
        self.dtype = np.dtype(dtype)
        self.A = np.zeros(0, dtype=self.dtype)
        self.B = np.zeros(0, dtype=self.dtype)

    def begin_a(self, size):
        """
        Make A hold at least size entries and return a view of the first size.

        The view is valid until the next call that grows A.
        """
        if self.A.size < size:
            logger.debug("growing buffer A from %d to %d", self.A.size, size)
            self.A = _grow(self.A, size)
        return self.A[:size]

    def begin_b(self, size):
        """Same as begin_a, for B."""
        if self.B.size < size:
            logger.debug("growing buffer B from %d to %d", self.B.size, size)
            self.B = _grow(self.B, size)
        return self.B[:size]

    def __repr__(self):
        return f"ComputeBuffer(A={self.A.size}, B={self.B.size}, dtype={self.dtype.name})"


class TrainBuffer(list):
    """
    List of ComputeBuffer, one slot per network layer.

    Slot k after a forward pass:
        A[:outputs_k]  layer k's activations
    Slot k after a backward pass:
        B[:inputs_k]   signal for layer k-1
    """

    def __init__(self, dtype=np.float64):
        super().__init__()
        self.dtype = np.dtype(dtype)

    def reserve(self, count):
        """Append empty slots until there are at least count."""
        while len(self) < count:
            self.append(ComputeBuffer(self.dtype))
        return self

    def __repr__(self):
        inner = ", ".join(repr(slot) for slot in self)
        return f"TrainBuffer([{inner}])"


if __name__ == "__main__":
    print("Testing ComputeBuffer...")
    buffer = ComputeBuffer()
    for size in (3, 5, 2):
        view = buffer.begin_a(size)
        print(f"  begin_a({size}): view {view.shape}, A holds {buffer.A.size}")
    view = buffer.begin_b(4)
    print(f"  begin_b(4): view {view.shape}, B holds {buffer.B.size}")

    print("\nTesting TrainBuffer...")
    slots = TrainBuffer().reserve(3)
    print(f"  After reserve(3): {len(slots)} slots")
    slots.reserve(2)
    print(f"  After reserve(2): {len(slots)} slots (never shrinks)")
    print(f"  {slots}")
