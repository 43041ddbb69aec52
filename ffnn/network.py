"""
Feed-Forward Network from Scratch

A network is an ordered chain of fully connected layers. Layer k+1 takes
exactly as many inputs as layer k produces outputs; this is guaranteed by
building the chain from a list of layer widths:

    Network(2, [3, 1])   ->   2 inputs -> Layer(2, 3) -> Layer(3, 1)

Inference (compute):
    Only the previous layer's output is ever needed, so two scratch
    arrays suffice however deep the network is. Layer 0 writes into A,
    the next into B, the next into A again, and so on. The last layer
    writes straight into the caller's output.

Training (train):
    1. Forward pass that KEEPS every layer's output (slot k, array A).
    2. Backward pass from the last layer to the first. Each layer trains
       on its own stored input/output and writes the signal for the
       layer before it into its slot's B array. That array is then the
       previous layer's target.

        target ─► [layer N-1] ─► B[N-1] ─► [layer N-2] ─► ... ─► [layer 0]
"""

import logging

import numpy as np

from .activations import SIGMOID, get_transfer_function
from .buffers import ComputeBuffer, TrainBuffer
from .exceptions import DimensionMismatch, EmptyTopology
from .layers import Layer

logger = logging.getLogger(__name__)


class Network:
    """
    Ordered chain of Layers sharing one transfer function.

    Scratch memory is passed in explicitly (ComputeBuffer for compute,
    TrainBuffer for train). If omitted, a temporary one is created for
    the call.
    """

    def __init__(self, inputs, nodes, transfer=SIGMOID, dtype=np.float64):
        """
        Build the layer chain.

        Args:
            inputs: Number of network inputs (first layer's input size)
            nodes: Output width of each layer, first to last
            transfer: TransferFunction (or its name) used by every layer
            dtype: NumPy floating-point type of weights and scratch buffers
        """
        nodes = list(nodes)
        if not nodes:
            raise EmptyTopology("network needs at least one layer", {"inputs": inputs})

        self.transfer = get_transfer_function(transfer)
        self.dtype = np.dtype(dtype)

        self._layers = []
        prev = inputs
        for size in nodes:
            self._layers.append(Layer(prev, size, self.transfer, self.dtype))
            prev = size

        logger.debug(
            "built network %s with %s transfer",
            " -> ".join(str(s) for s in self.layer_sizes),
            self.transfer.name,
        )

    # -------------------------------------------------------------------------
    # Topology
    # -------------------------------------------------------------------------
    @property
    def inputs(self):
        return self._layers[0].inputs

    @property
    def outputs(self):
        return self._layers[-1].outputs

    @property
    def num_layers(self):
        return len(self._layers)

    @property
    def layer_sizes(self):
        """[inputs, width of layer 0, width of layer 1, ...]"""
        return [self.inputs] + [layer.outputs for layer in self._layers]

    def layer(self, i):
        return self._layers[i]

    def randomize(self, scale=None, rng=None):
        """Randomize every layer in order from one generator."""
        if rng is None:
            rng = np.random.default_rng()
        for layer in self._layers:
            layer.randomize(scale, rng)

    # -------------------------------------------------------------------------
    # Inference
    # -------------------------------------------------------------------------
    def compute(self, input, output=None, buffer=None):
        """
        Evaluate the network.

        Args:
            input: Sequence of length inputs
            output: Writable sequence of length outputs, or None to allocate
            buffer: ComputeBuffer to reuse, or None for a temporary one

        Returns:
            output
        """
        x = np.asarray(input, dtype=self.dtype)
        if len(x) != self.inputs:
            raise DimensionMismatch("input", self.inputs, len(x))
        if output is None:
            output = np.empty(self.outputs, dtype=self.dtype)
        elif len(output) != self.outputs:
            raise DimensionMismatch("output", self.outputs, len(output))

        first = self._layers[0]
        last = self._layers[-1]

        # Single layer: no scratch needed
        if first is last:
            return first.compute(x, output)

        if buffer is None:
            buffer = ComputeBuffer(self.dtype)

        # =====================================================================
        # Ping-pong through the scratch arrays
        # =====================================================================
        # Layer 0 always lands in A
        current = first.compute(x, buffer.begin_a(first.outputs))

        # Interior layers alternate B, A, B, ...
        into_b = True
        for layer in self._layers[1:-1]:
            if into_b:
                scratch = buffer.begin_b(layer.outputs)
            else:
                scratch = buffer.begin_a(layer.outputs)
            current = layer.compute(current, scratch)
            into_b = not into_b

        # Last layer goes straight to the caller
        last.compute(current, output)
        return output

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------
    def train(self, rate, input, target, buffer=None):
        """
        One online backpropagation step on a single (input, target) pair.

        Args:
            rate: Learning rate
            input: Sequence of length inputs
            target: Sequence of length outputs
            buffer: TrainBuffer to reuse, or None for a temporary one

        Returns:
            The network output from the forward pass (before the update),
            as a view into the buffer
        """
        x = np.asarray(input, dtype=self.dtype)
        t = np.asarray(target, dtype=self.dtype)
        if len(x) != self.inputs:
            raise DimensionMismatch("input", self.inputs, len(x))
        if len(t) != self.outputs:
            raise DimensionMismatch("target", self.outputs, len(t))

        if buffer is None:
            buffer = TrainBuffer(self.dtype)
        buffer.reserve(len(self._layers))

        # =====================================================================
        # Forward pass, keeping every layer's output
        # =====================================================================
        activations = []
        prev = x
        for layer, slot in zip(self._layers, buffer):
            prev = layer.compute(prev, slot.begin_a(layer.outputs))
            activations.append(prev)

        # =====================================================================
        # Backward pass, last layer first
        # =====================================================================
        # The last layer aims at the external target; every earlier layer
        # aims at the back signal of the layer after it.
        signal = t
        for k in range(len(self._layers) - 1, -1, -1):
            layer = self._layers[k]
            layer_input = activations[k - 1] if k > 0 else x
            back = buffer[k].begin_b(layer.inputs)
            layer.train(rate, layer_input, activations[k], signal, back)
            signal = back

        return activations[-1]

    # -------------------------------------------------------------------------
    # Convenience
    # -------------------------------------------------------------------------
    def __len__(self):
        return len(self._layers)

    def __getitem__(self, idx):
        return self._layers[idx]

    def __iter__(self):
        return iter(self._layers)

    def __repr__(self):
        inner = ",\n  ".join(repr(layer) for layer in self._layers)
        return f"Network(\n  {inner}\n)"


if __name__ == "__main__":
    rng = np.random.default_rng(0)

    print("Testing Network.compute...")
    network = Network(3, [4, 5, 2])
    network.randomize(1.0, rng)
    x = rng.normal(size=3)
    buffer = ComputeBuffer()
    y = network.compute(x, buffer=buffer)
    print(f"  Topology: {network.layer_sizes}")
    print(f"  Input: {x}")
    print(f"  Output: {y}")
    print(f"  {buffer}")

    print("\nTesting Network.train...")
    t = np.array([1.0, 0.0])
    slots = TrainBuffer()
    for step in range(5):
        out = network.train(0.5, x, t, slots)
        print(f"  Step {step}: loss {0.5 * np.sum((out - t) ** 2):.6f}")
    print(f"  {slots}")
