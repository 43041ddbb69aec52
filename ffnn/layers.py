"""
Fully Connected Layer from Scratch

A layer is one affine transform followed by a pointwise nonlinearity:

    y[o] = transfer(bias[o] + sum_i x[i] * W[i, o])

Weight layout:
    All parameters live in ONE flat array of length (inputs + 1) * outputs.
    Each output unit owns a contiguous row: its bias first, then one weight
    per input.

        index of bias(o)       = o * (inputs + 1)
        index of weight(i, o)  = o * (inputs + 1) + i + 1

    Viewed as a matrix of shape (outputs, inputs + 1), column 0 holds the
    biases and columns 1.. hold the input weights. Both views share memory
    with the flat store, so updates through either are visible in both.

Training (one online gradient-descent step):
    For each output unit o:
        delta[o] = derivative(y[o]) * (y[o] - target[o])
        bias(o) -= rate * delta[o]
        W[i, o] -= rate * delta[o] * x[i]

    And the signal handed to the previous layer:
        back[i] = x[i] - sum_o delta[o] * W[i, o]     (weights BEFORE update)

    Note the back signal is offset by the input. The previous layer uses it
    as its *target*, so its own (output - target) becomes exactly
    sum_o delta[o] * W[i, o], which is the usual backpropagated error.
"""

import operator

import numpy as np

from .activations import SIGMOID, get_transfer_function
from .exceptions import DimensionMismatch, EmptyTopology


def _check_length(what, seq, expected):
    actual = len(seq)
    if actual != expected:
        raise DimensionMismatch(what, expected, actual)


class Layer:
    """
    Fully connected layer with a flat weight + bias store.

    Inputs and outputs can be any 1-D sequences of the right length.
    Outputs (and back buffers) must support slice assignment: NumPy arrays,
    views into larger arrays, or plain lists.
    """

    def __init__(self, inputs, outputs, transfer=SIGMOID, dtype=np.float64):
        """
        Initialize the layer with all weights and biases set to zero.

        Args:
            inputs: Number of input values
            outputs: Number of output units
            transfer: TransferFunction (or its name) applied to every unit
            dtype: NumPy floating-point type of the weight store
        """
        inputs = operator.index(inputs)
        outputs = operator.index(outputs)
        if inputs < 1 or outputs < 1:
            raise EmptyTopology(
                f"layer sizes must be positive, got {inputs} -> {outputs}",
                {"inputs": inputs, "outputs": outputs},
            )

        self.in_size = inputs
        self.out_size = outputs
        self.transfer = get_transfer_function(transfer)
        self.dtype = np.dtype(dtype)

        self._w = np.zeros((inputs + 1) * outputs, dtype=self.dtype)

    # -------------------------------------------------------------------------
    # Topology
    # -------------------------------------------------------------------------
    @property
    def inputs(self):
        return self.in_size

    @property
    def outputs(self):
        return self.out_size

    @property
    def num_weights(self):
        return self._w.size

    @property
    def weights(self):
        """The flat weight store itself (writable)."""
        return self._w

    @property
    def weight_matrix(self):
        """(outputs, inputs + 1) view of the store; column 0 is the bias."""
        # Row o = [bias(o), W[0, o], ..., W[inputs-1, o]]
        return self._w.reshape(self.out_size, self.in_size + 1)

    # -------------------------------------------------------------------------
    # Parameter access
    # -------------------------------------------------------------------------
    def _index(self, *index):
        if len(index) == 1:
            i = operator.index(index[0])
            if not 0 <= i < self._w.size:
                raise IndexError(f"weight index {i} out of range [0, {self._w.size})")
            return i
        if len(index) == 2:
            in_i = operator.index(index[0])
            out_i = operator.index(index[1])
            if not 0 <= in_i < self.in_size:
                raise IndexError(f"input index {in_i} out of range [0, {self.in_size})")
            if not 0 <= out_i < self.out_size:
                raise IndexError(f"output index {out_i} out of range [0, {self.out_size})")
            return out_i * (self.in_size + 1) + in_i + 1
        raise TypeError(f"expected (index) or (in, out), got {len(index)} indices")

    def _bias_index(self, out_i):
        out_i = operator.index(out_i)
        if not 0 <= out_i < self.out_size:
            raise IndexError(f"output index {out_i} out of range [0, {self.out_size})")
        return out_i * (self.in_size + 1)

    def weight(self, *index):
        """
        Read a weight.

            weight(i)        -> flat store entry i
            weight(in, out)  -> weight from input `in` to output `out`
        """
        return self._w[self._index(*index)]

    def set_weight(self, *args):
        """
        Write a weight.

            set_weight(i, value)
            set_weight(in, out, value)
        """
        if len(args) < 2:
            raise TypeError("set_weight needs an index and a value")
        self._w[self._index(*args[:-1])] = args[-1]

    def bias(self, out_i):
        return self._w[self._bias_index(out_i)]

    def set_bias(self, out_i, value):
        self._w[self._bias_index(out_i)] = value

    def randomize(self, scale=None, rng=None):
        """
        Refill every weight and bias in place from U(-scale, scale).

        Zero-initialised layers are perfectly symmetric: every hidden unit
        receives the same update and they never diverge. Random values
        break that symmetry.

        Args:
            scale: Half-width of the uniform range (default 1 / sqrt(inputs))
            rng: numpy.random.Generator (default: a fresh unseeded one)
        """
        if scale is None:
            scale = 1.0 / np.sqrt(self.in_size)
        if rng is None:
            rng = np.random.default_rng()
        self._w[:] = rng.uniform(-scale, scale, size=self._w.size)

    # -------------------------------------------------------------------------
    # Forward pass
    # -------------------------------------------------------------------------
    def compute(self, input, output=None):
        """
        Compute the layer's activations.

        Args:
            input: Sequence of length inputs
            output: Writable sequence of length outputs, or None to allocate

        Returns:
            output
        """
        x = np.asarray(input, dtype=self.dtype)
        _check_length("input", x, self.in_size)
        if output is None:
            output = np.empty(self.out_size, dtype=self.dtype)
        else:
            _check_length("output", output, self.out_size)

        matrix = self.weight_matrix

        # =====================================================================
        # Step 1: Affine part, one pre-activation per output unit
        # =====================================================================
        # (outputs, inputs) @ (inputs,) + (outputs,) -> (outputs,)
        z = matrix[:, 1:] @ x + matrix[:, 0]

        # =====================================================================
        # Step 2: Nonlinearity, written in place so buffer views stay valid
        # =====================================================================
        output[:] = self.transfer.transfer(z)
        return output

    # -------------------------------------------------------------------------
    # Training step
    # -------------------------------------------------------------------------
    def train(self, rate, input, output, target, back):
        """
        One gradient-descent step on this layer.

        Args:
            rate: Step size
            input: The input this layer saw in its last forward pass
            output: The output it produced for that input
            target: Desired output (or the back signal of the next layer)
            back: Writable sequence of length inputs; receives the signal
                  for the previous layer

        Every length is validated before anything is written.
        """
        x = np.asarray(input, dtype=self.dtype)
        y = np.asarray(output, dtype=self.dtype)
        t = np.asarray(target, dtype=self.dtype)
        _check_length("input", x, self.in_size)
        _check_length("output", y, self.out_size)
        _check_length("target", t, self.out_size)
        _check_length("back", back, self.in_size)

        matrix = self.weight_matrix
        weights = matrix[:, 1:]
        bias = matrix[:, 0]

        # =====================================================================
        # Per-unit error term
        # =====================================================================
        # derivative is taken of the OUTPUT y, not the pre-activation
        # (outputs,) * (outputs,) -> (outputs,)
        delta = self.transfer.derivative(y) * (y - t)

        # =====================================================================
        # Back signal: seeded with the input, minus each unit's weighted delta
        # =====================================================================
        # Uses the weights as they were before this step
        # (inputs, outputs) @ (outputs,) -> (inputs,)
        propagated = x - weights.T @ delta

        # =====================================================================
        # Gradient step
        # =====================================================================
        # Computed before back is written since back may alias input
        # dL/dW[o, i] = delta[o] * x[i]  ->  outer product (outputs, inputs)
        update = rate * np.outer(delta, x)

        # back is written before the weights change: if it is read-only
        # (a tuple, a frozen array) the layer is left untouched
        back[:] = propagated

        # In place: both are views into the flat store
        weights -= update
        # dL/db[o] = delta[o]
        bias -= rate * delta

    def __repr__(self):
        return (
            f"Layer({self.in_size} -> {self.out_size}, "
            f"transfer={self.transfer.name}, dtype={self.dtype.name})"
        )


if __name__ == "__main__":
    rng = np.random.default_rng(0)

    print("Testing Layer.compute...")
    layer = Layer(3, 2)
    layer.randomize(1.0, rng)
    x = rng.normal(size=3)
    y = layer.compute(x)
    print(f"  Weight store shape: {layer.weights.shape}")
    print(f"  Weight matrix shape: {layer.weight_matrix.shape}")
    print(f"  Input: {x}")
    print(f"  Output: {y}")

    print("\nTesting Layer.train against a numerical gradient...")
    t = np.array([0.0, 1.0])
    eps = 1e-6

    def loss():
        return 0.5 * np.sum((layer.compute(x) - t) ** 2)

    grad = np.zeros(layer.num_weights)
    for j in range(layer.num_weights):
        original = layer.weights[j]
        layer.weights[j] = original + eps
        plus = loss()
        layer.weights[j] = original - eps
        minus = loss()
        layer.weights[j] = original
        grad[j] = (plus - minus) / (2 * eps)

    rate = 0.1
    before = layer.weights.copy()
    back = np.empty(3)
    layer.train(rate, x, y, t, back)
    step = (before - layer.weights) / rate
    print(f"  Max gradient difference: {np.max(np.abs(step - grad)):.2e}")
    print(f"  Back signal: {back}")
    print(f"  Loss before: {0.5 * np.sum((y - t) ** 2):.6f}, after: {loss():.6f}")
