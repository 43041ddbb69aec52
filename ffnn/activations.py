"""
Transfer Functions from Scratch

A transfer function is the nonlinearity a neuron applies to its weighted
sum. For training we also need its derivative, and sometimes its inverse:

- transfer(x):   activated value y from the weighted sum x
- derivative(y): d(transfer)/dx, written in terms of the OUTPUT y
- inverse(y):    recover x from y (not every function has one)

Writing the derivative in terms of y is the classic backprop shortcut.
During training we already have every layer's output stored, so we never
need to keep (or recompute) the pre-activation sums:

    sigmoid:  dy/dx = y * (1 - y)
    tanh:     dy/dx = 1 - y^2

All callables work element-wise on Python floats and NumPy arrays.
"""

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .exceptions import UnsupportedOperation


@dataclass(frozen=True)
class TransferFunction:
    """
    A neuron nonlinearity as a plain value: three callables and a name.

    inverse is Optional. None means "this function has no inverse", which
    is an explicit, checkable state (see has_inverse / invert) rather than
    a call that blows up somewhere deep inside NumPy.
    """

    name: str
    transfer: Callable
    derivative: Callable
    inverse: Optional[Callable] = None

    @property
    def has_inverse(self):
        return self.inverse is not None

    def invert(self, y):
        """
        Recover the pre-activation value from an output.

        Raises:
            UnsupportedOperation: if this function has no inverse
        """
        if self.inverse is None:
            raise UnsupportedOperation(
                f"transfer function '{self.name}' has no inverse",
                {"transfer": self.name},
            )
        return self.inverse(y)

    def __repr__(self):
        return f"TransferFunction({self.name!r})"


# =============================================================================
# STANDARD TRANSFER FUNCTIONS
# =============================================================================

def _sigmoid(x):
    return 1.0 / (1.0 + np.exp(-x))


def _sigmoid_derivative(y):
    return y * (1.0 - y)


def _sigmoid_inverse(y):
    # logit: ln(y / (1 - y)), written as ln(-y / (y - 1))
    return np.log(-y / (y - 1.0))


def _heaviside(x):
    # Inclusive at zero: step(0) == 1
    return np.where(np.asarray(x) >= 0, 1.0, 0.0)


def _heaviside_derivative(y):
    # Not a real derivative. A constant 1 lets the step function go through
    # the same delta formula as the smooth functions (perceptron rule).
    return np.ones_like(y, dtype=float)


def _tanh_derivative(y):
    return 1.0 - y ** 2


SIGMOID = TransferFunction(
    name="sigmoid",
    transfer=_sigmoid,
    derivative=_sigmoid_derivative,
    inverse=_sigmoid_inverse,
)

HEAVISIDE = TransferFunction(
    name="heaviside",
    transfer=_heaviside,
    derivative=_heaviside_derivative,
    inverse=None,
)

TANH = TransferFunction(
    name="tanh",
    transfer=np.tanh,
    derivative=_tanh_derivative,
    inverse=np.arctanh,
)

TRANSFER_FUNCTIONS = {
    "sigmoid": SIGMOID,
    "logistic": SIGMOID,
    "heaviside": HEAVISIDE,
    "step": HEAVISIDE,
    "tanh": TANH,
}


def get_transfer_function(name):
    """
    Look up a standard transfer function by name.

    Args:
        name: One of the keys of TRANSFER_FUNCTIONS (case-insensitive),
              or a TransferFunction, which is returned unchanged

    Returns:
        TransferFunction
    """
    if isinstance(name, TransferFunction):
        return name
    try:
        return TRANSFER_FUNCTIONS[name.lower()]
    except KeyError:
        known = ", ".join(sorted(TRANSFER_FUNCTIONS))
        raise KeyError(f"unknown transfer function '{name}' (known: {known})") from None


# =============================================================================
# DERIVATIVE VERIFICATION UTILITIES
# =============================================================================

def numerical_derivative(tf, x, eps=1e-5):
    """
    Central-difference estimate of d(transfer)/dx at x.

        df/dx ~ (f(x + eps) - f(x - eps)) / (2 * eps)

    Central difference cancels the second-order error term, so it is much
    more accurate than the one-sided version for the same eps.

    Args:
        tf: TransferFunction to differentiate
        x: Point(s) at which to differentiate (scalar or array)
        eps: Perturbation size

    Returns:
        Numerical derivative, same shape as x
    """
    x = np.asarray(x, dtype=np.float64)
    return (tf.transfer(x + eps) - tf.transfer(x - eps)) / (2 * eps)


def check_derivative(tf, x, eps=1e-5, tolerance=1e-6):
    """
    Verify that tf.derivative(tf.transfer(x)) matches the numerical derivative.

    Only meaningful for smooth functions; the step function's derivative is
    a deliberate fiction and will not pass.

    Returns:
        True if the maximum absolute difference is within tolerance
    """
    x = np.asarray(x, dtype=np.float64)
    analytical = tf.derivative(tf.transfer(x))
    numerical = numerical_derivative(tf, x, eps)
    max_diff = float(np.max(np.abs(analytical - numerical)))
    return max_diff < tolerance


if __name__ == "__main__":
    xs = np.linspace(-3.0, 3.0, 7)

    for tf in (SIGMOID, TANH, HEAVISIDE):
        print(f"Testing {tf.name}...")
        ys = tf.transfer(xs)
        print(f"  Input:  {xs}")
        print(f"  Output: {ys}")
        if tf is not HEAVISIDE:
            print(f"  Derivative check: {check_derivative(tf, xs)}")
        if tf.has_inverse:
            print(f"  Inverse round trip: {np.allclose(tf.invert(ys), xs)}")
        else:
            print("  No inverse")
