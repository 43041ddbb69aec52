# Feed-forward neural network engine built from scratch on NumPy
# Layers compute forward and train with one online backpropagation step

from .exceptions import FFNNError, DimensionMismatch, UnsupportedOperation, EmptyTopology
from .activations import TransferFunction, SIGMOID, HEAVISIDE, TANH, get_transfer_function
from .layers import Layer
from .buffers import ComputeBuffer, TrainBuffer
from .network import Network
