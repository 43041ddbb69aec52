import logging

import numpy as np
import pytest


@pytest.fixture(autouse=True)
def setup_logging():
    """Keep engine logging quiet during tests."""
    logging.getLogger("ffnn").setLevel(logging.WARNING)
    yield
    logging.getLogger("ffnn").setLevel(logging.NOTSET)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
