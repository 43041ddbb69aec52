import runpy

import pytest


@pytest.mark.parametrize(
    "module,expected",
    [
        ("ffnn.activations", "Testing sigmoid"),
        ("ffnn.layers", "Testing Layer.train against a numerical gradient"),
        ("ffnn.buffers", "Testing TrainBuffer"),
        ("ffnn.network", "Testing Network.train"),
    ],
)
def test_module_self_check_runs(module, expected, capsys):
    runpy.run_module(module, run_name="__main__")
    out = capsys.readouterr().out
    assert expected in out


def test_layer_self_check_matches_numerical_gradient(capsys):
    runpy.run_module("ffnn.layers", run_name="__main__")
    out = capsys.readouterr().out
    line = next(row for row in out.splitlines() if "Max gradient difference" in row)
    assert float(line.split(":")[1]) < 1e-6
