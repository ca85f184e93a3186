# tests/test_sample_model.py
import os

import numpy as np

from experiments.sample_model import main


def test_sample_model_script(tmp_path):
    out = str(tmp_path / "samples")
    samples = main([
        "--subdivisions", "1", "--components", "4", "--num-samples", "2",
        "--seed", "0", "--out", out, "--plot", "--log-level", "WARNING",
    ])
    assert samples.shape == (2, 3 * 42)
    for name in ("mean.ply", "sample_000.ply", "sample_001.ply", "samples.npz", "displacement.png"):
        assert os.path.exists(os.path.join(out, name))

    data = np.load(os.path.join(out, "samples.npz"))
    assert data["coefficients"].shape == (2, 4)
    np.testing.assert_allclose(data["samples"], samples)


def test_sample_model_script_is_reproducible(tmp_path):
    args = ["--subdivisions", "1", "--components", "3", "--num-samples", "1",
            "--seed", "3", "--log-level", "WARNING"]
    s1 = main(args + ["--out", str(tmp_path / "a")])
    s2 = main(args + ["--out", str(tmp_path / "b")])
    np.testing.assert_allclose(s1, s2, atol=1e-12)
