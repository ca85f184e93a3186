# experiments/visualize.py
import os
import numpy as np

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.tri import Triangulation

from mesh import Mesh


def _pca_project(V: np.ndarray) -> np.ndarray:
    """Project 3D vertices to 2D via their top-2 principal directions."""
    X = V - V.mean(0, keepdims=True)
    _, _, VT = np.linalg.svd(X, full_matrices=False)
    B = VT[:2]  # (2x3)
    return X @ B.T


def plot_displacement(
    mean: Mesh,
    samples: list[Mesh],
    titles: list[str],
    save_path: str,
    *,
    projection: str = "pca",
):
    """
    One panel per sample: the mean's triangulation coloured by how far each
    vertex of the sample moved away from the mean.
    """
    XY = mean.V[:, :2] if projection == "xy" else _pca_project(mean.V)
    tri = Triangulation(XY[:, 0], XY[:, 1], triangles=mean.F)

    disp = [np.linalg.norm(s.V - mean.V, axis=1) for s in samples]
    vmax = max(float(d.max()) for d in disp) if disp else 1.0
    vmax = max(vmax, 1e-12)

    fig, axes = plt.subplots(1, len(samples), figsize=(4.5 * len(samples), 4.5), squeeze=False)
    for ax, d, title in zip(axes[0], disp, titles):
        tpc = ax.tripcolor(tri, d, shading="gouraud", cmap="viridis", vmin=0.0, vmax=vmax)
        ax.set_aspect("equal", adjustable="box")
        ax.set_title(title)
        ax.set_axis_off()
    fig.colorbar(tpc, ax=axes[0].tolist(), shrink=0.8, label="|x - mean|")

    out_dir = os.path.dirname(save_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    plt.savefig(save_path, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return save_path
