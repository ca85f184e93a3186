# morphablemodel/harmonics.py
"""Synthetic shape model on a template mesh.

Builds a PcaModel without any training data: each principal component
displaces the template along its vertex normals, modulated by one of the
low-frequency eigenvectors of the mesh graph Laplacian. Handy for demos and
tests where a real morphable model is not at hand.
"""

from __future__ import annotations

import logging

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from morphablemodel.normalisation import normalise_pca_basis
from morphablemodel.pca_model import PcaModel

logger = logging.getLogger(__name__)

_EIGSH_SEED = 0


def _unique_edges(F: np.ndarray) -> np.ndarray:
    E = np.vstack([F[:, [0, 1]], F[:, [1, 2]], F[:, [2, 0]]])
    E = np.sort(E, axis=1)
    return np.unique(E, axis=0)


def uniform_graph_laplacian(F: np.ndarray, num_vertices: int) -> sp.csr_matrix:
    """Combinatorial Laplacian L = D - A of the triangle edge graph."""
    E = _unique_edges(np.asarray(F))
    rows = np.concatenate([E[:, 0], E[:, 1]])
    cols = np.concatenate([E[:, 1], E[:, 0]])
    data = np.ones(rows.shape[0], dtype=np.float64)

    A = sp.coo_matrix((data, (rows, cols)), shape=(num_vertices, num_vertices)).tocsr()
    d = np.asarray(A.sum(axis=1)).ravel()
    return sp.diags(d, format="csr") - A


def vertex_normals(V: np.ndarray, F: np.ndarray, eps: float = 1e-15) -> np.ndarray:
    """Area-weighted unit vertex normals, (m, 3)."""
    tri_n = np.cross(V[F[:, 1]] - V[F[:, 0]], V[F[:, 2]] - V[F[:, 0]])  # |tri_n| = 2*area
    N = np.zeros((V.shape[0], 3), dtype=np.float64)
    for k in range(3):
        np.add.at(N, F[:, k], tri_n)
    return N / np.maximum(np.linalg.norm(N, axis=1, keepdims=True), eps)


def harmonic_shape_model(
    V: np.ndarray,
    F: np.ndarray,
    num_components: int,
    *,
    scale: float = 0.1,
    rng: np.random.Generator | None = None,
) -> PcaModel:
    """
    PcaModel with mean = V and components
      u_k(v) = N(v) * phi_k(v)
    where phi_k is the k-th non-constant eigenvector of the graph Laplacian.
    The basis depends only on (V, F); ``rng`` only drives random sampling.
    Component k has standard deviation scale / (k + 1), i.e.
    eigenvalue (scale / (k + 1))**2, so low frequencies dominate.

    The eigenvectors are orthonormal in R^{3m} as long as every vertex has
    a well-defined normal.
    """
    V = np.asarray(V, dtype=np.float64)
    F = np.asarray(F, dtype=np.int64)
    m = V.shape[0]
    if num_components < 1 or num_components >= m - 1:
        raise ValueError(
            f"num_components must be in [1, {m - 2}] for a mesh with {m} vertices, "
            f"got {num_components}"
        )

    L = uniform_graph_laplacian(F, m)
    # fixed start vector: repeated eigenvalues otherwise come back in an arbitrary
    # rotation of their eigenspace on every call
    v0 = np.random.default_rng(_EIGSH_SEED).uniform(-1.0, 1.0, size=m)
    # shift-invert just below 0 keeps (L - sigma*I) positive definite
    vals, vecs = spla.eigsh(L, k=num_components + 1, sigma=-1e-3, which="LM", v0=v0)
    order = np.argsort(vals)
    phi = vecs[:, order[1:]]  # drop the constant mode

    N = vertex_normals(V, F)
    U = (N[:, None, :] * phi[:, :, None]).transpose(0, 2, 1).reshape(3 * m, num_components)
    U = U / np.maximum(np.linalg.norm(U, axis=0, keepdims=True), 1e-15)

    eigenvalues = (scale / np.arange(1, num_components + 1, dtype=np.float64)) ** 2
    logger.info(
        "Harmonic model: %d vertices, %d components, Laplacian eigenvalues %.3g..%.3g",
        m, num_components, vals[order[1]], vals[order[-1]],
    )
    return PcaModel(V.ravel(), normalise_pca_basis(U, eigenvalues), eigenvalues, F, rng=rng)
