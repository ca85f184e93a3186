# morphablemodel/pca_model.py
"""PCA shape model of a deformable triangle mesh.

The model holds a mean shape, the PCA basis (normalised and unnormalised),
the eigenvalues and the triangle list of the mesh. Instances are generated
at the mean, from explicit coefficients, or from random coefficient draws.

Data layout: shape vectors are flat, [x0 y0 z0 x1 y1 z1 ...], so rows
[3v, 3v+3) of the mean and of both bases belong to vertex v.
"""

from __future__ import annotations

import logging
import operator
from typing import Sequence

import numpy as np

from morphablemodel.normalisation import unnormalise_pca_basis

logger = logging.getLogger(__name__)


def _read_only(a: np.ndarray) -> np.ndarray:
    a.flags.writeable = False
    return a


class PcaModel:
    """
    A PCA model consisting of:
      mean               : (3m,)   mean shape, m = number of vertices
      normalised basis   : (3m, n) eigenvectors scaled by sqrt(eigenvalue)
      unnormalised basis : (3m, n) unit eigenvectors, derived at construction
      eigenvalues        : (n,)    variances in PCA space
      triangles          : (t, 3)  vertex indices assembling the mesh

    All stored arrays are read-only. The only mutable state is the random
    generator used by draw_random_sample(); pass ``rng`` there (or at
    construction) for reproducible draws or when sampling from several
    threads.
    """

    def __init__(
        self,
        mean,
        normalised_basis,
        eigenvalues,
        triangles,
        rng: np.random.Generator | None = None,
    ):
        mean = np.array(mean, dtype=np.float64).ravel()
        basis = np.array(normalised_basis, dtype=np.float64)
        if basis.ndim == 1:
            basis = basis[:, None]
        eigenvalues = np.array(eigenvalues, dtype=np.float64).ravel()

        if basis.ndim != 2:
            raise ValueError(f"PCA basis must be 2-D, got shape {basis.shape}")
        if basis.shape[0] != mean.shape[0]:
            raise ValueError(
                f"Basis has {basis.shape[0]} rows but the mean has length {mean.shape[0]}"
            )
        if mean.shape[0] % 3 != 0:
            raise ValueError(
                f"Data dimension {mean.shape[0]} is not a multiple of 3 (x, y, z per vertex)"
            )
        if basis.shape[1] != eigenvalues.shape[0]:
            raise ValueError(
                f"Basis has {basis.shape[1]} columns but {eigenvalues.shape[0]} eigenvalues were given"
            )
        if np.any(~(eigenvalues > 0.0)):
            raise ValueError("All eigenvalues must be strictly positive.")

        tri = np.array(triangles, dtype=np.int64)
        if tri.size == 0:
            tri = tri.reshape(0, 3)

        self._mean = _read_only(mean)
        self._normalised_basis = _read_only(basis)
        self._eigenvalues = _read_only(eigenvalues)
        self._triangles = _read_only(tri)
        self._unnormalised_basis = _read_only(unnormalise_pca_basis(basis, eigenvalues))
        self._rng = rng if rng is not None else np.random.default_rng()

        logger.debug(
            "PcaModel: %d vertices, %d components, %d triangles",
            self.num_vertices, self.num_components, len(self._triangles),
        )

    # -----------------------------
    # Dimensions
    # -----------------------------

    @property
    def num_components(self) -> int:
        """Number of principal components n."""
        return self._normalised_basis.shape[1]

    @property
    def data_dimension(self) -> int:
        """Length of a shape vector, 3 * number of vertices."""
        return self._normalised_basis.shape[0]

    @property
    def num_vertices(self) -> int:
        return self.data_dimension // 3

    # -----------------------------
    # Accessors
    # -----------------------------

    @property
    def triangles(self) -> np.ndarray:
        return self._triangles

    @property
    def mean(self) -> np.ndarray:
        return self._mean

    @property
    def eigenvalues(self) -> np.ndarray:
        return self._eigenvalues

    def _check_vertex(self, vertex_index: int) -> int:
        vertex_index = operator.index(vertex_index)
        if vertex_index < 0 or vertex_index * 3 >= self.data_dimension:
            raise IndexError(
                f"Vertex index {vertex_index} is out of range for a model "
                f"with {self.num_vertices} vertices."
            )
        return vertex_index * 3

    def mean_at_vertex(self, vertex_index: int) -> np.ndarray:
        """Homogeneous mean position (x, y, z, 1.0) of one vertex."""
        r = self._check_vertex(vertex_index)
        return np.append(self._mean[r:r + 3], 1.0)

    def basis(self, normalised: bool = True) -> np.ndarray:
        """Full (3m, n) basis; a writable copy of the model's data."""
        if normalised:
            return self._normalised_basis.copy()
        return self._unnormalised_basis.copy()

    def basis_at_vertex(self, vertex_index: int, normalised: bool = True) -> np.ndarray:
        """
        (3, n) rows of the basis belonging to one vertex.
        Returns a read-only view into the model, not a copy.
        """
        r = self._check_vertex(vertex_index)
        if normalised:
            return self._normalised_basis[r:r + 3]
        return self._unnormalised_basis[r:r + 3]

    def eigenvalue(self, index: int) -> float:
        index = operator.index(index)
        if index < 0 or index >= self.num_components:
            raise IndexError(
                f"Eigenvalue index {index} is out of range for a model "
                f"with {self.num_components} components."
            )
        return float(self._eigenvalues[index])

    # -----------------------------
    # Sampling
    # -----------------------------

    def draw_sample(self, coefficients: Sequence[float]) -> np.ndarray:
        """
        Model instance  mean + B_norm @ alpha  for the given coefficients.

        Coefficients are in standard-normal scale (not multiplied by the
        eigenvalues); missing trailing coefficients are zero. Surplus
        coefficients beyond num_components are dropped.
        """
        n = self.num_components
        coefficients = np.asarray(coefficients, dtype=np.float64).ravel()
        if coefficients.shape[0] > n:
            logger.warning(
                "Got %d coefficients for a model with %d components; ignoring the rest.",
                coefficients.shape[0], n,
            )
            coefficients = coefficients[:n]

        alphas = np.zeros(n, dtype=np.float64)
        alphas[:coefficients.shape[0]] = coefficients
        return self._mean + self._normalised_basis @ alphas

    def draw_random_coefficients(
        self, sigma: float = 1.0, rng: np.random.Generator | None = None
    ) -> np.ndarray:
        """n coefficients drawn independently from N(0, sigma^2)."""
        rng = self._rng if rng is None else rng
        return rng.normal(loc=0.0, scale=sigma, size=self.num_components)

    def draw_random_sample(
        self, sigma: float = 1.0, rng: np.random.Generator | None = None
    ) -> np.ndarray:
        """
        Random model instance with coefficients ~ N(0, sigma^2).
        Uses ``rng`` if given, otherwise advances the model's own generator.
        """
        return self.draw_sample(self.draw_random_coefficients(sigma, rng))

    def project(self, instance) -> np.ndarray:
        """
        Standard-normal coefficients of a flat shape vector:
          alpha = U^T (x - mean) / sqrt(lambda)
        Exact inverse of draw_sample() for instances inside the model span,
        provided the eigenvectors are orthonormal.
        """
        instance = np.asarray(instance, dtype=np.float64).ravel()
        if instance.shape[0] != self.data_dimension:
            raise ValueError(
                f"Instance has length {instance.shape[0]}, expected {self.data_dimension}"
            )
        return (self._unnormalised_basis.T @ (instance - self._mean)) / np.sqrt(self._eigenvalues)

    def __repr__(self) -> str:
        return (
            f"PcaModel(vertices={self.num_vertices}, components={self.num_components}, "
            f"triangles={len(self._triangles)})"
        )
