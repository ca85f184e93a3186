# tests/conftest.py
import numpy as np
import pytest
import trimesh

from morphablemodel import PcaModel


@pytest.fixture
def two_vertex_model():
    """2 vertices, 1 component, eigenvalue 4 → unnormalised column = normalised / 2."""
    mean = [0.0, 0.0, 0.0, 1.0, 1.0, 1.0]
    basis = np.array([[1.0], [0.0], [0.0], [0.0], [0.0], [1.0]])
    return PcaModel(mean, basis, [4.0], [[0, 1, 1]])


@pytest.fixture
def random_model():
    """5 vertices, 3 components, random basis and positive eigenvalues."""
    rng = np.random.default_rng(0)
    m, n = 5, 3
    mean = rng.normal(size=3 * m)
    basis = rng.normal(size=(3 * m, n))
    eigenvalues = np.array([3.0, 1.5, 0.25])
    triangles = [[0, 1, 2], [0, 2, 3], [0, 3, 4]]
    return PcaModel(mean, basis, eigenvalues, triangles, rng=np.random.default_rng(1))


@pytest.fixture
def icosphere():
    ico = trimesh.creation.icosphere(subdivisions=1, radius=1.0)
    return ico.vertices.astype(np.float64), ico.faces.astype(np.int64)
