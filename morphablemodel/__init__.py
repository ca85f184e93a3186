# morphablemodel/__init__.py
from .normalisation import normalise_pca_basis, unnormalise_pca_basis
from .pca_model import PcaModel
from .harmonics import harmonic_shape_model, uniform_graph_laplacian, vertex_normals
from .logging_config import setup_logging

__all__ = [
    "normalise_pca_basis",
    "unnormalise_pca_basis",
    "PcaModel",
    "harmonic_shape_model",
    "uniform_graph_laplacian",
    "vertex_normals",
    "setup_logging",
]
