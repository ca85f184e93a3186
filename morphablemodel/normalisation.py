# morphablemodel/normalisation.py
import numpy as np


def _scale_columns(basis: np.ndarray, factors: np.ndarray) -> np.ndarray:
    # a 1-D basis is a single eigenvector; the result keeps the input's shape
    B = np.asarray(basis, dtype=np.float64)
    return (B.reshape(B.shape[0], -1) * factors[None, :]).reshape(B.shape)


def normalise_pca_basis(unnormalised_basis: np.ndarray, eigenvalues: np.ndarray) -> np.ndarray:
    """
    Scale each eigenvector (column) of an unnormalised PCA basis by the
    square root of its eigenvalue:
      B_norm[:, j] = B[:, j] * sqrt(lambda_j)
    Eigenvalues may be a row, column or flat vector. Returns a new array of
    the same shape; a 1-D basis is treated as one column.
    """
    sqrt_of_eigenvalues = np.sqrt(np.asarray(eigenvalues, dtype=np.float64).ravel())
    return _scale_columns(unnormalised_basis, sqrt_of_eigenvalues)


def unnormalise_pca_basis(normalised_basis: np.ndarray, eigenvalues: np.ndarray) -> np.ndarray:
    """
    Inverse of normalise_pca_basis:
      B[:, j] = B_norm[:, j] / sqrt(lambda_j)
    Eigenvalues must be strictly positive; nothing is checked here.
    """
    one_over_sqrt = 1.0 / np.sqrt(np.asarray(eigenvalues, dtype=np.float64).ravel())
    return _scale_columns(normalised_basis, one_over_sqrt)
