# mesh.py
from __future__ import annotations

import os
from dataclasses import dataclass
import numpy as np
import trimesh


@dataclass
class Mesh:
    """Triangle mesh as (V, F) arrays, the shape a model instance is rendered or exported as."""
    V: np.ndarray
    F: np.ndarray

    @classmethod
    def load(
        cls,
        path: str,
        process: bool = True,
        recenter: bool = True,
        rescale_unit: bool = True,
    ) -> "Mesh":
        """
        Load a surface mesh via trimesh, ensure triangles, recenter at origin,
        and rescale to unit size (so templates have comparable scale).
        """
        if not os.path.exists(path):
            raise FileNotFoundError(path)

        obj = trimesh.load(path, process=process)

        if isinstance(obj, trimesh.Scene):
            if len(obj.geometry) == 0:
                raise ValueError("Scene contains no geometry.")
            tm = trimesh.util.concatenate(tuple(obj.dump()))
        elif isinstance(obj, trimesh.Trimesh):
            tm = obj
        else:
            raise TypeError(f"Unsupported type from trimesh.load: {type(obj)}")

        if tm.faces is None or len(tm.faces) == 0:
            raise ValueError("Loaded geometry has no faces (is it a point cloud?)")

        translation = -tm.centroid if recenter else np.zeros(3)
        if rescale_unit:
            if tm.scale == 0:
                raise ValueError("Degenerate geometry with zero scale.")
            scale = 1.0 / float(tm.scale)
        else:
            scale = 1.0

        V = (tm.vertices + translation) * scale
        F = tm.faces.astype(np.int32, copy=False)

        return cls(V=V.astype(np.float64, copy=False), F=F)

    @classmethod
    def from_sample(cls, sample: np.ndarray, triangles: np.ndarray) -> "Mesh":
        """
        Build a mesh from a flat model instance [x0 y0 z0 x1 y1 z1 ...]
        (e.g. PcaModel.mean or PcaModel.draw_sample(...)) and the model's triangles.
        """
        sample = np.asarray(sample, dtype=np.float64).ravel()
        if sample.shape[0] % 3 != 0:
            raise ValueError(f"Sample length {sample.shape[0]} is not a multiple of 3.")
        F = np.asarray(triangles, dtype=np.int32).reshape(-1, 3)
        return cls(V=sample.reshape(-1, 3).copy(), F=F)

    def flatten(self) -> np.ndarray:
        """Vertices as a flat (3m,) shape vector."""
        return np.asarray(self.V, dtype=np.float64).ravel()

    def to_trimesh(self, **kwargs) -> trimesh.Trimesh:
        # process=False keeps vertex order, which the model's layout depends on
        return trimesh.Trimesh(vertices=self.V, faces=self.F, process=False, **kwargs)

    def export(self, path: str, **kwargs) -> str:
        """Write the mesh to disk (format from the file extension)."""
        out_dir = os.path.dirname(path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        self.to_trimesh(**kwargs).export(path)
        return path
