#!/usr/bin/env python3
"""
Draw random instances from a synthetic PCA shape model on an icosphere.

Saves:
 - the mean and every sample as PLY meshes
 - an NPZ with the mean, triangles, coefficients and flat samples
 - optionally a PNG with per-vertex displacement from the mean

Usage:
    python experiments/sample_model.py --components 10 --num-samples 4 --seed 0 --out results/samples
"""
import argparse
import logging
import os
import sys

import numpy as np
import trimesh

sys.path.insert(0, os.path.abspath("."))

from mesh import Mesh
from morphablemodel import harmonic_shape_model, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument('--subdivisions', type=int, default=3, help='icosphere subdivision level of the template')
    parser.add_argument('--components', type=int, default=10, help='number of principal components')
    parser.add_argument('--scale', type=float, default=0.1, help='standard deviation of the first component')
    parser.add_argument('--sigma', type=float, default=1.0, help='standard deviation of the drawn coefficients')
    parser.add_argument('--num-samples', type=int, default=4, help='number of random instances')
    parser.add_argument('--seed', type=int, default=None, help='seed for reproducible draws (default: OS entropy)')
    parser.add_argument('--out', default=os.path.join('results', 'samples'), help='output directory')
    parser.add_argument('--plot', action='store_true', help='also save a displacement plot')
    parser.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    ico = trimesh.creation.icosphere(subdivisions=args.subdivisions, radius=1.0)
    V = np.asarray(ico.vertices, dtype=np.float64)
    F = np.asarray(ico.faces, dtype=np.int64)
    print(f"Template: {len(V)} vertices, {len(F)} faces.")

    rng = np.random.default_rng(args.seed)
    model = harmonic_shape_model(V, F, args.components, scale=args.scale, rng=rng)
    print(model)

    os.makedirs(args.out, exist_ok=True)
    mean_mesh = Mesh.from_sample(model.mean, model.triangles)
    mean_mesh.export(os.path.join(args.out, "mean.ply"))

    coeffs = np.stack([model.draw_random_coefficients(args.sigma) for _ in range(args.num_samples)])
    samples = np.stack([model.draw_sample(c) for c in coeffs])
    sample_meshes = []
    for i, s in enumerate(samples):
        m = Mesh.from_sample(s, model.triangles)
        m.export(os.path.join(args.out, f"sample_{i:03d}.ply"))
        sample_meshes.append(m)
    print(f"Saved mean + {args.num_samples} samples to: {args.out}")

    npz_name = os.path.join(args.out, "samples.npz")
    np.savez(npz_name, mean=model.mean, faces=model.triangles,
             eigenvalues=model.eigenvalues, coefficients=coeffs, samples=samples)
    print(f"Saved raw samples to: {npz_name}")

    if args.plot and sample_meshes:
        from experiments.visualize import plot_displacement
        png = plot_displacement(
            mean_mesh, sample_meshes,
            [f"sample {i}" for i in range(len(sample_meshes))],
            os.path.join(args.out, "displacement.png"),
        )
        print(f"Saved displacement plot to: {png}")
    print("Done.")
    return samples


if __name__ == "__main__":
    main()
