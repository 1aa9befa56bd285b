"""Saving and loading simulation output in HDF5 files."""

import os
from typing import Dict, Optional, Tuple

import h5py
import numpy as np
from jax import Array

from .semidiscretization import Semidiscretization


def save_trajectory(
    path: str,
    ts: Array,
    ys: Array,
    semi: Semidiscretization,
    history: Optional[Dict[str, np.ndarray]] = None,
    metadata: Optional[dict] = None,
):
    """
    Write a trajectory to an HDF5 file.

    Layout:
        /solution/t  (n_points,)
        /solution/q  (n_points, 3, N) primitive variables (η, v, D)
        /solution/x  (N,) grid
        /analysis/<key>  output of `analysis_history`, if given
        attrs: mesh, equation parameters, operator family and `metadata`
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with h5py.File(path, "w") as hf:
        solution = hf.create_group("solution")
        solution.create_dataset("t", data=np.asarray(ts))
        solution.create_dataset("q", data=np.asarray(ys))
        solution.create_dataset("x", data=np.asarray(semi.grid()))

        if history is not None:
            analysis = hf.create_group("analysis")
            for key, value in history.items():
                analysis.create_dataset(key, data=value)

        attrs = {
            "xmin": semi.mesh.xmin,
            "xmax": semi.mesh.xmax,
            "N": semi.mesh.N,
            "gravity": semi.equations.gravity,
            "eta0": semi.equations.eta0,
            "operator_family": semi.solver.family.name.lower(),
            "initial_condition": getattr(semi.initial_condition, "__name__", ""),
        }
        attrs.update(metadata or {})
        for key, value in attrs.items():
            hf.attrs[key] = value


def load_trajectory(path: str) -> Tuple[np.ndarray, np.ndarray, Dict[str, np.ndarray], dict]:
    """
    Read a file written by `save_trajectory`.

    Returns:
        t, q, analysis (empty if none was saved), attrs
    """
    with h5py.File(path, "r") as hf:
        t = hf["solution/t"][()]
        q = hf["solution/q"][()]
        analysis = {}
        if "analysis" in hf:
            analysis = {key: hf["analysis"][key][()] for key in hf["analysis"]}
        attrs = dict(hf.attrs)
    return t, q, analysis, attrs
