"""Hamiltonian analysis: delocalization measures, site statistics and density matrices."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import numpy as np


def _eigvecs(h) -> np.ndarray:
    """Return eigenvectors as a square array indexed [state, site].

    A flat array is read in column-major order, element (state, site) at
    state + site*n.
    """
    arr = np.asarray(h, dtype=float)
    if arr.ndim == 1:
        n = int(round(np.sqrt(arr.size)))
        if n * n != arr.size:
            raise ValueError(f"{arr.size} elements do not form a square matrix")
        return arr.reshape((n, n), order="F")
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise ValueError(f"eigenvector matrix must be square, got shape {arr.shape}")
    return arr


def _in_window(e, minimum, maximum, shift) -> np.ndarray:
    e = np.asarray(e, dtype=float)
    return (e > minimum - shift) & (e < maximum - shift)


def participation_ratio(h) -> float:
    """Sum over eigenstates of the inverse participation ratio reciprocal."""
    v = _eigvecs(h)
    return float(np.sum(1.0 / np.sum(v ** 4, axis=1)))


def local_participation_ratio(h, e, minimum, maximum, shift) -> float:
    """Participation ratio summed over eigenstates inside the frequency window."""
    v = _eigvecs(h)
    mask = _in_window(e, minimum, maximum, shift)
    return float(np.sum(1.0 / np.sum(v[mask] ** 4, axis=1)))


def spectral_participation_ratio(h) -> float:
    """Manhattan exciton size summed over all eigenstates."""
    v = _eigvecs(h)
    return float(np.sum(np.sum(np.abs(v), axis=1) ** 2))


def local_spectral_participation_ratio(h, e, minimum, maximum, shift) -> float:
    """Manhattan exciton size summed over eigenstates inside the frequency window."""
    v = _eigvecs(h)
    mask = _in_window(e, minimum, maximum, shift)
    return float(np.sum(np.sum(np.abs(v[mask]), axis=1) ** 2))


def find_ceig(dip2, h, e, minimum, maximum, shift) -> tuple[np.ndarray, np.ndarray, int]:
    """Site contributions of eigenstates in the window.

    Returns the dipole-weighted contributions, the density-of-states
    contributions and the number of eigenstates counted.
    """
    v = _eigvecs(h)
    dip2 = np.asarray(dip2, dtype=float)
    mask = _in_window(e, minimum, maximum, shift)
    weights = v[mask] ** 2
    return dip2[mask] @ weights, weights.sum(axis=0), int(np.count_nonzero(mask))


def dipole_magnitude(h, dipoles) -> np.ndarray:
    """Squared transition dipole of each eigenstate.

    The site dipoles are given as three rows, one per Cartesian direction.
    """
    v = _eigvecs(h)
    mu = np.asarray(dipoles, dtype=float).reshape(3, -1)
    if mu.shape[1] != v.shape[0]:
        raise ValueError(f"dipoles for {mu.shape[1]} sites, {v.shape[0]} expected")
    projected = mu @ v.T
    return np.sum(projected ** 2, axis=0)


def density_matrices(h, e, dip2, minimum, maximum, shift) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Site-basis density matrices: full, in the window, and dipole-weighted in the window."""
    v = _eigvecs(h)
    dip2 = np.asarray(dip2, dtype=float)
    mask = _in_window(e, minimum, maximum, shift)
    rho = v.T @ v
    sel = v[mask]
    local_rho = sel.T @ sel
    spec_rho = (sel * dip2[mask][:, None]).T @ sel
    return rho, local_rho, spec_rho


@dataclass(frozen=True)
class SiteStatistics:
    """Averages and standard deviations of site frequencies and couplings."""

    average_frequency: np.ndarray
    frequency_sd: np.ndarray
    average_coupling: np.ndarray
    coupling_sd: np.ndarray
    average_hamiltonian: np.ndarray
    overall_average: float
    overall_sd: float
    samples: int


def site_statistics(frames: Iterable, singles: int) -> SiteStatistics:
    """Statistics over packed upper-triangular Hamiltonians of `singles` sites.

    The coupling of a site is the sum of all its couplings to other sites.
    """
    nn2 = singles * (singles + 1) // 2
    packed = np.array([np.asarray(f, dtype=float) for f in frames])
    if packed.size == 0:
        raise ValueError("no Hamiltonian frames to analyse")
    if packed.ndim != 2 or packed.shape[1] != nn2:
        raise ValueError(f"each frame must hold {nn2} elements for {singles} sites")
    nsam = packed.shape[0]

    rows, cols = np.triu_indices(singles)
    full = np.zeros((nsam, singles, singles))
    full[:, rows, cols] = packed
    full[:, cols, rows] = packed
    diag = np.diagonal(full, axis1=1, axis2=2)
    couplings = full.sum(axis=2) - diag

    average_frequency = diag.mean(axis=0)
    average_coupling = couplings.mean(axis=0)
    overall = float(diag.sum() / (nsam * singles))
    frequency_sd = np.sqrt(((diag - average_frequency) ** 2).sum(axis=0) / nsam)
    coupling_sd = np.sqrt(((couplings - average_coupling) ** 2).sum(axis=0) / nsam)
    overall_sd = float(np.sqrt(((diag - overall) ** 2).sum() / (nsam * singles)))
    return SiteStatistics(
        average_frequency=average_frequency,
        frequency_sd=frequency_sd,
        average_coupling=average_coupling,
        coupling_sd=coupling_sd,
        average_hamiltonian=packed.mean(axis=0),
        overall_average=overall,
        overall_sd=overall_sd,
        samples=nsam,
    )


def write_average_hamiltonian(path, average, singles, shift) -> None:
    """Write a packed average Hamiltonian as one frame, diagonal shifted back."""
    values = np.asarray(average, dtype=float).copy()
    if values.size != singles * (singles + 1) // 2:
        raise ValueError(f"packed Hamiltonian does not match {singles} sites")
    diagonal = [i * (2 * singles - i + 1) // 2 for i in range(singles)]
    values[diagonal] += shift
    with open(Path(path), "w", encoding="utf-8") as out:
        out.write("0 " + "".join(f"{v:f} " for v in values) + "\n")


def write_density_matrix(path, rho) -> None:
    """Write a density matrix normalized to unit trace, one row per line."""
    rho = np.asarray(rho, dtype=float)
    norm = float(rho.diagonal().sum())
    if norm == 0.0:
        raise ValueError("density matrix has zero trace")
    with open(Path(path), "w", encoding="utf-8") as out:
        for row in rho / norm:
            out.write("".join(f"{v:f} " for v in row) + "\n")