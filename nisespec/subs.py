"""Shared numerical helpers: state indexing, vector products, dipole operators,
periodic distances, sample bookkeeping and timing text."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

import numpy as np

SQRT2 = float(np.sqrt(2.0))
DEFAULT_LOG = "NISE.log"


class InsufficientDataError(ValueError):
    """The trajectory is too short for the requested time windows."""


class SampleRange(NamedTuple):
    """Number of available samples and the range of samples to use."""

    n_samples: int
    begin: int
    end: int


def _cdivmod(a: int, b: int) -> tuple[int, int]:
    """Integer division and remainder truncating toward zero."""
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - q * b


def sindex(a: int, b: int, n: int) -> int:
    """Index of the pair (a, b) in a packed upper-triangular matrix of size n."""
    if a > b:
        a, b = b, a
    return b + a * (2 * n - a - 1) // 2


def eindex(a: int, b: int, n: int) -> int:
    """Index of the pair (a, b) for electronic states counted from one."""
    if a > b:
        a, b = b, a
    return b + _cdivmod((a - 1) * (2 * n - a - 2), 2)[0]


def unit_matrix(n: int) -> np.ndarray:
    """Return the n by n identity matrix."""
    return np.eye(n)


def _square(c, n: int) -> np.ndarray:
    arr = np.asarray(c, dtype=float)
    if arr.ndim == 1:
        if arr.size != n * n:
            raise ValueError(f"matrix of {arr.size} elements does not match vector length {n}")
        return arr.reshape((n, n), order="F")
    if arr.shape != (n, n):
        raise ValueError(f"matrix shape {arr.shape} does not match vector length {n}")
    return arr


def vector_on_vector(rr, ir, vr, vi) -> tuple[np.ndarray, np.ndarray]:
    """Multiply a complex diagonal matrix (rr, ir) on a complex vector (vr, vi)."""
    rr, ir, vr, vi = (np.asarray(x, dtype=float) for x in (rr, ir, vr, vi))
    return rr * vr - ir * vi, ir * vr + rr * vi


def matrix_on_vector(c, vr, vi) -> tuple[np.ndarray, np.ndarray]:
    """Multiply a real matrix on a complex vector.

    A flat matrix is read in column-major order, element (a, b) at a + b*n.
    """
    vr = np.asarray(vr, dtype=float)
    vi = np.asarray(vi, dtype=float)
    m = _square(c, vr.size)
    return m @ vr, m @ vi


def trans_matrix_on_vector(c, vr, vi) -> tuple[np.ndarray, np.ndarray]:
    """Multiply the transpose of a real matrix on a complex vector."""
    vr = np.asarray(vr, dtype=float)
    vi = np.asarray(vi, dtype=float)
    m = _square(c, vr.size).T
    return m @ vr, m @ vi


def log_item(message: str, log_path: str | Path = DEFAULT_LOG) -> None:
    """Append a message to the log file."""
    with open(log_path, "a", encoding="utf-8") as log:
        log.write(message)


def time_diff(t0: float, t1: float) -> str:
    """Describe the time elapsed between two timestamps in seconds."""
    s = int(t1 - t0)
    h, s = _cdivmod(s, 3600)
    m, s = _cdivmod(s, 60)
    return f"Time spent: {h}h {m}min {s}s\n"


def mpi_time(seconds: float) -> str:
    """Describe a duration in seconds as hours, minutes, seconds and milliseconds."""
    ms = int(seconds * 1000)
    h, ms = _cdivmod(ms, 3600000)
    m, ms = _cdivmod(ms, 60000)
    s, ms = _cdivmod(ms, 1000)
    return f" {h}h {m}min {s}s {ms}ms\n"


def determine_samples(length: int, tmax1: int, sample: int, begin: int, end: int) -> SampleRange:
    """Work out how many samples the trajectory holds and the range to use.

    An end of zero selects all samples.
    """
    n_samples = _cdivmod(length - tmax1 - 1, sample)[0] + 1
    if n_samples <= 0:
        raise InsufficientDataError(
            "Insufficient data to calculate spectrum. "
            "Please, lower max times or provide longer trajectory."
        )
    if end == 0:
        end = n_samples
    if end > n_samples:
        raise ValueError(
            f"Endpoint was {end} but cannot be larger than {n_samples}."
        )
    return SampleRange(n_samples, begin, end)


def generate_cs(rng: np.random.Generator) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return a random right-handed orthonormal frame (X, Y, Z)."""
    x = rng.normal(0.0, 1.0, 3)
    x /= np.linalg.norm(x)
    y = rng.normal(0.0, 1.0, 3)
    y -= np.dot(x, y) * x
    y /= np.linalg.norm(y)
    z = np.cross(x, y)
    z /= np.linalg.norm(z)
    return x, y, z


def _overtone(dipole: np.ndarray, over, anharmonicity: float) -> np.ndarray:
    if anharmonicity != 0:
        return SQRT2 * dipole
    if over is None:
        raise ValueError("overtone dipoles are required when the anharmonicity is zero")
    return np.asarray(over, dtype=float)


def _pack(dipole: np.ndarray, vec: np.ndarray, diagonal: np.ndarray) -> np.ndarray:
    n = dipole.size
    full = np.outer(dipole, vec) + np.outer(vec, dipole)
    np.fill_diagonal(full, diagonal)
    return full[np.triu_indices(n)]


def _unpack(packed, n: int) -> tuple[np.ndarray, np.ndarray]:
    packed = np.asarray(packed, dtype=float)
    if packed.size != n * (n + 1) // 2:
        raise ValueError(f"packed vector of {packed.size} elements does not match {n} sites")
    upper = np.zeros((n, n))
    upper[np.triu_indices(n)] = packed
    diagonal = upper.diagonal().copy()
    off = upper + upper.T
    np.fill_diagonal(off, 0.0)
    return off, diagonal


def dipole_double(dipole, cr, ci, over, anharmonicity) -> tuple[np.ndarray, np.ndarray]:
    """Apply the single-to-double excitation dipole to a single-exciton vector."""
    dipole = np.asarray(dipole, dtype=float)
    cr = np.asarray(cr, dtype=float)
    ci = np.asarray(ci, dtype=float)
    ov = _overtone(dipole, over, anharmonicity)
    return _pack(dipole, cr, ov * cr), _pack(dipole, ci, ov * ci)


def dipole_double_ground(dipole, over, anharmonicity) -> tuple[np.ndarray, np.ndarray]:
    """Apply the overtone dipole to the ground state, giving a double-exciton vector."""
    dipole = np.asarray(dipole, dtype=float)
    n = dipole.size
    ov = _overtone(dipole, over, anharmonicity)
    fr = np.zeros(n * (n + 1) // 2)
    fi = np.zeros_like(fr)
    fr[[sindex(i, i, n) for i in range(n)]] = ov
    return fr, fi


def dipole_double_es(dipole, cr, ci) -> tuple[np.ndarray, np.ndarray]:
    """Apply the double excitation dipole without overtone (doubly excited site) states."""
    dipole = np.asarray(dipole, dtype=float)
    cr = np.asarray(cr, dtype=float)
    ci = np.asarray(ci, dtype=float)
    zero = np.zeros_like(dipole)
    return _pack(dipole, cr, zero), _pack(dipole, ci, zero)


def dipole_double_last(dipole, cr, ci, over, anharmonicity) -> tuple[np.ndarray, np.ndarray]:
    """Project a double-exciton vector back to single excitations with the dipole."""
    dipole = np.asarray(dipole, dtype=float)
    n = dipole.size
    ov = _overtone(dipole, over, anharmonicity)
    off_r, diag_r = _unpack(cr, n)
    off_i, diag_i = _unpack(ci, n)
    return off_r @ dipole + ov * diag_r, off_i @ dipole + ov * diag_i


def dipole_double_last_es(dipole, cr, ci) -> tuple[np.ndarray, np.ndarray]:
    """Project a double-exciton vector back to single excitations, overtones excluded."""
    dipole = np.asarray(dipole, dtype=float)
    n = dipole.size
    off_r, _ = _unpack(cr, n)
    off_i, _ = _unpack(ci, n)
    return off_r @ dipole, off_i @ dipole


def _positions(r) -> np.ndarray:
    return np.asarray(r, dtype=float).reshape(-1, 3)


def _wrap(r, box):
    box = np.asarray(box, dtype=float)
    r = np.where(r > box / 2, r - box, r)
    return np.where(r < -box / 2, r + box, r)


def distance(rf, ri, a: int, b: int, box: float) -> float:
    """Squared distance between site a of rf and site b of ri in a cubic box."""
    r = _wrap(_positions(rf)[a] - _positions(ri)[b], box)
    return float(np.dot(r, r))


def distance_x(rf, ri, a: int, b: int, box: float, x: int) -> float:
    """Separation along direction x between site a of rf and site b of ri in a cubic box."""
    r = _positions(rf)[a][x] - _positions(ri)[b][x]
    return float(_wrap(r, box))


def distance3(rf, ri, a: int, b: int, box) -> float:
    """Squared distance between site a of rf and site b of ri in a rectangular box."""
    r = _wrap(_positions(rf)[a] - _positions(ri)[b], np.asarray(box, dtype=float)[:3])
    return float(np.dot(r, r))


def distance3_x(rf, ri, a: int, b: int, box, x: int) -> float:
    """Separation along direction x in a rectangular box."""
    r = _positions(rf)[a][x] - _positions(ri)[b][x]
    return float(_wrap(r, float(box[x])))


def pbc1(r: float, x: int, box) -> float:
    """Wrap a separation along direction x; a non-positive box disables wrapping."""
    if box[0] > 0.0:
        return float(_wrap(r, float(box[x])))
    return float(r)