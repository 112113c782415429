"""Work distribution of samples and polarization directions, and 2D response output."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import numpy as np

from nisespec.subs import InsufficientDataError

POLARIZATIONS = 21


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


@dataclass(frozen=True)
class Workset:
    """All (sample, polarization) pairs to compute and the sample counts."""

    items: tuple[tuple[int, int], ...]
    sample_count: int
    cluster_count: int
    begin: int
    end: int

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self.items)


def calculate_workset(
    begin, end, length, tmax1, tmax2, tmax3, sample, cluster=-1, cluster_ids=None
) -> Workset:
    """List the work items for samples begin..end, keeping only the chosen cluster.

    An end of zero selects all samples; a cluster of -1 disables clustering.
    """
    if sample <= 0:
        raise ValueError("sample spacing must be positive")
    total = _trunc_div(length - tmax1 - tmax2 - tmax3 - 1, sample) + 1
    if total <= 0:
        raise InsufficientDataError(
            "Insufficient data to calculate spectrum. "
            "Please, lower max times or provide longer trajectory."
        )
    if end == 0:
        end = total
    sample_count = end - begin
    if sample_count == 0:
        sample_count = 1
    if cluster != -1 and cluster_ids is None:
        raise ValueError("cluster selection needs cluster assignments")

    items: list[tuple[int, int]] = []
    cluster_count = 0
    for current in range(begin, end):
        if cluster != -1:
            tj = current * sample + tmax1
            if tj >= len(cluster_ids):
                raise ValueError(f"Cluster trajectory too short at time {tj}")
            if cluster_ids[tj] != cluster:
                sample_count -= 1
                continue
            cluster_count += 1
        items.extend((current, pol) for pol in range(POLARIZATIONS))
    return Workset(tuple(items), sample_count, cluster_count, begin, end)


def split_workset(items: Sequence, size: int) -> list[list]:
    """Split work items into `size` contiguous chunks differing by at most one item."""
    if size < 1:
        raise ValueError("number of workers must be at least one")
    items = list(items)
    base, remainder = divmod(len(items), size)
    chunks = []
    start = 0
    for rank in range(size):
        count = base + 1 if rank < remainder else base
        chunks.append(items[start:start + count])
        start += count
    return chunks


def lifetime_factors(tmax1, tmax3, deltat, lifetime) -> np.ndarray:
    """Lifetime decay over coherence times, indexed [t3, t1]."""
    if lifetime <= 0:
        return np.ones((tmax3, tmax1))
    t = np.arange(tmax3)[:, None] + np.arange(tmax1)[None, :]
    return np.exp(-t * deltat / (2 * lifetime))


def write_response_2d(
    path, rr, ri, tmax1, tmax2, tmax3, dt1, dt3, deltat, sample_count
) -> None:
    """Write a sample-averaged 2D response indexed [t3, t1].

    Points at t3 = 0 are halved, as the following Fourier transform expects.
    """
    if dt1 <= 0 or dt3 <= 0:
        raise ValueError("time increments must be positive")
    rr = np.asarray(rr, dtype=float)
    ri = np.asarray(ri, dtype=float)
    with open(Path(path), "w", encoding="utf-8") as out:
        for t1 in range(0, tmax1, dt1):
            for t3 in range(0, tmax3, dt3):
                scale = sample_count * (2 if t3 == 0 else 1)
                out.write(
                    f"{t1 * deltat:f} {tmax2 * deltat:f} {t3 * deltat:f} "
                    f"{rr[t3, t1] / scale:e} {ri[t3, t1] / scale:e}\n"
                )