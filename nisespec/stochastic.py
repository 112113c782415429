"""Stochastic two-site trajectory generator for tutorial input files."""

from __future__ import annotations

import argparse
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, NamedTuple

import numpy as np

PI = 3.14159265
DEFAULT_SEED = 2511


@dataclass(frozen=True)
class TrajectoryParameters:
    """Settings of a two-site trajectory with correlated Gaussian frequency noise.

    Angles are in degrees; correlation_time and deltat in the same time unit.
    """

    length: int
    deltat: float
    sigma: float
    correlation_time: float
    angle: float
    deltaw: float
    w0: float
    coupling: float
    dipole_angle: float

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError("length must not be negative")
        if self.correlation_time <= 0:
            raise ValueError("correlation time must be positive")


class Frame(NamedTuple):
    """Site energies and coupling at one time step."""

    index: int
    energy1: float
    coupling: float
    energy2: float


def generate(params: TrajectoryParameters, rng: np.random.Generator) -> Iterator[Frame]:
    """Yield the frames of the trajectory, one per time step."""
    a = math.exp(-params.deltat / params.correlation_time)
    b = math.sqrt(1 - a * a)
    angle = params.angle * PI / 180.0
    wao = rng.normal(0.0, params.sigma)
    wbo = rng.normal(0.0, params.sigma)
    for i in range(params.length):
        wa = wao * a + b * rng.normal(0.0, params.sigma)
        wb = wbo * a + b * rng.normal(0.0, params.sigma)
        w2 = wa * math.cos(angle) + wb * math.sin(angle)
        yield Frame(
            i,
            wa - params.deltaw / 2.0 + params.w0,
            params.coupling,
            w2 + params.deltaw / 2.0 + params.w0,
        )
        wao, wbo = wa, wb


def _dipoles(params: TrajectoryParameters, sfg: bool) -> tuple[float, ...]:
    angle = params.dipole_angle * PI / 180.0
    if sfg:
        return (0.0, 0.0, 0.0, math.sin(angle), 1.0, math.cos(angle))
    return (1.0, math.cos(angle), 0.0, math.sin(angle), 0.0, 0.0)


def _row(i: int, values) -> str:
    return f"{i} " + " ".join(f"{v:f}" for v in values) + "\n"


def write_trajectory(params, directory=".", sfg=False, seed=DEFAULT_SEED) -> list[Path]:
    """Write Energy.txt and Dipole.txt, and Alpha.txt for SFG; return the paths."""
    directory = Path(directory)
    rng = np.random.default_rng(seed)
    dipoles = _dipoles(params, sfg)
    paths = [directory / "Energy.txt", directory / "Dipole.txt"]
    if sfg:
        paths.append(directory / "Alpha.txt")
    handles = [open(p, "w", encoding="utf-8") for p in paths]
    try:
        for frame in generate(params, rng):
            handles[0].write(_row(frame.index, frame[1:]))
            handles[1].write(_row(frame.index, dipoles))
            if sfg:
                handles[2].write(_row(frame.index, (1.0, 1.0, 1.0, 1.0, 10.0, 10.0)))
    finally:
        for handle in handles:
            handle.close()
    return paths


def main(argv=None) -> int:
    """Generate a tutorial trajectory from command-line arguments."""
    parser = argparse.ArgumentParser(description="Generate a stochastic two-site trajectory.")
    parser.add_argument("length", type=int)
    parser.add_argument("deltat", type=float)
    parser.add_argument("sigma", type=float)
    parser.add_argument("correlation_time", type=float)
    parser.add_argument("angle", type=float)
    parser.add_argument("deltaw", type=float)
    parser.add_argument("w0", type=float)
    parser.add_argument("coupling", type=float)
    parser.add_argument("dipole_angle", type=float)
    parser.add_argument("--sfg", action="store_true", help="write SFG dipoles and Alpha.txt")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument("--output-dir", default=".")
    args = parser.parse_args(argv)
    try:
        params = TrajectoryParameters(
            args.length, args.deltat, args.sigma, args.correlation_time, args.angle,
            args.deltaw, args.w0, args.coupling, args.dipole_angle,
        )
    except ValueError as err:
        parser.error(str(err))
    write_trajectory(params, args.output_dir, args.sfg, args.seed)
    return 0