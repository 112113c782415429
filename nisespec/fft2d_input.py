"""Input for the two-dimensional Fourier transform step.

Covers the keyword input file, the response-function file names and the
time-domain response files written by the 2D response calculations.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

import numpy as np

RAMAN = "2DIRraman"
_RAMAN_VARIANTS = frozenset(
    {"2DIRraman1", "2DIRraman2", "2DIRraman3", "2DIRramanI", "2DIRramanII"}
)
POLARIZATIONS = ("par", "per", "cro")


class OutputFormat(enum.Enum):
    """Layout of the frequency-domain output files."""

    DISLIN = 0
    MATLAB = 1
    GNUPLOT = 2

    @classmethod
    def from_name(cls, name: str) -> "OutputFormat | None":
        """Map a Format keyword value to a format; unknown names give None."""
        return {
            "Dislin": cls.DISLIN,
            "Python": cls.DISLIN,
            "Matlab": cls.MATLAB,
            "Gnuplot": cls.GNUPLOT,
        }.get(name)


@dataclass(frozen=True)
class FFT2DConfig:
    """Settings read from the input file that the 2D transform needs."""

    fft: int
    deltat: float
    homogeneous: float = 0.0
    inhomogeneous: float = 0.0
    format: OutputFormat = OutputFormat.DISLIN
    tmax1: int = 0
    tmax2: int = 0
    tmax3: int = 0
    min1: float = 0.0
    min2: float = 0.0
    min3: float = 0.0
    max1: float = 0.0
    max2: float = 0.0
    max3: float = 0.0
    technique: str = ""

    def __post_init__(self) -> None:
        if min(self.min1, self.min2, self.min3, self.max1, self.max2, self.max3) < 0:
            raise ValueError("All field frequencies must be positive!")
        if self.min1 > self.max1 or self.min2 > self.max2 or self.min3 > self.max3:
            raise ValueError("The max frequency must be larger than the min frequency!")
        if self.fft == 0:
            raise ValueError("FFT keyword not specified!")
        if self.fft < 0:
            raise ValueError("FFT length must be positive")
        if self.deltat <= 0:
            raise ValueError("Timestep must be positive")

    @property
    def is_raman(self) -> bool:
        """True for the 2DIRraman family, whose diagrams are kept apart."""
        return self.technique == RAMAN

    @property
    def shift1(self) -> float:
        """Rotating frame frequency along the first axis."""
        return 0.5 * (self.min1 + self.max1)

    @property
    def shift3(self) -> float:
        """Rotating frame shift along the third axis, as applied to rephasing data."""
        return -0.5 * (self.min3 + self.max3)


def _values(key: str, values: list[str], count: int, kind):
    if len(values) < count:
        raise ValueError(f"{key} needs {count} value(s)")
    try:
        return [kind(v) for v in values[:count]]
    except ValueError as err:
        raise ValueError(f"invalid value for {key}: {' '.join(values)}") from err


def parse_config(text: str) -> FFT2DConfig:
    """Read the keywords of an input file; unknown keywords are ignored."""
    settings: dict = {}
    for line in text.splitlines():
        tokens = line.split()
        if not tokens:
            continue
        key, values = tokens[0], tokens[1:]
        if key == "FFT":
            settings["fft"] = _values(key, values, 1, int)[0]
        elif key == "Timestep":
            settings["deltat"] = _values(key, values, 1, float)[0]
        elif key == "Homogeneous":
            settings["homogeneous"] = _values(key, values, 1, float)[0]
        elif key == "Inhomogeneous":
            settings["inhomogeneous"] = _values(key, values, 1, float)[0]
        elif key == "Format":
            if values:
                form = OutputFormat.from_name(values[0])
                if form is not None:
                    settings["format"] = form
        elif key == "RunTimes":
            settings["tmax1"], settings["tmax2"], settings["tmax3"] = _values(
                key, values, 3, int
            )
        elif key == "MinFrequencies":
            settings["min1"], settings["min2"], settings["min3"] = _values(
                key, values, 3, float
            )
        elif key == "MaxFrequencies":
            settings["max1"], settings["max2"], settings["max3"] = _values(
                key, values, 3, float
            )
        elif key == "Technique":
            name = _values(key, values, 1, str)[0]
            settings["technique"] = RAMAN if name in _RAMAN_VARIANTS else name
    if "fft" not in settings:
        settings["fft"] = 0
    if "deltat" not in settings:
        if settings["fft"] == 0:
            raise ValueError("FFT keyword not specified!")
        raise ValueError("Timestep keyword not specified!")
    return FFT2DConfig(**settings)


def load_config(path) -> FFT2DConfig:
    """Read and parse an input file."""
    return parse_config(Path(path).read_text(encoding="utf-8"))


class ResponseFiles(NamedTuple):
    """Time-domain and frequency-domain file names of one polarization."""

    polarization: str
    time: str
    frequency: str


def response_file_names(technique: str, rephasing: bool) -> tuple[ResponseFiles, ...]:
    """File names for the parallel, perpendicular and cross polarizations."""
    diagram = "I" if rephasing else "II"
    raman = technique == RAMAN or technique in _RAMAN_VARIANTS
    files = []
    for pol in POLARIZATIONS:
        if raman:
            files.append(ResponseFiles(
                pol, f"R{pol}{diagram}.IRraman.dat", f"Rw{pol}IRraman.{diagram}.dat"
            ))
        else:
            files.append(ResponseFiles(
                pol, f"R{pol}{diagram}.dat", f"Rw{pol}.{diagram}.dat"
            ))
    return tuple(files)


def _round_half_away(x: float) -> int:
    return int(x + 0.5) if x > 0 else int(x - 0.5)


def load_time_response(path, config: FFT2DConfig, rephasing: bool) -> np.ndarray:
    """Read a time-domain response onto an fft by fft grid indexed [t1, t3].

    Homogeneous and inhomogeneous broadening are applied as the points are
    read. Rephasing points replace earlier ones; non-rephasing points add up.
    Points outside the grid are dropped.
    """
    tokens = Path(path).read_text(encoding="utf-8").split()
    count = config.tmax1 * config.tmax3
    if len(tokens) < 5 * count:
        raise ValueError(
            f"response file {path} holds {len(tokens) // 5} points, {count} expected"
        )
    try:
        data = np.array(tokens[: 5 * count], dtype=float).reshape(count, 5)
    except ValueError as err:
        raise ValueError(f"response file {path} holds non-numeric data") from err

    fft = config.fft
    grid = np.zeros(fft * fft, dtype=complex)
    homo = config.homogeneous
    inhomo = config.inhomogeneous
    for t1, _t2, t3, rr, ir in data:
        index = _round_half_away(t3 / config.deltat + fft * t1 / config.deltat)
        factor = 1.0
        if homo > 0.0:
            factor *= np.exp(-(t1 + t3) / 2 / homo)
        if inhomo > 0.0:
            spread = (t1 - t3) if rephasing else (t1 + t3)
            factor *= np.exp(-spread * spread / 2 / inhomo / inhomo)
        if 0 <= index < fft * fft:
            value = complex(rr * factor, ir * factor)
            if rephasing:
                grid[index] = value
            else:
                grid[index] += value
    return grid.reshape(fft, fft)