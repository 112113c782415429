"""Two-dimensional Fourier transform of third-order response functions.

Turns the rephasing and non-rephasing time-domain responses into frequency
domain files, adds them into absorptive 2D spectra and derives broadband
pump-probe spectra from those.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import NamedTuple

import numpy as np

from nisespec.fft1d import C_V, frequency_axis
from nisespec.fft2d_input import (
    POLARIZATIONS,
    FFT2DConfig,
    OutputFormat,
    load_config,
    load_time_response,
    response_file_names,
)

logger = logging.getLogger(__name__)

PUMP_PROBE_HEADER = "### Broadband pump probe spectrum\n"
AXIS_FILE = "waxis.dat"


class FrequencyBounds(NamedTuple):
    """Smallest and largest frequencies written along both axes."""

    min1: float
    max1: float
    min3: float
    max3: float


class FrequencyResponse(NamedTuple):
    """A frequency-domain response on a grid indexed [w1, w3]."""

    w1: np.ndarray
    w3: np.ndarray
    real: np.ndarray
    imag: np.ndarray


def _round_half_away(x: float) -> int:
    return int(x + 0.5) if x > 0 else int(x - 0.5)


def write_frequency_response(path, spectrum, config: FFT2DConfig, rephasing) -> FrequencyBounds | None:
    """Write the points of a transformed response that fall in the frequency window.

    Rephasing data lie at negative first-axis frequencies. For non-rephasing
    data the bounds of the written frequencies are returned, and in Matlab
    format the first-axis frequencies are also written to waxis.dat next to
    the output; for rephasing data None is returned.
    """
    fft = config.fft
    spectrum = np.asarray(spectrum, dtype=complex)
    if spectrum.shape != (fft, fft):
        raise ValueError(f"spectrum shape {spectrum.shape} does not match FFT length {fft}")
    path = Path(path)

    order, offsets = frequency_axis(fft, config.deltat, 0.0)
    half = fft // 2
    shift1 = config.shift1
    centre3 = -config.shift3
    form = config.format
    columns = form in (OutputFormat.DISLIN, OutputFormat.GNUPLOT)
    row_breaks = form in (OutputFormat.MATLAB, OutputFormat.GNUPLOT)
    raman = config.is_raman

    if rephasing:
        low1, high1 = -config.max1, -config.min1
    else:
        low1, high1 = config.min1, config.max1
    lo1 = hi1 = shift1
    lo3 = hi3 = centre3
    axis: list[float] = []

    with open(path, "w", encoding="utf-8") as out:
        for i, off1 in zip(order, offsets):
            row_w1 = off1 - shift1 if rephasing else off1 + shift1
            w1 = row_w1
            for j, off3 in zip(order, offsets):
                w1 = row_w1
                w3 = off3 + centre3
                if not (low1 < w1 < high1 and config.min3 < w3 < config.max3):
                    continue
                if not rephasing:
                    lo1, hi1 = min(lo1, w1), max(hi1, w1)
                    lo3, hi3 = min(lo3, w3), max(hi3, w3)
                    if raman:
                        # Points with low first and high third index are offset
                        # by the third-axis centre rather than the first.
                        w1 += centre3 if (i < half and j >= half) else shift1
                value = spectrum[i, j]
                if columns:
                    out.write(f"{w1:f} {w3:f} {value.real:e} {value.imag:e}\n")
                else:
                    out.write(f"{value.imag:e} ")
            if row_breaks and low1 < w1 < high1:
                out.write("\n")
                if form is OutputFormat.MATLAB and not rephasing:
                    axis.append(float(w1))

    if rephasing:
        return None
    if form is OutputFormat.MATLAB:
        with open(path.parent / AXIS_FILE, "w", encoding="utf-8") as out:
            out.writelines(f"{w:f}\n" for w in axis)
    return FrequencyBounds(float(lo1), float(hi1), float(lo3), float(hi3))


def read_frequency_response(path, rows, cols) -> FrequencyResponse:
    """Read rows*cols points of a column-format frequency response."""
    tokens = Path(path).read_text(encoding="utf-8").split()
    count = rows * cols
    if rows <= 0 or cols <= 0:
        raise ValueError("grid dimensions must be positive")
    if len(tokens) < 4 * count:
        raise ValueError(
            f"response file {path} holds {len(tokens) // 4} points, {count} expected"
        )
    try:
        data = np.array(tokens[: 4 * count], dtype=float).reshape(rows, cols, 4)
    except ValueError as err:
        raise ValueError(f"response file {path} holds non-numeric data") from err
    return FrequencyResponse(data[:, :, 0], data[:, :, 1], data[:, :, 2], data[:, :, 3])


def combine_spectra(rephasing, nonrephasing) -> np.ndarray:
    """Add a rephasing spectrum, first axis reversed, to a non-rephasing one."""
    rephasing = np.asarray(rephasing)
    nonrephasing = np.asarray(nonrephasing)
    if rephasing.shape != nonrephasing.shape:
        raise ValueError("rephasing and non-rephasing spectra differ in shape")
    return rephasing[::-1] + nonrephasing


def pump_probe(spectrum) -> np.ndarray:
    """Broadband pump-probe spectrum: the 2D spectrum summed over the pump axis."""
    return np.asarray(spectrum).sum(axis=0)


def _write_2d(path: Path, w1, w3, real, imag, gnuplot: bool) -> None:
    with open(path, "w", encoding="utf-8") as out:
        for row in zip(w1, w3, real, imag):
            for a, b, r, i in zip(*row):
                out.write(f"{a:f} {b:f} {r:e} {i:e}\n")
            if gnuplot:
                out.write("\n")


def _write_pump_probe(path: Path, axis, values) -> None:
    with open(path, "w", encoding="utf-8") as out:
        out.write(PUMP_PROBE_HEADER)
        for w, v in zip(axis, values):
            out.write(f"{w:f} {v:e}\n")


def run(config: FFT2DConfig, directory=".") -> list[Path]:
    """Transform all response functions in a directory and build the 2D spectra.

    Missing polarizations are skipped. Returns the paths of the files written.
    """
    directory = Path(directory)
    written: list[Path] = []
    bounds: FrequencyBounds | None = None

    for rephasing in (True, False):
        for files in response_file_names(config.technique, rephasing):
            source = directory / files.time
            if not source.is_file():
                logger.warning("Response function file %s not found; skipping", source)
                continue
            spectrum = np.fft.fft2(load_time_response(source, config, rephasing))
            target = directory / files.frequency
            result = write_frequency_response(target, spectrum, config, rephasing)
            written.append(target)
            if result is not None:
                bounds = result

    if config.format is OutputFormat.MATLAB:
        if bounds is not None:
            written.append(directory / AXIS_FILE)
        return written
    if bounds is None:
        raise FileNotFoundError("no non-rephasing response function found")

    dw = 1.0 / (config.deltat * C_V * config.fft)
    rows = _round_half_away((bounds.max1 - bounds.min1) / dw + 1)
    cols = _round_half_away((bounds.max3 - bounds.min3) / dw + 1)
    axis3 = bounds.min3 + (bounds.max3 - bounds.min3) * np.arange(1, cols + 1) / cols
    gnuplot = config.format is OutputFormat.GNUPLOT

    for pol, rep, non in zip(
        POLARIZATIONS,
        response_file_names(config.technique, True),
        response_file_names(config.technique, False),
    ):
        rep_path = directory / rep.frequency
        non_path = directory / non.frequency
        if not rep_path.is_file() or not non_path.is_file():
            logger.warning("Frequency response for %s polarization missing; skipping", pol)
            continue
        k1 = read_frequency_response(rep_path, rows, cols)
        k1 = k1._replace(w1=-k1.w1)
        k2 = read_frequency_response(non_path, rows, cols)

        if config.is_raman:
            for label, k in (("I", k1), ("II", k2)):
                two_d = directory / f"2DIRraman.{label}.{pol}.dat"
                _write_2d(two_d, k.w1, k.w3, k.real, k.imag, gnuplot)
                pp = directory / f"PPIRraman.{label}.{pol}.dat"
                _write_pump_probe(pp, k.w3[0], pump_probe(k.imag))
                written += [two_d, pp]
        else:
            real = combine_spectra(k1.real, k2.real)
            imag = combine_spectra(k1.imag, k2.imag)
            two_d = directory / f"2D.{pol}.dat"
            _write_2d(two_d, k2.w1, k2.w3, real, imag, gnuplot)
            pp = directory / f"PP.{pol}.dat"
            _write_pump_probe(pp, axis3, pump_probe(imag))
            written += [two_d, pp]
    return written


def main(argv=None) -> int:
    """Build 2D spectra from the response functions named by an input file."""
    parser = argparse.ArgumentParser(
        description="Fourier transform response functions into 2D spectra."
    )
    parser.add_argument("input", help="input file with the calculation keywords")
    parser.add_argument("--directory", default=".", help="directory of the response files")
    args = parser.parse_args(argv)
    try:
        config = load_config(args.input)
    except FileNotFoundError:
        print("File not found!")
        return 1
    except ValueError as err:
        print(err)
        return 1
    try:
        run(config, args.directory)
    except (FileNotFoundError, ValueError) as err:
        print(err)
        return 1
    return 0