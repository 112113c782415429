"""Fourier transform of linear response functions into one-dimensional spectra."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

import numpy as np

C_V = 2.99792458e-5
"""Speed of light in cm/fs."""


@dataclass(frozen=True)
class Spectrum1DSettings:
    """Time grid, broadening and frequency window of a one-dimensional spectrum."""

    tmax1: int
    deltat: float
    shift: float
    min1: float
    max1: float
    fft: int = 0
    lifetime: float = 0.0
    homogen: float = 0.0
    inhomogen: float = 0.0

    def __post_init__(self) -> None:
        if self.tmax1 <= 0:
            raise ValueError("tmax1 must be positive")
        if self.deltat <= 0:
            raise ValueError("deltat must be positive")

    @property
    def points(self) -> int:
        """Length of the transform; never shorter than the response."""
        return max(self.fft, self.tmax1)


class Spectrum1D(NamedTuple):
    """Frequencies in the window and the spectrum, one column per projection."""

    frequencies: np.ndarray
    real: np.ndarray
    imag: np.ndarray


def apodize(signal, deltat, lifetime=0.0, homogen=0.0, inhomogen=0.0) -> np.ndarray:
    """Multiply a time signal by lifetime, homogeneous and inhomogeneous decays.

    A non-positive time constant leaves its decay out.
    """
    signal = np.asarray(signal)
    t = np.arange(signal.shape[-1]) * deltat
    factor = np.ones(t.shape)
    if lifetime > 0.0:
        factor *= np.exp(-t / (2 * lifetime))
    if homogen > 0.0:
        factor *= np.exp(-t / (2 * homogen))
    if inhomogen > 0.0:
        factor *= np.exp(-t * t / (2 * inhomogen * inhomogen))
    return signal * factor


def frequency_axis(fft, deltat, shift) -> tuple[np.ndarray, np.ndarray]:
    """Return transform indices in output order and their frequencies in cm-1.

    Negative frequency offsets come first, so frequencies rise along the result.
    """
    half = fft // 2
    order = np.concatenate([np.arange(half, fft), np.arange(0, half)])
    offsets = np.where(order >= half, order - fft, order)
    return order, offsets / (deltat * C_V * fft) + shift


def _as_blocks(values) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim == 1:
        return arr[np.newaxis, :]
    if arr.ndim != 2:
        raise ValueError("response must be one- or two-dimensional")
    return arr


def spectrum_1d(re_s, im_s, samples, settings: Spectrum1DSettings) -> Spectrum1D:
    """Fourier transform an averaged linear response into a spectrum.

    The response may be a single series or one row per projection segment.
    """
    if samples == 0:
        raise ValueError("number of samples must be non-zero")
    re = _as_blocks(re_s)
    im = _as_blocks(im_s)
    if re.shape != im.shape:
        raise ValueError("real and imaginary responses differ in shape")
    tmax1 = settings.tmax1
    if re.shape[1] < tmax1:
        raise ValueError(f"response holds {re.shape[1]} points, {tmax1} needed")

    n = settings.points
    signal = np.zeros((re.shape[0], n), dtype=complex)
    signal[:, :tmax1] = apodize(
        (im[:, :tmax1] + 1j * re[:, :tmax1]) / samples,
        settings.deltat,
        settings.lifetime,
        settings.homogen,
        settings.inhomogen,
    )
    signal[:, 0] *= 0.5
    out = np.fft.fft(signal, axis=1)

    order, freqs = frequency_axis(n, settings.deltat, settings.shift)
    keep = (freqs > settings.min1) & (freqs < settings.max1)
    rows = order[keep]
    return Spectrum1D(freqs[keep], out.imag[:, rows].T, out.real[:, rows].T)


def write_spectrum_1d(path, re_s, im_s, samples, settings: Spectrum1DSettings) -> Spectrum1D:
    """Compute the spectrum and write it as text, one frequency per line."""
    spectrum = spectrum_1d(re_s, im_s, samples, settings)
    with open(Path(path), "w", encoding="utf-8") as out:
        for freq, reals, imags in zip(spectrum.frequencies, spectrum.real, spectrum.imag):
            values = "".join(f"{r:e} {i:e} " for r, i in zip(reals, imags))
            out.write(f"{freq:f} {values}\n")
    return spectrum