"""NISE spectroscopy helpers: model trajectories, Hamiltonian analysis,
linear response bookkeeping and 1D/2D spectral Fourier transforms."""

__version__ = "3.1.0"

__all__ = [
    "absorption",
    "analysis",
    "fft1d",
    "fft2d",
    "fft2d_input",
    "stochastic",
    "subs",
    "workset",
]