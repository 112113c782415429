[build-system]
requires = ["hatchling>=1.18"]
build-backend = "hatchling.build"

[project]
name = "nisespec"
version = "3.1.0"
description = "Helpers for NISE spectroscopy simulations: model trajectories, Hamiltonian analysis, linear response bookkeeping and 1D/2D spectral Fourier transforms."
requires-python = ">=3.10"
dependencies = [
    "numpy>=1.22",
]
keywords = [
    "spectroscopy",
    "2D IR",
    "2D electronic spectroscopy",
    "exciton",
    "NISE",
    "Fourier transform",
    "pump-probe",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Chemistry",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
nisespec-stochastic = "nisespec.stochastic:main"
nisespec-2dfft = "nisespec.fft2d:main"

[tool.hatch.build.targets.wheel]
packages = ["nisespec"]

[tool.hatch.build.targets.sdist]
include = [
    "nisespec",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
