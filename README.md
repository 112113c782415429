# nisespec

Helpers for spectroscopy simulations based on the numerical integration of
the Schrödinger equation (NISE). The package covers the steps around a
response calculation:

- **Model trajectories** – generate a stochastic two-site Hamiltonian and
  dipole trajectory as text files.
- **Hamiltonian analysis** – participation ratios, Manhattan exciton sizes,
  site frequency and coupling statistics, and site-basis density matrices.
- **Linear response** – accumulate a first-order response function, write
  it in the time domain and Fourier transform it into an absorption
  spectrum with lifetime and line-shape apodization.
- **Two-dimensional spectra** – Fourier transform rephasing (kI) and
  non-rephasing (kII) time-domain response files, add them into absorptive
  2D spectra and derive broadband pump-probe spectra.

Frequencies are in cm⁻¹ and times in femtoseconds throughout.

## Installation

```
pip install nisespec
```

Only NumPy is required. To run the test suite:

```
pip install "nisespec[test]"
pytest
```

## Command-line tools

### Stochastic model trajectory

```
nisespec-stochastic LENGTH DELTAT SIGMA TIME ANGLE DELTAW W0 J ANGLE2 [--sfg] [--seed SEED] [--output-dir DIR]
```

The nine positional arguments are: number of frames, time step, standard
deviation of the frequency fluctuations, correlation time, correlation
angle between the two sites (degrees), frequency splitting, centre
frequency, coupling and the angle of the second transition dipole
(degrees).

The command writes `Energy.txt` (frame index, site 1 energy, coupling,
site 2 energy) and `Dipole.txt` (frame index and six dipole components)
into the output directory, the current directory by default. With `--sfg`
it writes dipoles oriented for sum-frequency generation and an additional
`Alpha.txt` with fixed polarizability components. The noise comes from a
seeded random generator (`--seed`, 2511 by default), so repeated runs give
the same trajectory.

### 2D Fourier transform

```
nisespec-2dfft input.txt [--directory DIR]
```

`input.txt` is a keyword file. The keywords read are `FFT`, `Timestep`,
`Homogeneous`, `Inhomogeneous`, `Format` (`Dislin`, `Python`, `Matlab` or
`Gnuplot`), `RunTimes`, `MinFrequencies`, `MaxFrequencies` and
`Technique`; other lines are ignored. `FFT` and `Timestep` must be given,
frequencies must not be negative and each minimum must not exceed its
maximum.

From the response directory (the current directory by default) the
command reads the time-domain responses `RparI.dat`, `RperI.dat`,
`RcroI.dat` (rephasing) and `RparII.dat`, `RperII.dat`, `RcroII.dat`
(non-rephasing), applies homogeneous and inhomogeneous broadening, and
writes the frequency-domain files `Rwpar.I.dat`, `Rwpar.II.dat`, and so
on. It then writes the absorptive spectra `2D.par.dat`, `2D.per.dat`,
`2D.cro.dat` and the pump-probe spectra `PP.par.dat`, `PP.per.dat`,
`PP.cro.dat`.

- Polarizations whose response file is missing are skipped with a logged
  warning; if no non-rephasing response is found at all, the command fails.
- With `Format Matlab` only the frequency-domain files are written, as
  rows of imaginary parts, together with `waxis.dat` holding the
  first-axis frequencies; the spectra are not added.
- With `Format Gnuplot` a blank line separates the rows of the grid.
- For the `2DIRraman` techniques (`2DIRraman`, `2DIRraman1`–`3`,
  `2DIRramanI`, `2DIRramanII`) the files carry `IRraman` in their names,
  and rephasing and non-rephasing spectra are written separately to
  `2DIRraman.I.<pol>.dat` and `2DIRraman.II.<pol>.dat`, with pump-probe
  spectra in `PPIRraman.I.<pol>.dat` and `PPIRraman.II.<pol>.dat`.

The command prints the error and exits with status 1 when the input file
is missing or invalid.

## Library use

```python
import numpy as np
from nisespec.analysis import participation_ratio, spectral_participation_ratio
from nisespec.subs import sindex

# Packed upper-triangular index of Hamiltonian element (0, 1) for 2 sites
index = sindex(0, 1, 2)  # 1

# Delocalization measures for eigenvectors given as rows (state, site)
h = np.array([[1.0, 0.0], [0.0, 1.0]])
print(participation_ratio(h), spectral_participation_ratio(h))  # 2.0 2.0
```

Modules:

- `nisespec.subs` – `sindex`, `eindex`, `unit_matrix`,
  `vector_on_vector`, `matrix_on_vector`, `trans_matrix_on_vector`, the
  double-exciton dipole operators (`dipole_double`,
  `dipole_double_ground`, `dipole_double_es`, `dipole_double_last`,
  `dipole_double_last_es`), periodic distances (`distance`, `distance_x`,
  `distance3`, `distance3_x`, `pbc1`), `generate_cs` for a random
  orthonormal frame, `log_item`, `time_diff`, `mpi_time` and
  `determine_samples`, which raises `InsufficientDataError` when the
  trajectory is too short.
- `nisespec.fft1d` – `Spectrum1DSettings`, `apodize`, `frequency_axis`,
  `spectrum_1d` and `write_spectrum_1d`.
- `nisespec.absorption` – `accumulate_s1` and `write_td_absorption`.
- `nisespec.workset` – `Workset`, `calculate_workset` (all sample and
  polarization pairs, optionally restricted to one cluster),
  `split_workset`, `lifetime_factors` and `write_response_2d`.
- `nisespec.stochastic` – `TrajectoryParameters`, `generate`,
  `write_trajectory` and `main`.
- `nisespec.analysis` – `participation_ratio`,
  `local_participation_ratio`, `spectral_participation_ratio`,
  `local_spectral_participation_ratio`, `find_ceig`, `dipole_magnitude`,
  `density_matrices`, `site_statistics` (returning `SiteStatistics`),
  `write_average_hamiltonian` and `write_density_matrix`.
- `nisespec.fft2d_input` – `OutputFormat`, `FFT2DConfig`, `parse_config`,
  `load_config`, `response_file_names` and `load_time_response`.
- `nisespec.fft2d` – `write_frequency_response`,
  `read_frequency_response`, `combine_spectra`, `pump_probe`, `run` and
  `main`.

## What the package does not do

The package does not propagate wave functions along a Hamiltonian
trajectory, and it does not read binary Hamiltonian, dipole or cluster
trajectory files. It therefore has no command that computes absorption or
2D response functions from a trajectory: the time-domain response files
that `nisespec-2dfft` transforms, and the per-sample eigenvectors and
Hamiltonian frames that the analysis functions take, must be produced by
other means and passed in.