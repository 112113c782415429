import numpy as np
import pytest

from nisespec.analysis import (
    SiteStatistics,
    density_matrices,
    dipole_magnitude,
    find_ceig,
    local_participation_ratio,
    local_spectral_participation_ratio,
    participation_ratio,
    site_statistics,
    spectral_participation_ratio,
    write_average_hamiltonian,
    write_density_matrix,
)


def _rotation(theta):
    c, s = np.cos(theta), np.sin(theta)
    return np.array([[c, s], [-s, c]])


def test_participation_ratio_localized_states():
    assert participation_ratio(np.eye(3)) == pytest.approx(3.0)


def test_spectral_participation_ratio_localized_states():
    assert spectral_participation_ratio(np.eye(4)) == pytest.approx(4.0)


def test_participation_ratio_bounded_by_sites():
    h = _rotation(0.3)
    pr = participation_ratio(h)
    assert 2.0 <= pr <= 4.0


def test_flat_input_is_column_major():
    h = _rotation(0.4)
    assert participation_ratio(h.flatten(order="F")) == pytest.approx(participation_ratio(h))
    assert spectral_participation_ratio(h.flatten(order="F")) == pytest.approx(
        spectral_participation_ratio(h)
    )


def test_non_square_rejected():
    with pytest.raises(ValueError):
        participation_ratio(np.ones(5))


def test_local_ratio_all_states_equals_full():
    h = _rotation(0.7)
    e = np.array([-10.0, 10.0])
    assert local_participation_ratio(h, e, -100.0, 100.0, 0.0) == pytest.approx(
        participation_ratio(h)
    )
    assert local_spectral_participation_ratio(h, e, -100.0, 100.0, 0.0) == pytest.approx(
        spectral_participation_ratio(h)
    )


def test_local_ratio_window_with_shift():
    h = np.eye(3)
    e = np.array([-5.0, 0.0, 5.0])
    # window (min - shift, max - shift) = (-1, 1) keeps only the middle state
    assert local_participation_ratio(h, e, 9.0, 11.0, 10.0) == pytest.approx(1.0)
    assert local_spectral_participation_ratio(h, e, 9.0, 11.0, 10.0) == pytest.approx(1.0)
    assert local_participation_ratio(h, e, 100.0, 200.0, 0.0) == 0.0


def test_find_ceig_sums_and_count():
    h = _rotation(0.5)
    e = np.array([1.0, 2.0])
    dip2 = np.array([1.0, 1.0])
    ceig, cdos, count = find_ceig(dip2, h, e, 0.0, 10.0, 0.0)
    assert count == 2
    np.testing.assert_allclose(cdos, [1.0, 1.0])
    np.testing.assert_allclose(ceig, cdos)


def test_find_ceig_excludes_outside_window():
    h = np.eye(2)
    e = np.array([1.0, 20.0])
    ceig, cdos, count = find_ceig(np.array([3.0, 4.0]), h, e, 0.0, 10.0, 0.0)
    assert count == 1
    np.testing.assert_allclose(cdos, [1.0, 0.0])
    np.testing.assert_allclose(ceig, [3.0, 0.0])


def test_dipole_magnitude_conserves_total():
    h = _rotation(0.9)
    dipoles = np.array([[1.0, 0.5], [0.0, 2.0], [0.3, -1.0]])
    dip2 = dipole_magnitude(h, dipoles)
    assert dip2.sum() == pytest.approx(np.sum(dipoles ** 2))


def test_dipole_magnitude_identity_is_site_sum():
    dipoles = np.array([[1.0, 2.0], [0.0, 0.0], [0.0, 1.0]])
    np.testing.assert_allclose(dipole_magnitude(np.eye(2), dipoles), np.sum(dipoles ** 2, axis=0))


def test_dipole_magnitude_wrong_sites():
    with pytest.raises(ValueError):
        dipole_magnitude(np.eye(2), np.ones((3, 3)))


def test_density_matrices_orthogonal_full_is_identity():
    h = _rotation(0.2)
    e = np.array([0.0, 100.0])
    rho, local_rho, spec_rho = density_matrices(h, e, np.array([2.0, 3.0]), -1.0, 1.0, 0.0)
    np.testing.assert_allclose(rho, np.eye(2), atol=1e-12)
    np.testing.assert_allclose(local_rho, np.outer(h[0], h[0]))
    np.testing.assert_allclose(spec_rho, 2.0 * local_rho)
    np.testing.assert_allclose(local_rho, local_rho.T)


def test_site_statistics_constant_frames():
    frame = [1.0, 0.5, 2.0]
    stats = site_statistics([frame, frame, frame], 2)
    assert isinstance(stats, SiteStatistics)
    assert stats.samples == 3
    np.testing.assert_allclose(stats.average_frequency, [1.0, 2.0])
    np.testing.assert_allclose(stats.average_coupling, [0.5, 0.5])
    np.testing.assert_allclose(stats.frequency_sd, [0.0, 0.0])
    np.testing.assert_allclose(stats.coupling_sd, [0.0, 0.0])
    np.testing.assert_allclose(stats.average_hamiltonian, frame)
    assert stats.overall_average == pytest.approx(1.5)
    assert stats.overall_sd == pytest.approx(0.5)


def test_site_statistics_fluctuating_frames():
    stats = site_statistics([[0.0, 1.0, 0.0], [2.0, 3.0, 0.0]], 2)
    np.testing.assert_allclose(stats.average_frequency, [1.0, 0.0])
    np.testing.assert_allclose(stats.frequency_sd, [1.0, 0.0])
    np.testing.assert_allclose(stats.average_coupling, [2.0, 2.0])
    np.testing.assert_allclose(stats.coupling_sd, [1.0, 1.0])


def test_site_statistics_errors():
    with pytest.raises(ValueError):
        site_statistics([], 2)
    with pytest.raises(ValueError):
        site_statistics([[1.0, 2.0]], 2)


def test_write_average_hamiltonian(tmp_path):
    path = tmp_path / "Av_Hamiltonian.txt"
    average = np.array([1.0, 0.5, 2.0])
    write_average_hamiltonian(path, average, 2, 10.0)
    fields = path.read_text().split()
    assert fields[0] == "0"
    np.testing.assert_allclose([float(x) for x in fields[1:]], [11.0, 0.5, 12.0])
    np.testing.assert_allclose(average, [1.0, 0.5, 2.0])


def test_write_average_hamiltonian_wrong_size(tmp_path):
    with pytest.raises(ValueError):
        write_average_hamiltonian(tmp_path / "x.txt", [1.0, 2.0], 2, 0.0)


def test_write_density_matrix_normalized(tmp_path):
    path = tmp_path / "rho.dat"
    rho = np.array([[2.0, 1.0], [1.0, 2.0]])
    write_density_matrix(path, rho)
    data = np.loadtxt(path)
    assert data.diagonal().sum() == pytest.approx(1.0)
    np.testing.assert_allclose(data, rho / 4.0)


def test_write_density_matrix_zero_trace(tmp_path):
    with pytest.raises(ValueError):
        write_density_matrix(tmp_path / "rho.dat", np.zeros((2, 2)))