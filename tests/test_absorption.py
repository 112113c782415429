import numpy as np
import pytest

from nisespec.absorption import accumulate_s1, write_td_absorption


def test_accumulate_adds_dot_product():
    re = np.zeros(3)
    im = np.zeros(3)
    added = accumulate_s1(re, im, 1, [3.0, 4.0], [0.0, 1.0], [1.0, 2.0])
    assert added == (11.0, 2.0)
    assert re[1] == 11.0
    assert im[1] == 2.0
    assert re[0] == 0.0 and re[2] == 0.0


def test_accumulate_twice_doubles():
    re = np.zeros(2)
    im = np.zeros(2)
    args = ([0.5, -1.5], [2.0, 0.25], [1.0, 3.0])
    accumulate_s1(re, im, 0, *args)
    first = (re[0], im[0])
    accumulate_s1(re, im, 0, *args)
    assert re[0] == pytest.approx(2 * first[0])
    assert im[0] == pytest.approx(2 * first[1])


def test_write_td_absorption_single(tmp_path):
    path = tmp_path / "TD_Absorption.dat"
    re = np.arange(6.0)
    im = -np.arange(6.0)
    write_td_absorption(path, re, im, 2, 6, 2, 0.5)
    data = np.loadtxt(path)
    assert data.shape == (3, 3)
    assert np.allclose(data[:, 0], [0.0, 1.0, 2.0])
    assert np.allclose(data[:, 1], re[::2] / 2)
    assert np.allclose(data[:, 2], im[::2] / 2)


def test_write_td_absorption_projections(tmp_path):
    path = tmp_path / "td.dat"
    re = np.vstack([np.ones(4), 3 * np.ones(4)])
    im = np.zeros((2, 4))
    write_td_absorption(path, re, im, 1, 4, 1, 1.0)
    data = np.loadtxt(path)
    assert data.shape == (4, 5)
    assert np.allclose(data[:, 3], 3 * data[:, 1])


def test_write_td_absorption_bad_increment(tmp_path):
    with pytest.raises(ValueError):
        write_td_absorption(tmp_path / "x.dat", [1.0], [0.0], 1, 1, 0, 1.0)