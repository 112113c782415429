"""Linear absorption response accumulation and its time-domain output."""

from __future__ import annotations

from pathlib import Path

import numpy as np


def accumulate_s1(re_s, im_s, t1, cr, ci, mu) -> tuple[float, float]:
    """Add the overlap of the dipole with a propagated vector at time t1.

    The response arrays are updated in place; the added amounts are returned.
    """
    mu = np.asarray(mu, dtype=float)
    dre = float(mu @ np.asarray(cr, dtype=float))
    dim = float(mu @ np.asarray(ci, dtype=float))
    re_s[t1] += dre
    im_s[t1] += dim
    return dre, dim


def write_td_absorption(path, re_s, im_s, samples, tmax1, dt1, deltat) -> None:
    """Write the sample-averaged time-domain response, one time per line."""
    if dt1 <= 0:
        raise ValueError("time increment must be positive")
    if samples == 0:
        raise ValueError("number of samples must be non-zero")
    re = np.atleast_2d(np.asarray(re_s, dtype=float))
    im = np.atleast_2d(np.asarray(im_s, dtype=float))
    if re.shape != im.shape:
        raise ValueError("real and imaginary responses differ in shape")
    with open(Path(path), "w", encoding="utf-8") as out:
        for t1 in range(0, tmax1, dt1):
            values = "".join(
                f"{r[t1] / samples:e} {i[t1] / samples:e} " for r, i in zip(re, im)
            )
            out.write(f"{t1 * deltat:f} {values}\n")