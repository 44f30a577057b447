"""Tests for dgt module."""

import numpy as np
import pytest

from gabframe.dgt import DGT, dgt, idgt
from gabframe.errors import BadArgumentError, NotAFrameError
from gabframe.gabdual import gabdual_long
from gabframe.windows import fir2long, firwin


def _dgt_direct(f, g, a, M):
    L = len(f)
    l = np.arange(L)
    c = np.zeros((M, L // a), dtype=complex)
    for n in range(L // a):
        for m in range(M):
            c[m, n] = np.sum(f * np.conj(g[(l - n * a) % L]) * np.exp(-2j * np.pi * m * l / M))
    return c


@pytest.mark.parametrize("L,a,M", [(12, 3, 4), (24, 4, 6), (16, 2, 8)])
def test_dgt_matches_definition(rng, L, a, M):
    f = rng.standard_normal(L) + 1j * rng.standard_normal(L)
    g = rng.standard_normal(L) + 1j * rng.standard_normal(L)
    c = dgt(f, g, a, M)
    assert c.shape == (M, L // a)
    np.testing.assert_allclose(c, _dgt_direct(f, g, a, M), atol=1e-10)


def test_idgt_is_adjoint(rng):
    L, a, M = 24, 4, 6
    g = rng.standard_normal(L) + 1j * rng.standard_normal(L)
    f = rng.standard_normal(L) + 1j * rng.standard_normal(L)
    c = rng.standard_normal((M, L // a)) + 1j * rng.standard_normal((M, L // a))
    lhs = np.vdot(c, dgt(f, g, a, M))
    rhs = np.vdot(idgt(c, g, a), f)
    assert lhs == pytest.approx(rhs)


def test_multichannel_signal(rng):
    L, a, M = 24, 4, 6
    g = firwin("hann", 12)
    f = rng.standard_normal((L, 3))
    c = dgt(f, g, a, M)
    assert c.shape == (M, L // a, 3)
    for w in range(3):
        np.testing.assert_allclose(c[:, :, w], dgt(f[:, w], g, a, M))
    assert idgt(c, g, a).shape == (L, 3)


def test_processor_reconstructs_with_dual(rng):
    L, a, M = 48, 4, 8
    g = fir2long(firwin("blackman", 16), L)
    gd = gabdual_long(g, L, 1, a, M)
    f = rng.standard_normal(L)

    analysis = DGT(firwin("blackman", 16), a, M, L=L)
    synthesis = DGT(gd, a, M)
    np.testing.assert_allclose(synthesis.inverse(analysis.transform(f)), f, atol=1e-10)


def test_short_window_equals_lifted_window(rng):
    L, a, M = 24, 4, 6
    g = firwin("hamming", 9)
    f = rng.standard_normal(L)
    np.testing.assert_allclose(dgt(f, g, a, M), dgt(f, fir2long(g, L), a, M))


def test_dgt_errors():
    g = firwin("hann", 8)
    with pytest.raises(BadArgumentError):
        dgt(np.ones(10), g, 3, 4)
    with pytest.raises(BadArgumentError):
        dgt(np.ones(12), np.ones(24), 3, 4)
    with pytest.raises(BadArgumentError):
        DGT(np.ones((4, 2)), 2, 4)
    with pytest.raises(NotAFrameError):
        DGT(g, 4, 2, L=8)
    with pytest.raises(BadArgumentError):
        DGT(g, 3, 4, L=12).transform(np.ones(24))
    with pytest.raises(BadArgumentError):
        DGT(g, 3, 4).inverse(np.ones((5, 4)))
