"""Tests for factor.layout module."""

import numpy as np
import pytest

from gabframe.errors import BadArgumentError, NotPositiveArgError
from gabframe.factor.lattice import lattice
from gabframe.factor.layout import FactorLayout, time_indices

LATTICES = [(12, 3, 4), (48, 4, 8), (120, 10, 12), (24, 3, 8), (36, 6, 9), (8, 4, 4)]


@pytest.mark.parametrize("L,a,M", LATTICES)
def test_time_indices_cover_each_residue_class_once(L, a, M):
    lat = lattice(L, a, M)
    rem = time_indices(lat)
    assert rem.shape == (lat.q, lat.p, lat.d)
    assert np.all(rem % lat.c == 0)
    np.testing.assert_array_equal(np.sort(rem.ravel()), np.arange(0, L, lat.c))


def test_time_indices_are_read_only():
    rem = time_indices(lattice(12, 3, 4))
    with pytest.raises(ValueError):
        rem[0, 0, 0] = 1


@pytest.mark.parametrize("R", [1, 3])
def test_shape_and_strides(R):
    lat = lattice(48, 4, 8)
    layout = FactorLayout(lat, R)
    assert layout.shape == (lat.d, lat.c, R, lat.q, lat.p)
    assert layout.size == 48 * R
    assert layout.ld3 == lat.c * lat.p * lat.q * R

    gf = np.zeros(layout.shape, dtype=np.complex128)
    item = gf.itemsize
    assert tuple(s // item for s in gf.strides) == layout.strides


def test_slot_offsets_match_storage():
    lat = lattice(120, 10, 12)
    layout = FactorLayout(lat, 2)
    flat = np.arange(layout.size)
    gf = layout.view(flat)
    for r, w, l, k in layout.slots():
        offset = layout.slot_offset(r, w, l, k)
        assert gf[0, r, w, l, k] == offset
        assert gf[1, r, w, l, k] == offset + layout.ld3


def test_slots_enumerate_every_slot():
    lat = lattice(48, 4, 8)
    slots = list(FactorLayout(lat, 2).slots())
    assert len(slots) == lat.c * 2 * lat.q * lat.p
    assert len(set(slots)) == len(slots)


def test_view_rejects_wrong_size():
    layout = FactorLayout(lattice(12, 3, 4), 1)
    with pytest.raises(BadArgumentError):
        layout.view(np.zeros(11, dtype=complex))


def test_non_positive_window_count():
    with pytest.raises(NotPositiveArgError):
        FactorLayout(lattice(12, 3, 4), 0)


@pytest.mark.parametrize("multiwin", [False, True])
def test_matrices_roundtrip(rng, multiwin):
    lat = lattice(120, 10, 12)
    layout = FactorLayout(lat, 2)
    gf = rng.standard_normal(layout.shape) + 1j * rng.standard_normal(layout.shape)

    G = layout.matrices(gf, multiwin=multiwin)
    if multiwin:
        assert G.shape == (lat.d, lat.c, lat.p, 2 * lat.q)
        np.testing.assert_array_equal(G[..., lat.q :], np.swapaxes(gf[:, :, 1], -1, -2))
    else:
        assert G.shape == (lat.d, lat.c, 2, lat.p, lat.q)
    np.testing.assert_array_equal(layout.from_matrices(G, multiwin=multiwin), gf)
