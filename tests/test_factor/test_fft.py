"""Tests for factor.fft module."""

import numpy as np
import pytest

from gabframe.config import config_context
from gabframe.errors import NullArgError, PlanCreationError
from gabframe.factor.fft import (
    Direction,
    FFTBackend,
    NumpyBackend,
    PlanFlag,
    TorchBackend,
    available_backends,
    dft_matrix,
    get_backend,
    plan_dft_1d,
    register_backend,
)


def _random_buffer(rng, d):
    return rng.standard_normal(d) + 1j * rng.standard_normal(d)


@pytest.mark.parametrize("flag", [PlanFlag.ESTIMATE, PlanFlag.MEASURE])
@pytest.mark.parametrize("backend", ["numpy", "torch"])
def test_forward_plan_matches_numpy_fft(rng, flag, backend):
    x = _random_buffer(rng, 12)
    buf = x.copy()
    plan = plan_dft_1d(buf, Direction.FORWARD, flag, backend)
    plan.execute()
    np.testing.assert_allclose(buf, np.fft.fft(x), atol=1e-12)


@pytest.mark.parametrize("backend", ["numpy", "torch"])
def test_backward_plan_is_unnormalized(rng, backend):
    x = _random_buffer(rng, 10)
    buf = x.copy()
    with plan_dft_1d(buf, Direction.BACKWARD, "estimate", backend) as plan:
        plan.execute()
    np.testing.assert_allclose(buf, 10 * np.fft.ifft(x), atol=1e-12)


def test_plan_transforms_its_own_buffer_in_place(rng):
    buf = np.zeros(8, dtype=np.complex128)
    plan = plan_dft_1d(buf, Direction.FORWARD, "estimate")
    assert plan.buffer is buf
    buf[0] = 1.0
    plan.execute()
    np.testing.assert_allclose(buf, np.ones(8))


def test_dft_matrix_matches_fft(rng):
    x = _random_buffer(rng, 7)
    np.testing.assert_allclose(dft_matrix(7, Direction.FORWARD) @ x, np.fft.fft(x), atol=1e-12)
    np.testing.assert_allclose(
        dft_matrix(7, Direction.BACKWARD) @ x, 7 * np.fft.ifft(x), atol=1e-12
    )


def test_measure_selects_a_known_kernel():
    buf = np.zeros(16, dtype=np.complex128)
    plan = plan_dft_1d(buf, Direction.FORWARD, PlanFlag.MEASURE, "numpy")
    assert plan.kernel_name in ("numpy", "matrix")


def test_length_one_plan():
    buf = np.array([3.0 + 1.0j])
    plan = plan_dft_1d(buf, Direction.FORWARD, "estimate")
    plan.execute()
    assert buf[0] == 3.0 + 1.0j


def test_destroyed_plan():
    buf = np.zeros(4, dtype=np.complex128)
    plan = plan_dft_1d(buf, Direction.FORWARD, "estimate")
    plan.destroy()
    assert plan.destroyed
    with pytest.raises(NullArgError):
        plan.execute()
    with pytest.raises(NullArgError):
        plan.buffer


def test_null_buffer():
    with pytest.raises(NullArgError):
        plan_dft_1d(None, Direction.FORWARD)


@pytest.mark.parametrize(
    "buf",
    [
        np.zeros(4, dtype=np.float64),
        np.zeros((2, 2), dtype=np.complex128),
        np.zeros(0, dtype=np.complex128),
        np.zeros(8, dtype=np.complex128)[::2],
        [0j, 0j],
    ],
)
def test_unsuitable_buffer(buf):
    with pytest.raises(PlanCreationError):
        plan_dft_1d(buf, Direction.FORWARD)


def test_unknown_flag_and_backend():
    buf = np.zeros(4, dtype=np.complex128)
    with pytest.raises(PlanCreationError):
        plan_dft_1d(buf, Direction.FORWARD, "patient")
    with pytest.raises(PlanCreationError):
        plan_dft_1d(buf, Direction.FORWARD, "estimate", "fftw")


def test_flag_coercion_uses_config():
    assert PlanFlag.coerce("ESTIMATE") is PlanFlag.ESTIMATE
    with config_context(plan_flag="estimate"):
        assert PlanFlag.coerce(None) is PlanFlag.ESTIMATE
    with config_context(plan_flag="measure"):
        assert PlanFlag.coerce(None) is PlanFlag.MEASURE


def test_backend_registry():
    assert {"numpy", "torch"} <= set(available_backends())
    assert isinstance(get_backend("numpy"), NumpyBackend)
    assert isinstance(get_backend("TORCH"), TorchBackend)
    with config_context(fft_backend="torch"):
        assert isinstance(get_backend(), TorchBackend)


def test_kernel_failure_becomes_plan_creation_error():
    class Broken(FFTBackend):
        name = "broken"

        def kernel(self, d, direction):
            raise RuntimeError("no kernel")

    register_backend("broken", Broken)
    buf = np.zeros(4, dtype=np.complex128)
    with pytest.raises(PlanCreationError, match="no kernel"):
        plan_dft_1d(buf, Direction.FORWARD, "estimate", "broken")


def test_unimportable_backend():
    def factory():
        raise ImportError("missing")

    register_backend("missing", factory)
    with pytest.raises(PlanCreationError):
        get_backend("missing")
