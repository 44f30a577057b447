"""Tests for runtime configuration."""

import dataclasses
import logging
from io import StringIO

import pytest

from gabframe.config import (
    Config,
    config_context,
    config_from_env,
    debug_context,
    get_config,
    is_debug_enabled,
    set_config,
    set_debug_enabled,
)
from gabframe.logging import configure_logging


def test_defaults():
    cfg = Config()
    assert cfg.fft_backend == "numpy"
    assert cfg.plan_flag == "measure"
    assert cfg.max_condition == 1e12
    assert cfg.check_real_residual is True
    assert cfg.residual_tol == 1e-8
    assert cfg.measure_repeats == 3
    assert cfg.debug is False


def test_config_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        Config().debug = True


@pytest.mark.parametrize(
    "changes",
    [
        dict(fft_backend=""),
        dict(plan_flag="patient"),
        dict(max_condition=1.0),
        dict(max_condition=float("inf")),
        dict(residual_tol=0.0),
        dict(measure_repeats=0),
    ],
)
def test_invalid_values(changes):
    with pytest.raises(ValueError):
        Config(**changes)


def test_set_config():
    cfg = set_config(plan_flag="estimate", max_condition=1e6)
    assert get_config() is cfg
    assert cfg.plan_flag == "estimate"
    assert cfg.max_condition == 1e6
    with pytest.raises(TypeError):
        set_config(unknown=1)


def test_config_context_restores():
    before = get_config()
    with config_context(fft_backend="torch") as cfg:
        assert cfg.fft_backend == "torch"
        assert get_config().fft_backend == "torch"
    assert get_config() is before


def test_config_context_restores_after_error():
    before = get_config()
    with pytest.raises(RuntimeError):
        with config_context(debug=True):
            raise RuntimeError
    assert get_config() is before


def test_debug_toggles():
    assert not is_debug_enabled()
    with debug_context():
        assert is_debug_enabled()
    assert not is_debug_enabled()
    set_debug_enabled(True)
    assert is_debug_enabled()


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("GABFRAME_FFT_BACKEND", "Torch")
    monkeypatch.setenv("GABFRAME_PLAN_FLAG", "ESTIMATE")
    monkeypatch.setenv("GABFRAME_MAX_CONDITION", "1e10")
    monkeypatch.setenv("GABFRAME_RESIDUAL_TOL", "1e-6")
    monkeypatch.setenv("GABFRAME_CHECK_RESIDUAL", "0")
    monkeypatch.setenv("GABFRAME_DEBUG", "yes")

    cfg = config_from_env()
    assert cfg.fft_backend == "torch"
    assert cfg.plan_flag == "estimate"
    assert cfg.max_condition == 1e10
    assert cfg.residual_tol == 1e-6
    assert cfg.check_real_residual is False
    assert cfg.debug is True


def test_config_from_env_defaults(monkeypatch):
    for name in ("FFT_BACKEND", "PLAN_FLAG", "MAX_CONDITION", "RESIDUAL_TOL", "CHECK_RESIDUAL", "DEBUG"):
        monkeypatch.delenv("GABFRAME_" + name, raising=False)
    assert config_from_env() == Config()


@pytest.mark.parametrize(
    "name,value,field",
    [
        ("MAX_CONDITION", "abc", "max_condition"),
        ("MAX_CONDITION", "0.5", "max_condition"),
        ("RESIDUAL_TOL", "-1", "residual_tol"),
        ("PLAN_FLAG", "patient", "plan_flag"),
    ],
)
def test_config_from_env_bad_value_falls_back(monkeypatch, name, value, field):
    monkeypatch.setenv("GABFRAME_" + name, value)
    monkeypatch.setenv("GABFRAME_DEBUG", "1")
    stream = StringIO()
    configure_logging(stream=stream)
    try:
        cfg = config_from_env()
    finally:
        configure_logging(level=logging.WARNING)

    assert getattr(cfg, field) == getattr(Config(), field)
    assert cfg.debug is True
    assert "GABFRAME_" + name in stream.getvalue()
