# tests/sde/test_sde_bm.py
import numpy as np
import pytest

from exact_sde import (
    DimensionMismatch,
    InvalidOptions,
    InvalidParameter,
    NegativeDiffusion,
    RandContractKind,
    RandGeneratorContractViolation,
    SDEOptions,
    TooManyOutputsRequested,
    sde_bm,
)

T = np.linspace(0.0, 1.0, 101)


def never_called(count, width):
    raise AssertionError("rand_fn must not be called")


def ones_fn(count, width):
    return np.ones((count, width))


def test_bm_zero_drift_reconstructs_from_noise():
    y0 = np.array([1.0, 2.0, -3.0])
    sigma = np.array([0.1, 0.5, 2.0])
    res = sde_bm(0.0, sigma, T, y0, SDEOptions(rand_seed=42), return_noise=True)

    assert res.y.shape == (101, 3)
    assert res.w.shape == (101, 3)
    assert not res.w[0].any()
    np.testing.assert_array_equal(res.y[0], y0)
    np.testing.assert_array_equal(res.y, y0 + sigma * res.w)


def test_bm_zero_sigma_is_linear_drift_without_drawing():
    t = T + 2.0
    y0 = np.array([0.0, 1.0])
    mu = np.array([0.5, -1.5])
    res = sde_bm(mu, 0.0, t, y0, SDEOptions(rand_fn=never_called), return_noise=True)

    np.testing.assert_array_equal(res.y, y0 + (t - t[0])[:, None] * mu)
    np.testing.assert_array_equal(res.y[0], y0)
    assert not res.w.any()


def test_bm_zero_sigma_zero_drift_keeps_y0():
    y0 = np.array([4.0, 5.0, 6.0])
    res = sde_bm(0.0, 0.0, T, y0, SDEOptions(rand_fn=never_called))
    np.testing.assert_array_equal(res.y, np.tile(y0, (101, 1)))


def test_bm_recurrence_with_drift_and_noise():
    y0 = np.array([1.0, -1.0])
    res = sde_bm(0.3, 0.2, T, y0, SDEOptions(rand_seed=8), return_noise=True)

    expected = y0 + T[:, None] * 0.3 + 0.2 * res.w
    np.testing.assert_allclose(res.y, expected, rtol=1e-12, atol=1e-12)
    np.testing.assert_array_equal(res.y[0], y0)


def test_bm_non_uniform_grid_scales_by_step():
    t = np.linspace(0.0, 1.0, 51) ** 2
    res = sde_bm(1.0, 1.0, t, 0.0, SDEOptions(rand_fn=ones_fn), return_noise=True)

    np.testing.assert_allclose(res.w[1:, 0], np.cumsum(np.sqrt(np.diff(t))))
    np.testing.assert_allclose(res.y[:, 0], t + res.w[:, 0], rtol=1e-12)


def test_bm_decreasing_grid_runs_backwards():
    t = T[::-1]
    res = sde_bm(2.0, 0.5, t, 1.0, SDEOptions(rand_fn=ones_fn), return_noise=True)

    h = np.abs(np.diff(t))
    np.testing.assert_allclose(res.w[1:, 0], -np.cumsum(np.sqrt(h)))
    np.testing.assert_allclose(
        res.y[:, 0], 1.0 + 2.0 * (t - t[0]) + 0.5 * res.w[:, 0], atol=1e-12
    )


def test_bm_reproducible_with_seed():
    a = sde_bm(0.1, 0.3, T, [0.0, 0.0], SDEOptions(rand_seed=2025), return_noise=True)
    b = sde_bm(0.1, 0.3, T, [0.0, 0.0], SDEOptions(rand_seed=2025), return_noise=True)
    assert np.array_equal(a.y, b.y)
    assert np.array_equal(a.w, b.w)


@pytest.mark.parametrize("mu", [0.0, 0.5], ids=["driftless", "drift"])
def test_bm_scalar_and_vector_coefficients_agree(mu):
    y0 = np.array([0.0, 1.0, 2.0])
    a = sde_bm(mu, 0.2, T, y0, SDEOptions(rand_seed=3), return_noise=True)
    b = sde_bm(
        np.full(3, mu),
        np.full(3, 0.2),
        T,
        y0,
        SDEOptions(rand_seed=3),
        return_noise=True,
    )
    np.testing.assert_array_equal(a.y, b.y)
    np.testing.assert_array_equal(a.w, b.w)


def test_bm_events_with_extra_args_non_terminal():
    seen = []

    def thresholds(t, y, lo, hi):
        seen.append(t)
        return np.array([y[0] - lo, y[0] - hi]), False, 1

    res = sde_bm(
        1.0,
        0.0,
        T,
        0.0,
        SDEOptions(events_fn=thresholds),
        0.255,
        0.505,
        return_events=True,
    )

    assert res.y.shape == (101, 1)
    assert len(seen) == 101
    assert [e.step for e in res.events] == [26, 51]
    np.testing.assert_array_equal(res.ie, [0, 1])
    np.testing.assert_array_equal(res.te, [T[26], T[51]])
    np.testing.assert_array_equal(res.ye, res.y[[26, 51]])


def test_bm_event_direction_filters_crossings():
    res = sde_bm(
        -1.0,
        0.0,
        T,
        0.0,
        SDEOptions(events_fn=lambda t, y: (y[0] + 0.5, True, 1)),
        return_events=True,
    )
    assert res.events == ()
    assert res.y.shape == (101, 1)


def test_bm_event_outputs_need_events_fn():
    with pytest.raises(TooManyOutputsRequested):
        sde_bm(0.0, 1.0, T, 0.0, return_events=True)


@pytest.mark.parametrize(
    "rand_fn, kind",
    [
        (lambda n: np.zeros((n, 1)), RandContractKind.TOO_FEW_INPUTS),
        (lambda a, b, c: np.zeros((a, b)), RandContractKind.TOO_MANY_INPUTS),
        (lambda a, b: None, RandContractKind.NO_OUTPUT),
        (lambda a, b: np.zeros((a, b), dtype=int), RandContractKind.TYPE_MISMATCH),
        (lambda a, b: [[0.0] * b] * a, RandContractKind.TYPE_MISMATCH),
        (lambda a, b: np.zeros(a * b), RandContractKind.TYPE_MISMATCH),
        (lambda a, b: np.full((a, b), np.nan), RandContractKind.TYPE_MISMATCH),
        (lambda a, b: np.zeros((b, a + 1)), RandContractKind.SHAPE_MISMATCH),
    ],
)
def test_bm_rand_fn_contract(rand_fn, kind):
    with pytest.raises(RandGeneratorContractViolation) as info:
        sde_bm(0.0, 1.0, T, [0.0, 0.0], SDEOptions(rand_fn=rand_fn))
    assert info.value.kind == kind


def test_bm_rand_fn_error_is_wrapped():
    def broken(count, width):
        raise ValueError("boom")

    with pytest.raises(RandGeneratorContractViolation) as info:
        sde_bm(0.0, 1.0, T, 0.0, SDEOptions(rand_fn=broken))
    assert info.value.kind == RandContractKind.GENERATOR_ERROR
    assert isinstance(info.value.__cause__, ValueError)


def test_bm_rand_fn_with_optional_third_argument_is_accepted():
    res = sde_bm(
        0.0,
        1.0,
        T,
        0.0,
        SDEOptions(rand_fn=lambda a, b, scale=1.0: scale * np.ones((a, b))),
    )
    assert res.y.shape == (101, 1)


@pytest.mark.parametrize(
    "mu, sigma, exc",
    [
        ([], 1.0, InvalidParameter),
        (np.ones((2, 2)), 1.0, InvalidParameter),
        (1.0 + 2.0j, 1.0, InvalidParameter),
        (True, 1.0, InvalidParameter),
        ([1.0, 2.0], 1.0, DimensionMismatch),
        (0.0, -0.1, NegativeDiffusion),
    ],
)
def test_bm_invalid_coefficients(mu, sigma, exc):
    calls = []

    def counting(count, width):
        calls.append((count, width))
        return np.zeros((count, width))

    with pytest.raises(exc):
        sde_bm(mu, sigma, T, [0.0, 0.0, 0.0], SDEOptions(rand_fn=counting))
    assert calls == []


@pytest.mark.parametrize(
    "tspan",
    [[0.0], [0.0, 1.0, 0.5], [0.0, 0.0, 1.0], [0.0, np.inf]],
)
def test_bm_invalid_time_grid(tspan):
    with pytest.raises(InvalidParameter):
        sde_bm(0.0, 1.0, tspan, 0.0)


def test_bm_options_validation():
    res = sde_bm(0.0, 1.0, T, 0.0, {"rand_seed": 1})
    assert res.y.shape == (101, 1)

    with pytest.raises(InvalidOptions):
        sde_bm(0.0, 1.0, T, 0.0, {"unknown": 1})
    with pytest.raises(InvalidOptions):
        sde_bm(0.0, 1.0, T, 0.0, "fast")
    with pytest.raises(InvalidOptions):
        sde_bm(0.0, 1.0, T, 0.0, SDEOptions(diagonal_noise=False))
    with pytest.raises(InvalidOptions):
        sde_bm(0.0, 1.0, T**2, 0.0, SDEOptions(const_step=True))
