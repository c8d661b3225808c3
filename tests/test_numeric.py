import pytest

from torusfhe.numeric import (
    approx_phase,
    dtot32,
    gaussian32,
    mod_switch_from_torus32,
    mod_switch_to_torus32,
    set_seed,
    t32tod,
    to_int32,
    uniform_torus32,
)

INT32_EDGES = [0, 1, -1, 12345, -98765, 2**31 - 1, -(2**31)]


@pytest.mark.parametrize("x", INT32_EDGES)
def test_to_int32_wraps_modulo_two_pow_32(x):
    assert to_int32(x) == x
    assert to_int32(x + 2**32) == x
    assert to_int32(x - 2**32) == x
    assert to_int32(x + 5 * 2**32) == x


def test_set_seed_makes_draws_repeatable():
    set_seed([1, 2, 3])
    first = [uniform_torus32() for _ in range(20)]
    set_seed([1, 2, 3])
    second = [uniform_torus32() for _ in range(20)]
    set_seed([4, 5, 6])
    third = [uniform_torus32() for _ in range(20)]
    assert first == second
    assert first != third
    assert all(-(2**31) <= v < 2**31 for v in first + third)


def test_uniform_torus32_spreads_over_range():
    set_seed([42])
    draws = [uniform_torus32() for _ in range(2000)]
    assert min(draws) >= -(2**31)
    assert max(draws) <= 2**31 - 1
    assert len(set(draws)) > 1990
    assert any(v < 0 for v in draws) and any(v > 0 for v in draws)


@pytest.mark.parametrize("message", INT32_EDGES)
def test_gaussian32_without_noise_returns_message(message):
    assert gaussian32(message, 0.0) == message


def test_gaussian32_small_noise_stays_close():
    set_seed([7])
    for message in INT32_EDGES:
        value = gaussian32(message, 1e-6)
        assert -(2**31) <= value < 2**31
        assert abs(t32tod(to_int32(value - message))) < 1e-4


def test_pinned_values():
    assert mod_switch_to_torus32(1, 8) == 2**29
    assert t32tod(2**30) == 0.25
    assert dtot32(0.5) == -(2**31)


@pytest.mark.parametrize("x", INT32_EDGES)
def test_dtot32_inverts_t32tod(x):
    assert dtot32(t32tod(x)) == x


@pytest.mark.parametrize("d", [0.0, 0.125, -0.375, 0.3, -0.2])
def test_dtot32_ignores_integer_part(d):
    assert dtot32(d + 3) == dtot32(d)
    assert dtot32(d - 7) == dtot32(d)
    assert dtot32(d + 1) == dtot32(d - 1)


def test_dtot32_negative_and_positive_agree_on_torus():
    assert dtot32(-0.75) == dtot32(0.25)
    assert abs(t32tod(dtot32(0.3)) - 0.3) < 1e-9


@pytest.mark.parametrize("msize", [2, 3, 7, 8, 16, 1024])
def test_mod_switch_round_trip(msize):
    for mu in range(msize):
        t = mod_switch_to_torus32(mu, msize)
        assert mod_switch_from_torus32(t, msize) == mu
        assert approx_phase(t, msize) == t


@pytest.mark.parametrize("msize", [2, 4, 8])
def test_approx_phase_removes_small_noise(msize):
    for mu in range(msize):
        t = mod_switch_to_torus32(mu, msize)
        for noise in (-1000, -1, 1, 1000):
            noisy = to_int32(t + noise)
            assert approx_phase(noisy, msize) == t
            assert mod_switch_from_torus32(noisy, msize) % msize == mu


@pytest.mark.parametrize("msize", [4, 8, 16])
def test_mod_switch_negative_messages(msize):
    for mu in range(1, msize):
        t = mod_switch_to_torus32(-mu, msize)
        assert t == to_int32(-mod_switch_to_torus32(mu, msize))
        assert mod_switch_from_torus32(t, msize) == msize - mu


@pytest.mark.parametrize("msize", [0, -3])
def test_invalid_message_space_raises(msize):
    with pytest.raises(ValueError):
        approx_phase(0, msize)
    with pytest.raises(ValueError):
        mod_switch_from_torus32(0, msize)
    with pytest.raises(ValueError):
        mod_switch_to_torus32(1, msize)