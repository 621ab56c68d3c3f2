"""Indicator math: EMA seeding, Wilder RSI, rolling windows and volatility."""

import pytest

from trend_signal.core.errors import InsufficientDataError
from trend_signal.core.types import MarketSnapshot
from trend_signal.engine.indicators import (
    compute_indicators,
    ema,
    rolling_average,
    rsi,
    volatility,
    volume_ratio,
)
from trend_signal.engine.params import IndicatorPeriods


def test_ema_seeds_with_simple_average() -> None:
    """With exactly ``period`` values the EMA is their plain mean."""

    assert ema([1.0, 2.0, 3.0, 4.0, 5.0], 5) == pytest.approx(3.0)


def test_ema_applies_smoothing_after_seed() -> None:
    """k = 2 / (period + 1) blends each later value into the running average."""

    # seed 3.0, k = 1/3 -> 6/3 + 3 * 2/3 = 4.0
    assert ema([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], 5) == pytest.approx(4.0)


_FLAT_PRICES = (100.1, 0.3, 1.1, 3.7, 27123.45, 42.5)


@pytest.mark.parametrize("price", _FLAT_PRICES)
def test_ema_of_constant_series_is_exactly_the_constant(price: float) -> None:
    """A flat series has no deviation to smooth, so no rounding creeps in."""

    values = [price] * 80
    assert ema(values, 10) == price
    assert ema(values, 50) == price
    assert rolling_average(values, 30) == price


def test_ema_rejects_short_series() -> None:
    """Fewer values than the period cannot seed the average."""

    with pytest.raises(InsufficientDataError) as excinfo:
        ema([1.0, 2.0, 3.0], 10)
    assert excinfo.value.required == 10
    assert excinfo.value.available == 3


def test_ema_rejects_non_positive_period() -> None:
    """Period zero is a programming error, not a data error."""

    with pytest.raises(ValueError):
        ema([1.0, 2.0], 0)


def test_rsi_of_flat_series_is_fifty() -> None:
    """No gains and no losses reads as balanced."""

    assert rsi([100.0] * 30, 14) == 50.0


def test_rsi_is_hundred_without_losses() -> None:
    """A monotonically rising series has a zero average loss."""

    assert rsi([float(value) for value in range(1, 40)], 14) == 100.0


def test_rsi_is_zero_without_gains() -> None:
    """A monotonically falling series has a zero average gain."""

    assert rsi([float(value) for value in range(40, 1, -1)], 14) == 0.0


def test_rsi_balanced_initial_window() -> None:
    """Equal average gain and loss over the first window gives 50."""

    values = [100.0]
    for idx in range(14):
        values.append(values[-1] + (1.0 if idx % 2 == 0 else -1.0))
    assert rsi(values, 14) == pytest.approx(50.0)


def test_rsi_uses_wilder_smoothing_after_first_window() -> None:
    """Later differences update averages as (avg * (n - 1) + x) / n."""

    # diffs +1, -1, +2 with period 2: gain 1.25, loss 0.25 -> RS 5
    assert rsi([1.0, 2.0, 1.0, 3.0], 2) == pytest.approx(100.0 - 100.0 / 6.0)


def test_rsi_stays_within_bounds() -> None:
    """Mixed moves never escape [0, 100]."""

    values = [100.0 + ((idx * 37) % 11) - ((idx * 13) % 7) for idx in range(120)]
    value = rsi(values, 14)
    assert 0.0 <= value <= 100.0


def test_rsi_requires_period_plus_one_values() -> None:
    """RSI needs ``period`` differences, so ``period + 1`` values."""

    with pytest.raises(InsufficientDataError):
        rsi([1.0] * 14, 14)


def test_rolling_average_uses_trailing_window() -> None:
    """Only the last ``window`` values contribute."""

    assert rolling_average([1.0, 2.0, 3.0, 4.0], 2) == pytest.approx(3.5)


def test_volatility_averages_relative_changes() -> None:
    """Each step contributes |x[i] - x[i-1]| / x[i-1]."""

    assert volatility([100.0, 110.0, 99.0], 2) == pytest.approx(0.1)


def test_volatility_skips_zero_previous_values() -> None:
    """A zero base price has no defined relative change."""

    assert volatility([0.0, 5.0, 10.0], 2) == pytest.approx(1.0)
    assert volatility([0.0, 0.0], 1) == 0.0


def test_volume_ratio_relative_to_trailing_mean() -> None:
    """Latest volume is divided by the window average, which includes it."""

    assert volume_ratio([1.0, 1.0, 1.0, 4.0], 4) == pytest.approx(4.0 / 1.75)


def test_volume_ratio_with_zero_volume_window() -> None:
    """An all-zero window reads as no volume at all."""

    assert volume_ratio([0.0] * 5, 5) == 0.0


def test_compute_indicators_refuses_misaligned_volumes() -> None:
    """Closes and volumes must pair up one to one."""

    snapshot = MarketSnapshot(symbol="BTCUSDT", closes=(1.0,) * 60, volumes=(1.0,) * 59)
    with pytest.raises(InsufficientDataError):
        compute_indicators(snapshot, IndicatorPeriods())


def test_compute_indicators_refuses_short_snapshot() -> None:
    """The longest configured window bounds the minimum snapshot length."""

    periods = IndicatorPeriods(short_ema=5, long_ema=20, rsi=14, volume_window=10)
    snapshot = MarketSnapshot(symbol="BTCUSDT", closes=(1.0,) * 19, volumes=(1.0,) * 19)
    with pytest.raises(InsufficientDataError) as excinfo:
        compute_indicators(snapshot, periods)
    assert excinfo.value.required == 20


def test_required_window_covers_every_indicator() -> None:
    """RSI and volatility need one more value than their period."""

    assert IndicatorPeriods().required_window == 50
    assert IndicatorPeriods(short_ema=3, long_ema=5, rsi=14).required_window == 30
    assert IndicatorPeriods(short_ema=3, long_ema=5, rsi=40).required_window == 41
