from __future__ import annotations

import pytest

from lanotify.config import ClassifierConfig
from lanotify.core.classifier import Regime, classify, deviation_ratio, select_regime
from lanotify.core.window import SampleWindow


def feed(window: SampleWindow, belief: bool, samples) -> list[bool]:
    """Push samples one round at a time, returning the belief after each."""
    beliefs = []
    for sample in samples:
        window.push(sample)
        belief = classify(window, belief)
        beliefs.append(belief)
    return beliefs


def duty_cycle(every: int, capacity: int = 30) -> list[bool]:
    return [i % every == 0 for i in range(capacity)]


@pytest.mark.parametrize("prior", [True, False])
def test_immature_window_keeps_prior(prior):
    assert classify(SampleWindow(30, [False] * 29), prior) is prior
    assert classify(SampleWindow(30, [True] * 29), prior) is prior


@pytest.mark.parametrize("prior", [True, False])
def test_always_seen_device_is_online(prior):
    assert classify(SampleWindow(30, [True] * 30), prior) is True


def test_select_regime_boundaries():
    assert select_regime(0.0) is Regime.SPARSE
    assert select_regime(0.3) is Regime.SPARSE
    assert select_regime(0.5) is Regime.INTERMITTENT
    assert select_regime(0.8) is Regime.ALWAYS_ON
    assert select_regime(1.0) is Regime.ALWAYS_ON


def test_deviation_ratio():
    assert deviation_ratio(0.5, 1.0, 0.0) == -0.5
    assert deviation_ratio(0.0, 0.0, 0.01) == 0.0


def test_always_on_device_survives_short_gap_then_goes_offline():
    window = SampleWindow(30, [True] * 30)

    assert feed(window, True, [False] * 3) == [True, True, True]

    beliefs = feed(window, True, [False] * 30)
    # 16 silent rounds in total exceed half the window
    assert beliefs.index(False) == 12
    assert all(belief is False for belief in beliefs[12:])


def test_offline_device_needs_a_sighting_to_come_back():
    window = SampleWindow(30, [False] * 30)

    assert feed(window, False, [False] * 10) == [False] * 10
    assert feed(window, False, [True]) == [True]


def test_always_on_device_dropping_below_baseline_goes_offline():
    config = ClassifierConfig(capacity=60, recent_window=10)
    # seen this round, but only 2 of the last 10 against a baseline of ~87%
    window = SampleWindow(60, [True, True] + [False] * 8 + [True] * 50)

    assert select_regime(window.base_rate(), config) is Regime.ALWAYS_ON
    assert classify(window, True, config) is False


def test_always_on_device_with_small_dip_stays_online():
    config = ClassifierConfig(capacity=60, recent_window=10)
    window = SampleWindow(60, [True] * 5 + [False] * 5 + [True] * 50)

    assert classify(window, True, config) is True


def test_sparse_device_goes_offline_only_after_full_window_of_silence():
    window = SampleWindow(30, duty_cycle(10))
    assert window.base_rate() == 0.1

    beliefs = feed(window, True, [False] * 30)

    assert beliefs[:29] == [True] * 29
    assert beliefs[29] is False


def test_sparse_device_missing_one_round_stays_online():
    window = SampleWindow(30, duty_cycle(10))

    assert feed(window, True, [False]) == [True]


def test_sparse_device_keeps_prior_between_thresholds():
    # last seen 7 rounds ago: neither fresh nor silent for the whole window
    window = SampleWindow(30, [False] * 7 + [True] + [False] * 22)

    assert classify(window, True) is True
    assert classify(window, False) is False


def test_sparse_device_fresh_sighting_goes_online():
    window = SampleWindow(30, [False, True] + [False] * 28)

    assert classify(window, False) is True


def test_intermittent_device_thresholds():
    quiet = SampleWindow(30, [False] * 16 + [True] * 14)
    recent = SampleWindow(30, [False] * 15 + [True] * 15)

    assert select_regime(quiet.base_rate()) is Regime.INTERMITTENT
    assert classify(quiet, True) is False
    assert classify(recent, False) is True
