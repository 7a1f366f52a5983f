"""Presence classification.

Turns the noisy "seen / not seen" history of a device into a debounced
online/offline belief. Devices are split into three regimes by how often
they answer scans, each with its own rule:

* sparse devices (sleep most of the time) only go offline after a whole
  window of silence and only come back on a fresh sighting;
* intermittent devices go offline once silent for half the window;
* always-on devices go offline as soon as they drop sharply below their own
  baseline, or after ``recent_window`` silent rounds.

Everything between those edges keeps the prior belief.
"""

from __future__ import annotations

import logging
from enum import Enum

from lanotify.config import ClassifierConfig

from .window import SampleWindow

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = ClassifierConfig()


class Regime(str, Enum):
    SPARSE = "sparse"
    INTERMITTENT = "intermittent"
    ALWAYS_ON = "always_on"


def select_regime(base_rate: float, config: ClassifierConfig = DEFAULT_CONFIG) -> Regime:
    if base_rate <= config.sparse_max_rate:
        return Regime.SPARSE
    if base_rate >= config.always_on_min_rate:
        return Regime.ALWAYS_ON
    return Regime.INTERMITTENT


def deviation_ratio(recent_rate: float, base_rate: float, epsilon: float) -> float:
    """Relative change of the recent rate against the device's own baseline."""
    return (recent_rate - base_rate) / (base_rate + epsilon)


def classify(
    history: SampleWindow,
    prior_belief: bool,
    config: ClassifierConfig = DEFAULT_CONFIG,
) -> bool:
    """Return the new belief (``True`` = online) for a device."""
    if not history.is_full():
        return prior_belief

    capacity = history.capacity
    last_ping = history.index_of_last_true()
    base_rate = history.base_rate()
    recent_window = min(config.recent_window, capacity)
    recent_rate = history.recent_rate(recent_window)

    regime = select_regime(base_rate, config)

    if regime is Regime.SPARSE:
        if last_ping == capacity:
            return False
        if last_ping < recent_window // 2:
            return True
        return prior_belief

    if regime is Regime.INTERMITTENT:
        return last_ping <= capacity // 2

    if regime is Regime.ALWAYS_ON:
        ratio = deviation_ratio(recent_rate, base_rate, config.epsilon)
        dropped = ratio < config.deviation_threshold and recent_rate < config.recent_rate_floor
        if dropped or last_ping > recent_window:
            logger.debug(
                "always-on device dropped: ratio=%.2f recent=%.2f last_ping=%d",
                ratio,
                recent_rate,
                last_ping,
            )
            return False
        return True

    raise AssertionError(f"unhandled regime: {regime}")
