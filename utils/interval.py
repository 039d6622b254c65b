import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

DEFAULT_INITIAL_INTERVAL = 2
DEFAULT_MULTIPLIER = 2.5
DEFAULT_MIN_INTERVAL = 1


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; 5 * 2.5 must give 13, not 12.
    return math.floor(value + 0.5)


def next_interval(
    current_interval: Optional[int],
    was_engaged: bool = True,
    *,
    initial: int = DEFAULT_INITIAL_INTERVAL,
    multiplier: float = DEFAULT_MULTIPLIER,
    floor: int = DEFAULT_MIN_INTERVAL,
) -> int:
    """Return the spacing in days until the next review.

    An absent interval is seeded with ``initial``. A zero or negative interval
    multiplies to a non-positive value and is clamped to ``floor``. Without
    engagement the interval is kept as is.
    """
    current = initial if current_interval is None else int(current_interval)
    if not was_engaged:
        return max(floor, current)
    return max(floor, _round_half_up(current * multiplier))


@dataclass(frozen=True)
class IntervalPolicy:
    initial: int = DEFAULT_INITIAL_INTERVAL
    multiplier: float = DEFAULT_MULTIPLIER
    floor: int = DEFAULT_MIN_INTERVAL

    def next_interval(self, current_interval: Optional[int], was_engaged: bool = True) -> int:
        return next_interval(
            current_interval,
            was_engaged,
            initial=self.initial,
            multiplier=self.multiplier,
            floor=self.floor,
        )

    def next_review(self, now: datetime, interval_days: int) -> datetime:
        return now + timedelta(days=interval_days)

    def first_review(self, served_at: datetime) -> datetime:
        return self.next_review(served_at, self.initial)


def interval_policy_from_config(config: Dict[str, Any]) -> IntervalPolicy:
    schedule = config.get("schedule", {})
    return IntervalPolicy(
        initial=int(schedule.get("initial_interval_days", DEFAULT_INITIAL_INTERVAL)),
        multiplier=float(schedule.get("growth_multiplier", DEFAULT_MULTIPLIER)),
        floor=int(schedule.get("min_interval_days", DEFAULT_MIN_INTERVAL)),
    )
