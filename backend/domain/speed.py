"""
Speed tiers and the score-driven tick interval curve.
"""

from typing import Dict, NamedTuple


class SpeedTier(NamedTuple):
    label: str
    start_interval_ms: int
    decrement_per_step: int
    floor_ms: int


BEGINNER = SpeedTier("Beginner", 500, 10, 200)
NORMAL = SpeedTier("Normal", 350, 15, 120)
EXPERT = SpeedTier("Expert", 250, 20, 80)

SPEED_TIERS: Dict[str, SpeedTier] = {
    tier.label.upper(): tier for tier in (BEGINNER, NORMAL, EXPERT)
}

# Every this many points the interval shrinks by one decrement
POINTS_PER_STEP = 3


def get_tier(label: str) -> SpeedTier:
    """
    Look up a speed tier by label (case-insensitive).

    Raises:
        ValueError: If the label does not name a known tier
    """
    try:
        return SPEED_TIERS[label.strip().upper()]
    except KeyError:
        valid = ", ".join(t.label for t in SPEED_TIERS.values())
        raise ValueError(f"Unknown speed tier '{label}'. Expected one of: {valid}") from None


def next_interval_ms(tier: SpeedTier, score: int) -> int:
    """Tick interval for the given score, never below the tier floor."""
    steps = max(score, 0) // POINTS_PER_STEP
    return max(tier.floor_ms, tier.start_interval_ms - steps * tier.decrement_per_step)
