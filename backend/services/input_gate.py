"""
Debounce for raw directional input.

The gate only remembers when it last let a direction through; legality of
the turn itself is decided by domain.rules.change_direction.
"""

from typing import Optional

from domain.constants import Direction

BASE_DEBOUNCE_MS = 150
MIN_DEBOUNCE_MS = 50
MAX_DEBOUNCE_MS = 300


def min_interval_for_sensitivity(sensitivity: float) -> int:
    """
    Map control sensitivity to a minimum gap between accepted inputs.

    Higher sensitivity gives a shorter gap: 150 / sensitivity, clamped to
    50-300 ms. Non-positive sensitivity gets the 300 ms ceiling.
    """
    if sensitivity <= 0:
        return MAX_DEBOUNCE_MS
    interval = int(BASE_DEBOUNCE_MS / sensitivity)
    return min(MAX_DEBOUNCE_MS, max(MIN_DEBOUNCE_MS, interval))


class InputGate:
    def __init__(self):
        self.last_accepted_at_ms: Optional[int] = None

    def accept(self, direction: Direction, now_ms: int, min_interval_ms: int) -> Optional[Direction]:
        """Return the direction if enough time has passed since the last one, else None."""
        if (
            self.last_accepted_at_ms is not None
            and now_ms - self.last_accepted_at_ms < min_interval_ms
        ):
            return None
        self.last_accepted_at_ms = now_ms
        return direction

    def reset(self) -> None:
        self.last_accepted_at_ms = None
