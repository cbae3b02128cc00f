"""
Tests for services/input_gate.py.
"""

import sys
import os

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import UP, LEFT
from services.input_gate import InputGate, min_interval_for_sensitivity


class TestInputGate:
    def test_first_input_is_accepted(self):
        gate = InputGate()

        assert gate.accept(UP, now_ms=0, min_interval_ms=150) == UP
        assert gate.last_accepted_at_ms == 0

    def test_input_inside_window_is_dropped(self):
        gate = InputGate()
        gate.accept(UP, now_ms=1000, min_interval_ms=150)

        assert gate.accept(LEFT, now_ms=1149, min_interval_ms=150) is None
        assert gate.last_accepted_at_ms == 1000

    def test_input_at_window_edge_is_accepted(self):
        gate = InputGate()
        gate.accept(UP, now_ms=1000, min_interval_ms=150)

        assert gate.accept(LEFT, now_ms=1150, min_interval_ms=150) == LEFT
        assert gate.last_accepted_at_ms == 1150

    def test_reset_forgets_last_input(self):
        gate = InputGate()
        gate.accept(UP, now_ms=1000, min_interval_ms=150)
        gate.reset()

        assert gate.accept(LEFT, now_ms=1001, min_interval_ms=150) == LEFT


class TestSensitivityMapping:
    @pytest.mark.parametrize("sensitivity,expected", [
        (1.0, 150),
        (2.0, 75),
        (0.5, 300),
        (1.5, 100),
    ])
    def test_mapping(self, sensitivity, expected):
        assert min_interval_for_sensitivity(sensitivity) == expected

    def test_higher_sensitivity_never_slower(self):
        values = [min_interval_for_sensitivity(s / 10) for s in range(1, 60)]
        assert values == sorted(values, reverse=True)

    @pytest.mark.parametrize("sensitivity", [0.01, 0.1, 10.0, 1000.0, 0, -3])
    def test_extremes_are_clamped(self, sensitivity):
        assert 50 <= min_interval_for_sensitivity(sensitivity) <= 300
