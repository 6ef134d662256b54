"""Tests for metric arithmetic: rounding and the zero-denominator convention."""

from app.application.services.metrics_math import (
    budget_efficiency,
    percentage,
    ratio,
    rounded_average,
    variance_percentage,
)


class TestPercentage:
    def test_rounds_half_up(self) -> None:
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67
        assert percentage(1, 8) == 13

    def test_zero_whole_is_zero(self) -> None:
        assert percentage(0, 0) == 0
        assert percentage(5, 0) == 0

    def test_clamped_to_hundred(self) -> None:
        assert percentage(5, 3) == 100


def test_ratio_rounds_and_handles_zero() -> None:
    assert ratio(4, 3) == 1.33
    assert ratio(1, 0) == 0.0


def test_rounded_average() -> None:
    assert rounded_average(5, 2) == 3
    assert rounded_average(10, 4) == 3
    assert rounded_average(7, 0) == 0


def test_variance_percentage() -> None:
    assert variance_percentage(1200, 1000) == 20.0
    assert variance_percentage(800, 1000) == -20.0
    assert variance_percentage(500, 0) == 0.0


def test_budget_efficiency_without_estimate_is_hundred() -> None:
    assert budget_efficiency(0, 0) == 100.0
    assert budget_efficiency(300, 0) == 100.0
    assert budget_efficiency(800, 1000) == 80.0
