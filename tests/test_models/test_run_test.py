"""Tests for RunTestInput and PerformanceEstimate models."""

from __future__ import annotations

import dataclasses

import pytest

from performance_engine.math.estimator import estimate_performance
from performance_engine.models.enums import PopulationProfile
from performance_engine.models.run_test import PerformanceEstimate, RunTestInput


class TestRunTestInput:
    def test_total_minutes(self) -> None:
        assert RunTestInput(3200, 15, 30).total_minutes == pytest.approx(15.5)

    def test_defaults_to_zero_time(self) -> None:
        assert RunTestInput(3200).total_minutes == 0.0

    def test_frozen(self) -> None:
        rt = RunTestInput(3200, 15, 47)
        with pytest.raises(AttributeError):
            rt.minutes = 16  # type: ignore[misc]


class TestPerformanceEstimate:
    def test_frozen(self, run_test_3200) -> None:
        est = estimate_performance(run_test_3200)
        with pytest.raises(dataclasses.FrozenInstanceError):
            est.vo2max = 1.0  # type: ignore[misc]

    def test_as_dict_rounds_to_two_decimals(self, run_test_3200) -> None:
        d = estimate_performance(run_test_3200).as_dict(rounded=True)
        assert d["average_speed_m_per_min"] == 202.75
        assert d["vo2max"] == 8.29
        assert d["profile"] == "TRAINED_MEN"

    def test_as_dict_unrounded_keeps_precision(self, run_test_3200) -> None:
        est = estimate_performance(run_test_3200)
        assert est.as_dict()["vo2max"] == est.vo2max

    def test_minimal_estimate(self) -> None:
        est = PerformanceEstimate(
            profile=PopulationProfile.IAT_ONLY,
            distance_m=1000.0,
            total_minutes=5.0,
            average_speed_m_per_min=200.0,
            average_speed_kmh=12.0,
            iat_m_per_min=175.8,
            iat_kmh=10.548,
            iat_pace_min_per_km=60 / 10.548,
        )
        assert not est.has_vo2
        assert len(est.as_dict()) == 8
