"""Vertical jump analysis: CMJ vs SJ difference and progression trend.

The CMJ-SJ difference expresses how much the countermovement (stretch-
shortening cycle) adds over a pure concentric squat jump.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from performance_engine.models.enums import JUMP_TREND_MIN_TESTS
from performance_engine.models.records import JumpTest


def cmj_sj_difference_pct(cmj_cm: float, sj_cm: float) -> float:
    """Percentage by which CMJ exceeds SJ: (CMJ - SJ) / SJ * 100.

    Raises:
        ValueError: If sj_cm is non-positive.
    """
    if sj_cm <= 0:
        raise ValueError(f"SJ must be positive, got {sj_cm}")
    return (cmj_cm - sj_cm) / sj_cm * 100.0


@dataclass(frozen=True)
class JumpTrend:
    """Least-squares change per test for CMJ and SJ heights (cm/test)."""

    cmj_slope_cm: float
    sj_slope_cm: float
    n_tests: int
    best_cmj_cm: float
    best_sj_cm: float


def jump_trend(tests: Sequence[JumpTest]) -> JumpTrend:
    """Fit a linear trend to CMJ and SJ heights over chronologically sorted tests.

    Tests are indexed 0..n-1 after sorting by date, so the slope is the
    average change in height per test session.

    Raises:
        ValueError: If fewer than JUMP_TREND_MIN_TESTS tests are given.
    """
    if len(tests) < JUMP_TREND_MIN_TESTS:
        raise ValueError(
            f"Need at least {JUMP_TREND_MIN_TESTS} jump tests, got {len(tests)}"
        )
    ordered = sorted(tests, key=lambda t: t.sort_key)
    x = np.arange(len(ordered), dtype=np.float64)
    cmj = np.array([t.cmj_cm for t in ordered], dtype=np.float64)
    sj = np.array([t.sj_cm for t in ordered], dtype=np.float64)

    cmj_slope = float(np.polyfit(x, cmj, 1)[0])
    sj_slope = float(np.polyfit(x, sj, 1)[0])

    return JumpTrend(
        cmj_slope_cm=cmj_slope,
        sj_slope_cm=sj_slope,
        n_tests=len(ordered),
        best_cmj_cm=float(cmj.max()),
        best_sj_cm=float(sj.max()),
    )
