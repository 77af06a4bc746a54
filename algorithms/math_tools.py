import math
from typing import Iterable


class MathTools:
    """Provides the small numeric helpers shared by the planning components."""

    EPL_COEFF: float = 0.0333
    EPL_MAX_REPS: int = 8

    @staticmethod
    def clamp(value: float, min_value: float, max_value: float) -> float:
        """Clamp ``value`` to the inclusive range [min_value, max_value]."""
        if min_value > max_value:
            raise ValueError("min_value must not exceed max_value")
        return max(min_value, min(value, max_value))

    @staticmethod
    def round_half_up(value: float) -> int:
        """Round to the nearest integer with .5 going up (62.5 -> 63)."""
        return int(math.floor(value + 0.5))

    @classmethod
    def epley_1rm(cls, weight: float, reps: int, factor: float = 1.0) -> float:
        """Return the estimated one-rep max using the Epley formula."""
        if reps < 0:
            raise ValueError("reps must be non-negative")
        rep_term = min(reps, cls.EPL_MAX_REPS)
        return weight * (1 + cls.EPL_COEFF * rep_term) * factor

    @staticmethod
    def volume(sets: Iterable[tuple[int, float]]) -> float:
        """Compute training volume as the sum of reps times weight."""
        vol = 0.0
        for reps, weight in sets:
            vol += reps * weight
        return vol

    @staticmethod
    def percentage(part: int, total: int) -> int:
        """Return ``part`` as a rounded percentage of ``total`` (0 if empty)."""
        if total <= 0:
            return 0
        return MathTools.round_half_up(100 * part / total)
