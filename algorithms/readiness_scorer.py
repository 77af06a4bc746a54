from models import ReadinessReport, ReadinessResult
from .math_tools import MathTools


class ReadinessScorer:
    """Turn a daily self-report into an intensity recommendation."""

    # inclusive lower bound, adjustment, recommendation; checked high to low
    BANDS = (
        (
            8,
            "Increase",
            "You are well-rested and recovered. Consider pushing intensity higher, "
            "adding an extra set, or increasing weights.",
        ),
        (6, "Maintain", "You are in good condition. Proceed with your planned workout."),
        (
            4,
            "Reduce",
            "You seem fatigued. Consider reducing volume or intensity. Focus on technique.",
        ),
    )
    FALLBACK = (
        "Deload",
        "Recovery is needed. Consider a light deload session or rest day. "
        "Prioritize sleep and nutrition.",
    )
    DEFAULT = ReadinessResult(7, "Maintain", "No recent readiness data. Use default parameters.")

    @staticmethod
    def raw_score(report: ReadinessReport) -> int:
        # stress and soreness count against readiness
        total = report.sleep + (10 - report.stress) + (10 - report.soreness) + report.energy
        return int(MathTools.clamp(MathTools.round_half_up(total / 4), 1, 10))

    @classmethod
    def score(cls, report: ReadinessReport) -> ReadinessResult:
        value = cls.raw_score(report)
        for lower, adjustment, recommendation in cls.BANDS:
            if value >= lower:
                return ReadinessResult(value, adjustment, recommendation)
        return ReadinessResult(value, *cls.FALLBACK)

    @classmethod
    def default(cls) -> ReadinessResult:
        return cls.DEFAULT
