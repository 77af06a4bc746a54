from __future__ import annotations

import logging

from algorithms.nutrition_estimator import NutritionEstimator
from algorithms.readiness_scorer import ReadinessScorer
from algorithms.substitution_advisor import SubstitutionAdvisor
from db import ClientRepository
from errors import InvalidInputError
from models import (
    NutritionPlan,
    ReadinessReport,
    ReadinessResult,
    SubstituteRequest,
    SubstituteSuggestion,
)
from observability import CallObserver

logger = logging.getLogger(__name__)


class RecommendationService:
    """Nutrition, readiness and exercise swap advice for stored clients."""

    def __init__(
        self,
        client_repo: ClientRepository,
        observer: CallObserver | None = None,
    ) -> None:
        self.clients = client_repo
        self.observer = observer or CallObserver(logger)

    def nutrition(self, client_id: str) -> NutritionPlan:
        profile = self.clients.fetch(client_id)
        for field in ("weight", "height", "age"):
            value = getattr(profile, field)
            if value is None or value <= 0:
                raise InvalidInputError(f"client {field} must be positive")
        plan = self.observer.call(
            "nutrition.estimate", NutritionEstimator.estimate, profile
        )
        logger.info(
            "nutrition plan generated",
            extra={
                "client_id": client_id,
                "daily_calories": plan.macros.daily_calories,
            },
        )
        return plan

    def readiness(self, client_id: str, report: ReadinessReport) -> ReadinessResult:
        self.clients.fetch(client_id)
        for field in ("sleep", "stress", "soreness", "energy"):
            if not 1 <= getattr(report, field) <= 10:
                raise InvalidInputError(f"{field} must be between 1 and 10")
        result = self.observer.call("readiness.score", ReadinessScorer.score, report)
        logger.info(
            "readiness scored",
            extra={
                "client_id": client_id,
                "readiness_score": result.readiness_score,
            },
        )
        return result

    def default_readiness(self, client_id: str) -> ReadinessResult:
        self.clients.fetch(client_id)
        return ReadinessScorer.default()

    def substitutes(
        self,
        client_id: str,
        exercise_name: str,
        muscle_group: str,
        equipment: str = "",
    ) -> list[SubstituteSuggestion]:
        profile = self.clients.fetch(client_id)
        request = SubstituteRequest(
            exercise_name=exercise_name,
            muscle_group=muscle_group,
            equipment=equipment,
            injuries=profile.injuries,
        )
        logger.debug(
            "substitution request",
            extra={
                "client_id": client_id,
                "rationale": SubstitutionAdvisor.rationale(request, profile.experience),
            },
        )
        suggestions = self.observer.call(
            "exercises.suggest", SubstitutionAdvisor.suggest, request
        )
        logger.info(
            "exercise suggestions generated",
            extra={"exercise": exercise_name, "count": len(suggestions)},
        )
        return suggestions
