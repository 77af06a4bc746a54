from __future__ import annotations

import logging

from algorithms.analytics_aggregator import AnalyticsAggregator
from db import ClientRepository, ExerciseLogRepository, SessionRepository
from models import AnalyticsSummary
from observability import CallObserver

logger = logging.getLogger(__name__)


class StatisticsService:
    """Compute client analytics over the complete stored history."""

    def __init__(
        self,
        client_repo: ClientRepository,
        session_repo: SessionRepository,
        log_repo: ExerciseLogRepository,
        observer: CallObserver | None = None,
    ) -> None:
        self.clients = client_repo
        self.sessions = session_repo
        self.logs = log_repo
        self.observer = observer or CallObserver(logger)

    def client_analytics(self, client_id: str) -> AnalyticsSummary:
        self.clients.fetch(client_id)
        logs = self.logs.fetch_for_client(client_id)
        sessions = self.sessions.fetch_for_client(client_id)
        summary = self.observer.call(
            "analytics.summarize", AnalyticsAggregator.summarize, logs, sessions
        )
        logger.info(
            "analytics calculated",
            extra={
                "client_id": client_id,
                "compliance_rate": summary.compliance_rate,
                "completed_sessions": summary.completed_sessions,
            },
        )
        return summary

