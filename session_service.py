from __future__ import annotations

import logging
from typing import Iterable

from db import ExerciseLogRepository, SessionRepository
from errors import ConflictError, InvalidInputError
from models import ExerciseLog, WorkoutSession

logger = logging.getLogger(__name__)


def _check_rpe(rpe: int | None) -> None:
    if rpe is not None and not 1 <= rpe <= 10:
        raise InvalidInputError("rpe must be between 1 and 10")


class SessionService:
    """Completes sessions and appends performed exercises to the log."""

    def __init__(
        self,
        session_repo: SessionRepository,
        log_repo: ExerciseLogRepository,
    ) -> None:
        self.sessions = session_repo
        self.logs = log_repo

    def sessions_for_program(self, program_id: str) -> list[WorkoutSession]:
        return self.sessions.fetch_for_program(program_id)

    def get_session(self, session_id: str) -> WorkoutSession:
        return self.sessions.fetch(session_id)

    def complete_session(
        self,
        session_id: str,
        exercises: Iterable[dict],
        notes: str | None = None,
    ) -> WorkoutSession:
        """Mark ``session_id`` done and log every performed exercise.

        ``exercises`` items carry ``exercise_name``, ``weight_used``,
        ``reps_completed`` and optionally ``rpe`` and ``notes``.
        """
        items = list(exercises)
        if not items:
            raise InvalidInputError("at least one exercise is required")
        session = self.get_session(session_id)
        logs = []
        for item in items:
            _check_rpe(item.get("rpe"))
            logs.append(
                ExerciseLog(
                    session_id=session.id,
                    client_id=session.client_id,
                    exercise_name=item["exercise_name"],
                    weight_used=item.get("weight_used"),
                    reps_completed=item.get("reps_completed"),
                    rpe=item.get("rpe"),
                    notes=item.get("notes"),
                )
            )
        try:
            completed = self.sessions.complete(session_id, logs, notes=notes)
        except ConflictError:
            logger.warning(
                "session already completed", extra={"session_id": session_id}
            )
            raise
        logger.info(
            "session completed",
            extra={"session_id": session_id, "exercises": len(logs)},
        )
        return completed

    def log_exercise(
        self,
        session_id: str,
        exercise_name: str,
        weight_used: float | None,
        reps_completed: int | None,
        rpe: int | None = None,
        notes: str | None = None,
    ) -> ExerciseLog:
        _check_rpe(rpe)
        session = self.get_session(session_id)
        log = self.logs.add(
            ExerciseLog(
                session_id=session.id,
                client_id=session.client_id,
                exercise_name=exercise_name,
                weight_used=weight_used,
                reps_completed=reps_completed,
                rpe=rpe,
                notes=notes,
            )
        )
        logger.info(
            "exercise logged",
            extra={"session_id": session_id, "exercise": exercise_name},
        )
        return log
