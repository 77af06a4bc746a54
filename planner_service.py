from __future__ import annotations

import logging

from algorithms.program_template import ProgramTemplateEngine
from db import ClientRepository, ProgramRepository, SessionRepository
from models import ProgramPlan, ProgramRecord, WorkoutSession
from observability import CallObserver

logger = logging.getLogger(__name__)


class PlannerService:
    """Generates programs for clients and stores them with their sessions."""

    def __init__(
        self,
        client_repo: ClientRepository,
        program_repo: ProgramRepository,
        session_repo: SessionRepository,
        engine: type[ProgramTemplateEngine] = ProgramTemplateEngine,
        observer: CallObserver | None = None,
    ) -> None:
        self.clients = client_repo
        self.programs = program_repo
        self.sessions = session_repo
        self.engine = engine
        self.observer = observer or CallObserver(logger)

    @staticmethod
    def sessions_for_plan(plan: ProgramPlan, client_id: str) -> list[WorkoutSession]:
        """One session per week, each holding a copy of the week's exercises."""
        return [
            WorkoutSession(
                program_id="",
                client_id=client_id,
                week_number=week.week_number,
                exercises=[e.to_dict() for e in week.exercises],
                day_number=1,
                session_name=week.focus,
            )
            for week in plan.weeks
        ]

    def generate_program(self, client_id: str) -> dict:
        profile = self.clients.fetch(client_id)
        plan = self.observer.call("program.generate", self.engine.generate, profile)
        record = ProgramRecord(
            client_id=client_id,
            program_name=plan.program_name,
            duration_weeks=plan.duration_weeks,
            split_type=plan.split_type,
            program_data=plan.program_data(),
        )
        stored, sessions = self.programs.create(
            record, self.sessions_for_plan(plan, client_id)
        )
        logger.info(
            "program created",
            extra={
                "client_id": client_id,
                "program_id": stored.id,
                "split_type": stored.split_type,
                "sessions": len(sessions),
            },
        )
        return {
            "program_id": stored.id,
            "program_name": stored.program_name,
            "duration_weeks": stored.duration_weeks,
            "split_type": stored.split_type,
            "program_data": stored.program_data,
        }

    def list_programs(self, client_id: str) -> list[dict]:
        self.clients.fetch(client_id)
        return [p.summary() for p in self.programs.fetch_for_client(client_id)]

    def program_detail(self, program_id: str) -> dict:
        program = self.programs.fetch(program_id)
        data = program.to_dict()
        data["sessions"] = [
            s.to_dict() for s in self.sessions.fetch_for_program(program_id)
        ]
        return data

    def delete_program(self, program_id: str) -> None:
        self.programs.delete(program_id)
        logger.info("program deleted", extra={"program_id": program_id})
