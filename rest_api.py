import logging
import time
from fastapi import (
    FastAPI,
    HTTPException,
    Response,
    APIRouter,
    Request,
)
from config import APP_VERSION
from db import (
    ClientRepository,
    ProgramRepository,
    SessionRepository,
    ExerciseLogRepository,
    AsyncSessionRepository,
    AsyncExerciseLogRepository,
    SettingsRepository,
)
from errors import ConflictError, NotFoundError
from models import ClientProfile, ReadinessReport
from observability import CallObserver, configure_logging
from planner_service import PlannerService
from recommendation_service import RecommendationService
from schemas import (
    ClientCreate,
    ClientUpdate,
    ProgramGenerate,
    ReadinessInput,
    SessionComplete,
    ExerciseEntry,
)
from session_service import SessionService
from stats_service import StatisticsService

logger = logging.getLogger(__name__)


class RateLimiter:
    """Simple in-memory rate limiter."""

    def __init__(self, limit: int = 60, window: int = 60) -> None:
        self.limit = limit
        self.window = window
        self.requests: dict[str, list[float]] = {}

    async def __call__(self, request: Request, call_next):
        ip = request.client.host if request.client else "anon"
        now = time.time()
        history = [t for t in self.requests.get(ip, []) if now - t < self.window]
        if len(history) >= self.limit:
            logger.warning("rate limit exceeded", extra={"client_ip": ip})
            return Response("rate limit exceeded", status_code=429)
        history.append(now)
        self.requests[ip] = history
        return await call_next(request)


def _not_found(e: NotFoundError) -> HTTPException:
    logger.warning(str(e), extra={"entity_id": e.entity_id})
    return HTTPException(status_code=404, detail=str(e))


class TrainerAPI:
    """Provides REST endpoints for client programs, sessions and analytics."""

    def __init__(
        self,
        db_path: str = "trainer.db",
        yaml_path: str = "settings.yaml",
        *,
        rate_limit: int | None = None,
        rate_window: int | None = None,
        configure_logs: bool = False,
    ) -> None:
        self.db_path = db_path
        self.settings = SettingsRepository(db_path, yaml_path)
        self.log_level = self.settings.get_text("log_level", "INFO")
        if configure_logs:
            configure_logging(self.log_level)
        self.clients = ClientRepository(db_path)
        self.programs = ProgramRepository(db_path)
        self.sessions = SessionRepository(db_path)
        self.logs = ExerciseLogRepository(db_path)
        self.async_sessions = AsyncSessionRepository(db_path)
        self.async_logs = AsyncExerciseLogRepository(db_path)
        self.observer = CallObserver(logger)
        self.planner = PlannerService(
            self.clients,
            self.programs,
            self.sessions,
            observer=self.observer,
        )
        self.session_service = SessionService(self.sessions, self.logs)
        self.statistics = StatisticsService(
            self.clients,
            self.sessions,
            self.logs,
            observer=self.observer,
        )
        self.recommender = RecommendationService(self.clients, observer=self.observer)
        self.app = FastAPI(
            title="Trainer API",
            description="REST API for client programs, session tracking and analytics",
            version=APP_VERSION,
        )
        if rate_limit is None:
            rate_limit = self.settings.get_int("rate_limit", 0)
        if rate_window is None:
            rate_window = self.settings.get_int("rate_window", 60)
        if rate_limit > 0:
            limiter = RateLimiter(limit=rate_limit, window=rate_window)
            self.app.middleware("http")(limiter)
        self._setup_routes()

    def _setup_routes(self) -> None:
        clients_router = APIRouter(prefix="/clients", tags=["Clients"])
        programs_router = APIRouter(prefix="/programs", tags=["Programs"])
        sessions_router = APIRouter(prefix="/sessions", tags=["Sessions"])

        @self.app.get("/health")
        def health():
            return {"status": "ok"}

        @clients_router.post("", status_code=201)
        def create_client(payload: ClientCreate):
            client = self.clients.create(ClientProfile(**payload.model_dump()))
            return client.to_dict()

        @clients_router.get("")
        def list_clients():
            return [c.summary() for c in self.clients.fetch_all_clients()]

        @clients_router.get("/{client_id}")
        def get_client(client_id: str):
            try:
                return self.clients.fetch(client_id).to_dict()
            except NotFoundError as e:
                raise _not_found(e)

        @clients_router.put("/{client_id}")
        def update_client(client_id: str, payload: ClientUpdate):
            try:
                client = self.clients.update(
                    client_id, payload.model_dump(exclude_unset=True)
                )
                return client.to_dict()
            except NotFoundError as e:
                raise _not_found(e)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @clients_router.delete("/{client_id}")
        def delete_client(client_id: str):
            try:
                self.clients.delete(client_id)
                return {"success": True}
            except NotFoundError as e:
                raise _not_found(e)

        @programs_router.post("/generate", status_code=201)
        def generate_program(payload: ProgramGenerate):
            try:
                return self.planner.generate_program(payload.client_id)
            except NotFoundError as e:
                raise _not_found(e)

        @programs_router.get("/client/{client_id}")
        def list_programs(client_id: str):
            try:
                return self.planner.list_programs(client_id)
            except NotFoundError as e:
                raise _not_found(e)

        @programs_router.get("/{program_id}")
        def get_program(program_id: str):
            try:
                return self.planner.program_detail(program_id)
            except NotFoundError as e:
                raise _not_found(e)

        @programs_router.delete("/{program_id}")
        def delete_program(program_id: str):
            try:
                self.planner.delete_program(program_id)
                return {"success": True}
            except NotFoundError as e:
                raise _not_found(e)

        @sessions_router.get("/program/{program_id}")
        def list_sessions(program_id: str):
            return [
                s.to_dict()
                for s in self.session_service.sessions_for_program(program_id)
            ]

        @sessions_router.get("/{session_id}")
        def get_session(session_id: str):
            try:
                return self.session_service.get_session(session_id).to_dict()
            except NotFoundError as e:
                raise _not_found(e)

        @sessions_router.put("/{session_id}/complete")
        def complete_session(session_id: str, payload: SessionComplete):
            try:
                session = self.session_service.complete_session(
                    session_id,
                    [e.model_dump() for e in payload.exercises],
                    notes=payload.notes,
                )
                return session.to_dict()
            except NotFoundError as e:
                raise _not_found(e)
            except ConflictError as e:
                raise HTTPException(status_code=409, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @sessions_router.post("/{session_id}/log", status_code=201)
        def log_exercise(session_id: str, payload: ExerciseEntry):
            try:
                log = self.session_service.log_exercise(
                    session_id,
                    payload.exercise_name,
                    payload.weight_used,
                    payload.reps_completed,
                    rpe=payload.rpe,
                    notes=payload.notes,
                )
                return log.to_dict()
            except NotFoundError as e:
                raise _not_found(e)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @sessions_router.get("/{session_id}/logs")
        async def list_session_logs(session_id: str):
            try:
                await self.async_sessions.fetch(session_id)
            except NotFoundError as e:
                raise _not_found(e)
            logs = await self.async_logs.fetch_for_session(session_id)
            return [log.to_dict() for log in logs]

        @self.app.get("/analytics/client/{client_id}")
        def client_analytics(client_id: str):
            try:
                return self.statistics.client_analytics(client_id).to_dict()
            except NotFoundError as e:
                raise _not_found(e)

        @self.app.post("/readiness/client/{client_id}")
        def score_readiness(client_id: str, payload: ReadinessInput):
            try:
                result = self.recommender.readiness(
                    client_id, ReadinessReport(**payload.model_dump())
                )
                return result.to_dict()
            except NotFoundError as e:
                raise _not_found(e)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @self.app.get("/readiness/client/{client_id}")
        def get_readiness(client_id: str):
            try:
                return self.recommender.default_readiness(client_id).to_dict()
            except NotFoundError as e:
                raise _not_found(e)

        @self.app.get("/nutrition/client/{client_id}")
        def client_nutrition(client_id: str):
            try:
                return self.recommender.nutrition(client_id).to_dict()
            except NotFoundError as e:
                raise _not_found(e)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @self.app.get("/exercises/swap")
        def swap_exercise(
            exercise_name: str,
            muscle_group: str,
            client_id: str,
            equipment: str = "",
        ):
            try:
                suggestions = self.recommender.substitutes(
                    client_id, exercise_name, muscle_group, equipment
                )
                return [s.to_dict() for s in suggestions]
            except NotFoundError as e:
                raise _not_found(e)

        self.app.include_router(clients_router)
        self.app.include_router(programs_router)
        self.app.include_router(sessions_router)


api = TrainerAPI(configure_logs=True)
app = api.app

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app)
