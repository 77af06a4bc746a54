import sqlite3
import aiosqlite
import os
import datetime
import json
import logging
import uuid
from contextlib import contextmanager, asynccontextmanager
from typing import List, Tuple, Optional, Iterable

from config import YamlConfig
from errors import ConflictError, InvalidInputError, NotFoundError
from models import ClientProfile, ExerciseLog, ProgramRecord, WorkoutSession
from settings_schema import validate_settings

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat(
        timespec="microseconds"
    )


def _new_id() -> str:
    return str(uuid.uuid4())


CLIENT_COLUMNS = [
    "id",
    "name",
    "age",
    "gender",
    "height",
    "weight",
    "body_fat_percentage",
    "experience",
    "goals",
    "training_frequency",
    "equipment",
    "session_duration",
    "injuries",
    "preferred_exercises",
    "squat_1rm",
    "bench_1rm",
    "deadlift_1rm",
    "created_at",
    "updated_at",
]

PROGRAM_COLUMNS = [
    "id",
    "client_id",
    "program_name",
    "duration_weeks",
    "split_type",
    "program_data",
    "created_at",
]

SESSION_COLUMNS = [
    "id",
    "program_id",
    "client_id",
    "week_number",
    "day_number",
    "session_name",
    "exercises",
    "completed",
    "completed_at",
    "notes",
    "created_at",
]

LOG_COLUMNS = [
    "id",
    "session_id",
    "client_id",
    "exercise_name",
    "weight_used",
    "reps_completed",
    "rpe",
    "notes",
    "logged_at",
]


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "clients": (
            """CREATE TABLE clients (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    age INTEGER,
                    gender TEXT,
                    height REAL,
                    weight REAL,
                    body_fat_percentage REAL,
                    experience TEXT NOT NULL DEFAULT 'beginner',
                    goals TEXT NOT NULL,
                    training_frequency INTEGER NOT NULL,
                    equipment TEXT,
                    session_duration INTEGER NOT NULL,
                    injuries TEXT,
                    preferred_exercises TEXT,
                    squat_1rm REAL,
                    bench_1rm REAL,
                    deadlift_1rm REAL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );""",
            CLIENT_COLUMNS,
        ),
        "workout_programs": (
            """CREATE TABLE workout_programs (
                    id TEXT PRIMARY KEY,
                    client_id TEXT NOT NULL,
                    program_name TEXT NOT NULL,
                    duration_weeks INTEGER NOT NULL,
                    split_type TEXT NOT NULL,
                    program_data TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(client_id) REFERENCES clients(id) ON DELETE CASCADE
                );""",
            PROGRAM_COLUMNS,
        ),
        "workout_sessions": (
            """CREATE TABLE workout_sessions (
                    id TEXT PRIMARY KEY,
                    program_id TEXT NOT NULL,
                    client_id TEXT NOT NULL,
                    week_number INTEGER NOT NULL,
                    day_number INTEGER NOT NULL DEFAULT 1,
                    session_name TEXT,
                    exercises TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    completed_at TEXT,
                    notes TEXT,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(program_id) REFERENCES workout_programs(id) ON DELETE CASCADE,
                    FOREIGN KEY(client_id) REFERENCES clients(id) ON DELETE CASCADE
                );""",
            SESSION_COLUMNS,
        ),
        "exercise_logs": (
            """CREATE TABLE exercise_logs (
                    id TEXT PRIMARY KEY,
                    session_id TEXT NOT NULL,
                    client_id TEXT NOT NULL,
                    exercise_name TEXT NOT NULL,
                    weight_used REAL,
                    reps_completed INTEGER,
                    rpe INTEGER,
                    notes TEXT,
                    logged_at TEXT NOT NULL,
                    FOREIGN KEY(session_id) REFERENCES workout_sessions(id) ON DELETE CASCADE,
                    FOREIGN KEY(client_id) REFERENCES clients(id) ON DELETE CASCADE
                );""",
            LOG_COLUMNS,
        ),
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    _INDEXES = (
        "CREATE INDEX IF NOT EXISTS idx_programs_client ON workout_programs(client_id);",
        "CREATE INDEX IF NOT EXISTS idx_sessions_program ON workout_sessions(program_id);",
        "CREATE INDEX IF NOT EXISTS idx_sessions_client ON workout_sessions(client_id);",
        "CREATE INDEX IF NOT EXISTS idx_logs_session ON exercise_logs(session_id);",
        "CREATE INDEX IF NOT EXISTS idx_logs_client ON exercise_logs(client_id);",
    )

    # value used for a column added to an existing table during migration
    _COLUMN_DEFAULTS = {
        "experience": "'beginner'",
        "day_number": "1",
        "completed": "0",
    }

    def __init__(self, db_path: str = "trainer.db") -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._ensure_indexes()
        self._init_settings()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        connection.execute("PRAGMA foreign_keys=on;")
        try:
            yield connection
            connection.commit()
        except Exception:
            connection.rollback()
            raise
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute("PRAGMA foreign_keys=off;")
            # keep REFERENCES in other tables pointing at the rebuilt table
            cursor.execute("PRAGMA legacy_alter_table=on;")
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)
            cursor.execute("PRAGMA foreign_keys=on;")

    def _ensure_indexes(self) -> None:
        with self._connection() as conn:
            for sql in self._INDEXES:
                conn.execute(sql)

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        logger.info(
            "migrating table", extra={"table": table, "columns": len(columns)}
        )
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)

        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            missing = [c for c in columns if c not in existing_cols]
            if missing:
                defaults = ", ".join(
                    self._COLUMN_DEFAULTS.get(c, "NULL") for c in missing
                )
                conn.execute(
                    f"INSERT INTO {table} ({cols}, {', '.join(missing)}) SELECT {cols}, {defaults} FROM {table}_old;"
                )
            else:
                conn.execute(
                    f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
                )
        conn.execute(f"DROP TABLE {table}_old;")

    def _init_settings(self) -> None:
        defaults = {
            "log_level": "INFO",
            "rate_limit": "0",
            "rate_window": "60",
            "remote_api_url": "http://localhost:8000",
        }
        with self._connection() as conn:
            for key, value in defaults.items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, value),
                )

    def vacuum(self) -> None:
        """Run SQLite VACUUM to reduce database size."""
        with self._connection() as conn:
            conn.execute("VACUUM;")


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.rowcount

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


def _client_from_row(row: Tuple) -> ClientProfile:
    return ClientProfile(**dict(zip(CLIENT_COLUMNS, row)))


def _program_from_row(row: Tuple) -> ProgramRecord:
    data = dict(zip(PROGRAM_COLUMNS, row))
    data["program_data"] = json.loads(data["program_data"])
    return ProgramRecord(**data)


def _session_from_row(row: Tuple) -> WorkoutSession:
    data = dict(zip(SESSION_COLUMNS, row))
    data["exercises"] = json.loads(data["exercises"])
    data["completed"] = bool(data["completed"])
    return WorkoutSession(**data)


def _log_from_row(row: Tuple) -> ExerciseLog:
    return ExerciseLog(**dict(zip(LOG_COLUMNS, row)))


def _log_params(log: ExerciseLog) -> Tuple:
    return (
        log.id or _new_id(),
        log.session_id,
        log.client_id,
        log.exercise_name,
        log.weight_used,
        log.reps_completed,
        log.rpe,
        log.notes,
        log.logged_at or _now(),
    )


_LOG_INSERT = (
    f"INSERT INTO exercise_logs ({', '.join(LOG_COLUMNS)}) "
    f"VALUES ({', '.join('?' for _ in LOG_COLUMNS)});"
)


class ClientRepository(BaseRepository):
    """Repository for client profile operations."""

    UPDATABLE = frozenset(CLIENT_COLUMNS) - {"id", "created_at", "updated_at"}

    def create(self, profile: ClientProfile) -> ClientProfile:
        client_id = profile.id or _new_id()
        now = _now()
        values = profile.to_dict()
        values.update(id=client_id, created_at=now, updated_at=now)
        self.execute(
            f"INSERT INTO clients ({', '.join(CLIENT_COLUMNS)}) "
            f"VALUES ({', '.join('?' for _ in CLIENT_COLUMNS)});",
            tuple(values[c] for c in CLIENT_COLUMNS),
        )
        logger.info("client created", extra={"client_id": client_id})
        return self.fetch(client_id)

    def fetch(self, client_id: str) -> ClientProfile:
        rows = self.fetch_all(
            f"SELECT {', '.join(CLIENT_COLUMNS)} FROM clients WHERE id = ?;",
            (client_id,),
        )
        if not rows:
            raise NotFoundError("Client", client_id)
        return _client_from_row(rows[0])

    def fetch_all_clients(self) -> List[ClientProfile]:
        rows = self.fetch_all(
            f"SELECT {', '.join(CLIENT_COLUMNS)} FROM clients ORDER BY created_at DESC;"
        )
        return [_client_from_row(r) for r in rows]

    def update(self, client_id: str, changes: dict) -> ClientProfile:
        unknown = set(changes) - self.UPDATABLE
        if unknown:
            raise InvalidInputError(f"unknown client fields: {sorted(unknown)}")
        if changes:
            assignments = ", ".join(f"{k} = ?" for k in changes)
            params = tuple(changes.values()) + (_now(), client_id)
            updated = self.execute(
                f"UPDATE clients SET {assignments}, updated_at = ? WHERE id = ?;",
                params,
            )
            if updated == 0:
                raise NotFoundError("Client", client_id)
        return self.fetch(client_id)

    def delete(self, client_id: str) -> None:
        removed = self.execute("DELETE FROM clients WHERE id = ?;", (client_id,))
        if removed == 0:
            raise NotFoundError("Client", client_id)
        logger.info("client deleted", extra={"client_id": client_id})


class ProgramRepository(BaseRepository):
    """Repository for generated programs and their initial sessions."""

    def create(
        self, record: ProgramRecord, sessions: Iterable[WorkoutSession]
    ) -> Tuple[ProgramRecord, List[WorkoutSession]]:
        """Insert a program together with its sessions.

        Both writes share one transaction, so a failure leaves neither
        the program nor any of its sessions behind.
        """
        program_id = record.id or _new_id()
        now = _now()
        stored_sessions: List[WorkoutSession] = []
        with self._connection() as conn:
            conn.execute(
                f"INSERT INTO workout_programs ({', '.join(PROGRAM_COLUMNS)}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?);",
                (
                    program_id,
                    record.client_id,
                    record.program_name,
                    record.duration_weeks,
                    record.split_type,
                    json.dumps(record.program_data),
                    now,
                ),
            )
            for session in sessions:
                session_id = session.id or _new_id()
                conn.execute(
                    f"INSERT INTO workout_sessions ({', '.join(SESSION_COLUMNS)}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);",
                    (
                        session_id,
                        program_id,
                        session.client_id,
                        session.week_number,
                        session.day_number,
                        session.session_name,
                        json.dumps(session.exercises),
                        0,
                        None,
                        session.notes,
                        now,
                    ),
                )
                stored_sessions.append(
                    WorkoutSession(
                        program_id=program_id,
                        client_id=session.client_id,
                        week_number=session.week_number,
                        exercises=session.exercises,
                        day_number=session.day_number,
                        session_name=session.session_name,
                        notes=session.notes,
                        id=session_id,
                        created_at=now,
                    )
                )
        stored = ProgramRecord(
            client_id=record.client_id,
            program_name=record.program_name,
            duration_weeks=record.duration_weeks,
            split_type=record.split_type,
            program_data=record.program_data,
            id=program_id,
            created_at=now,
        )
        return stored, stored_sessions

    def fetch(self, program_id: str) -> ProgramRecord:
        rows = self.fetch_all(
            f"SELECT {', '.join(PROGRAM_COLUMNS)} FROM workout_programs WHERE id = ?;",
            (program_id,),
        )
        if not rows:
            raise NotFoundError("Program", program_id)
        return _program_from_row(rows[0])

    def fetch_for_client(self, client_id: str) -> List[ProgramRecord]:
        rows = self.fetch_all(
            f"SELECT {', '.join(PROGRAM_COLUMNS)} FROM workout_programs "
            "WHERE client_id = ? ORDER BY created_at DESC;",
            (client_id,),
        )
        return [_program_from_row(r) for r in rows]

    def fetch_all_programs(self) -> List[ProgramRecord]:
        rows = self.fetch_all(
            f"SELECT {', '.join(PROGRAM_COLUMNS)} FROM workout_programs ORDER BY created_at;"
        )
        return [_program_from_row(r) for r in rows]

    def delete(self, program_id: str) -> None:
        removed = self.execute(
            "DELETE FROM workout_programs WHERE id = ?;", (program_id,)
        )
        if removed == 0:
            raise NotFoundError("Program", program_id)


class SessionRepository(BaseRepository):
    """Repository for workout sessions."""

    def fetch(self, session_id: str) -> WorkoutSession:
        rows = self.fetch_all(
            f"SELECT {', '.join(SESSION_COLUMNS)} FROM workout_sessions WHERE id = ?;",
            (session_id,),
        )
        if not rows:
            raise NotFoundError("Session", session_id)
        return _session_from_row(rows[0])

    def fetch_for_program(self, program_id: str) -> List[WorkoutSession]:
        rows = self.fetch_all(
            f"SELECT {', '.join(SESSION_COLUMNS)} FROM workout_sessions "
            "WHERE program_id = ? ORDER BY week_number, day_number;",
            (program_id,),
        )
        return [_session_from_row(r) for r in rows]

    def fetch_for_client(self, client_id: str) -> List[WorkoutSession]:
        rows = self.fetch_all(
            f"SELECT {', '.join(SESSION_COLUMNS)} FROM workout_sessions "
            "WHERE client_id = ? ORDER BY created_at, week_number;",
            (client_id,),
        )
        return [_session_from_row(r) for r in rows]

    def fetch_all_sessions(self) -> List[WorkoutSession]:
        rows = self.fetch_all(
            f"SELECT {', '.join(SESSION_COLUMNS)} FROM workout_sessions ORDER BY created_at;"
        )
        return [_session_from_row(r) for r in rows]

    def complete(
        self,
        session_id: str,
        logs: Iterable[ExerciseLog],
        notes: str | None = None,
        completed_at: str | None = None,
    ) -> WorkoutSession:
        """Mark a session completed and append its logs atomically.

        Raises :class:`NotFoundError` for an unknown id and
        :class:`ConflictError` when the session is already completed; in
        both cases nothing is written.
        """
        timestamp = completed_at or _now()
        with self._connection() as conn:
            # the completed flag is checked by the UPDATE that takes the write lock
            cur = conn.execute(
                "UPDATE workout_sessions SET completed = 1, completed_at = ?, "
                "notes = COALESCE(?, notes) WHERE id = ? AND completed = 0;",
                (timestamp, notes, session_id),
            )
            if cur.rowcount == 0:
                row = conn.execute(
                    "SELECT 1 FROM workout_sessions WHERE id = ?;", (session_id,)
                ).fetchone()
                if row is None:
                    raise NotFoundError("Session", session_id)
                raise ConflictError("Session already completed")
            conn.executemany(_LOG_INSERT, [_log_params(log) for log in logs])
        return self.fetch(session_id)


class ExerciseLogRepository(BaseRepository):
    """Repository for the append-only exercise log."""

    def add(self, log: ExerciseLog) -> ExerciseLog:
        params = _log_params(log)
        try:
            self.execute(_LOG_INSERT, params)
        except sqlite3.IntegrityError as e:
            raise NotFoundError("Session", log.session_id) from e
        return ExerciseLog(**dict(zip(LOG_COLUMNS, params)))

    def fetch_for_session(self, session_id: str) -> List[ExerciseLog]:
        rows = self.fetch_all(
            f"SELECT {', '.join(LOG_COLUMNS)} FROM exercise_logs "
            "WHERE session_id = ? ORDER BY logged_at;",
            (session_id,),
        )
        return [_log_from_row(r) for r in rows]

    def fetch_for_client(self, client_id: str) -> List[ExerciseLog]:
        rows = self.fetch_all(
            f"SELECT {', '.join(LOG_COLUMNS)} FROM exercise_logs "
            "WHERE client_id = ? ORDER BY logged_at;",
            (client_id,),
        )
        return [_log_from_row(r) for r in rows]

    def fetch_all_logs(self) -> List[ExerciseLog]:
        rows = self.fetch_all(
            f"SELECT {', '.join(LOG_COLUMNS)} FROM exercise_logs ORDER BY logged_at;"
        )
        return [_log_from_row(r) for r in rows]


class AsyncDatabase(Database):
    """Provides asynchronous connection management."""

    @asynccontextmanager
    async def _async_connection(self):
        conn = await aiosqlite.connect(self._db_path)
        await conn.execute("PRAGMA foreign_keys=on;")
        try:
            yield conn
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise
        finally:
            await conn.close()


class AsyncBaseRepository(AsyncDatabase):
    """Asynchronous variant of BaseRepository using aiosqlite."""

    async def execute(self, query: str, params: Tuple = ()) -> int:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            return cursor.rowcount

    async def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return rows


class AsyncSessionRepository(AsyncBaseRepository):
    """Async repository for workout session reads."""

    async def fetch(self, session_id: str) -> WorkoutSession:
        rows = await self.fetch_all(
            f"SELECT {', '.join(SESSION_COLUMNS)} FROM workout_sessions WHERE id = ?;",
            (session_id,),
        )
        if not rows:
            raise NotFoundError("Session", session_id)
        return _session_from_row(rows[0])


class AsyncExerciseLogRepository(AsyncBaseRepository):
    """Async repository for exercise log reads and appends."""

    async def add(self, log: ExerciseLog) -> ExerciseLog:
        params = _log_params(log)
        try:
            await self.execute(_LOG_INSERT, params)
        except sqlite3.IntegrityError as e:
            raise NotFoundError("Session", log.session_id) from e
        return ExerciseLog(**dict(zip(LOG_COLUMNS, params)))

    async def fetch_for_session(self, session_id: str) -> List[ExerciseLog]:
        rows = await self.fetch_all(
            f"SELECT {', '.join(LOG_COLUMNS)} FROM exercise_logs "
            "WHERE session_id = ? ORDER BY logged_at;",
            (session_id,),
        )
        return [_log_from_row(r) for r in rows]


class SettingsRepository(BaseRepository):
    """Repository for general application settings synchronized with YAML."""

    INT_KEYS = {"rate_limit", "rate_window"}

    def __init__(
        self, db_path: str = "trainer.db", yaml_path: str = "settings.yaml"
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._sync_from_yaml()
        self._sync_to_yaml()

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        result: dict[str, int | str] = {}
        for k, v in rows:
            if k in self.INT_KEYS:
                try:
                    result[k] = int(float(v))
                    continue
                except ValueError:
                    pass
            result[k] = v
        return result

    def _sync_from_yaml(self) -> None:
        data = self._yaml.load()
        if not data:
            return
        validate_settings(data)
        with self._connection() as conn:
            for key, value in data.items():
                if value is None:
                    continue
                conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                    (key, str(value)),
                )

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._raw_all_settings())

    def get_text(self, key: str, default: str) -> str:
        self._sync_from_yaml()
        rows = self.fetch_all("SELECT value FROM settings WHERE key = ?;", (key,))
        return rows[0][0] if rows else default

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(float(self.get_text(key, str(default))))
        except ValueError:
            return default

    def set_text(self, key: str, value: str) -> None:
        candidate = self._raw_all_settings()
        candidate[key] = value
        validate_settings(candidate)
        self.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )
        self._sync_to_yaml()

    def all_settings(self) -> dict:
        self._sync_from_yaml()
        return self._raw_all_settings()
