import os
import sqlite3
import sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import Database, SESSION_COLUMNS


class TestSchemaMigration:
    def test_adds_missing_columns(self, tmp_path):
        db_file = tmp_path / "test.db"
        conn = sqlite3.connect(str(db_file))
        conn.execute(
            "CREATE TABLE workout_sessions (id TEXT PRIMARY KEY, program_id TEXT, client_id TEXT, week_number INTEGER, exercises TEXT, created_at TEXT)"
        )
        conn.execute(
            "INSERT INTO workout_sessions VALUES ('s1', 'p1', 'c1', 1, '[]', '2024-01-01')"
        )
        conn.commit()
        conn.close()

        Database(str(db_file))

        conn = sqlite3.connect(str(db_file))
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='workout_sessions_old'"
        )
        assert cur.fetchone() is None
        cur = conn.execute("PRAGMA table_info(workout_sessions)")
        cols = [row[1] for row in cur.fetchall()]
        assert cols == SESSION_COLUMNS
        row = conn.execute(
            "SELECT id, day_number, completed, completed_at FROM workout_sessions"
        ).fetchone()
        assert row == ("s1", 1, 0, None)
        conn.close()

    def test_existing_schema_untouched(self, tmp_path):
        db_file = str(tmp_path / "test.db")
        Database(db_file)
        conn = sqlite3.connect(db_file)
        conn.execute("INSERT INTO settings (key, value) VALUES ('custom', 'x')")
        conn.commit()
        conn.close()
        Database(db_file)
        conn = sqlite3.connect(db_file)
        assert conn.execute("SELECT value FROM settings WHERE key='custom'").fetchone() == ("x",)
        conn.close()
