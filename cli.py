import argparse
import json
import os
import shutil
import time

from client import TrainerClient
from db import (
    ClientRepository,
    Database,
    ProgramRepository,
    SessionRepository,
    ExerciseLogRepository,
    SettingsRepository,
)
from models import ClientProfile
from planner_service import PlannerService
from session_service import SessionService


def export_data(db_path: str, output_dir: str = ".") -> list[str]:
    """Write every table to ``<output_dir>/<table>.json``."""
    tables = {
        "clients": [c.to_dict() for c in ClientRepository(db_path).fetch_all_clients()],
        "programs": [p.to_dict() for p in ProgramRepository(db_path).fetch_all_programs()],
        "sessions": [s.to_dict() for s in SessionRepository(db_path).fetch_all_sessions()],
        "exercise_logs": [l.to_dict() for l in ExerciseLogRepository(db_path).fetch_all_logs()],
    }
    paths = []
    for name, rows in tables.items():
        out_path = os.path.join(output_dir, f"{name}.json")
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2)
        paths.append(out_path)
    return paths


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def vacuum_db(db_path: str) -> None:
    Database(db_path).vacuum()


def show_settings(db_path: str, yaml_path: str, updates: list[list[str]] | None = None) -> dict:
    """Apply ``KEY VALUE`` updates, then print and return every setting."""
    settings = SettingsRepository(db_path, yaml_path)
    for key, value in updates or []:
        settings.set_text(key, value)
    data = settings.all_settings()
    for key, value in data.items():
        if key == "remote_api_token" and value:
            value = "***"
        print(f"{key}: {value}")
    return data


def benchmark(client: TrainerClient, runs: int = 10) -> float:
    times: list[float] = []
    for _ in range(runs):
        t0 = time.time()
        client.health()
        times.append(time.time() - t0)
    avg = sum(times) / len(times)
    print(f"Average /health response time over {runs} runs: {avg:.4f}s")
    return avg


def demo_data(db_path: str) -> str | None:
    """Insert a demo client with a generated program if no client exists."""
    clients = ClientRepository(db_path)
    if clients.fetch_all_clients():
        print("Database already contains clients")
        return None
    sessions = SessionRepository(db_path)
    client = clients.create(
        ClientProfile(
            name="Demo Client",
            age=30,
            gender="female",
            height=170,
            weight=65,
            experience="intermediate",
            goals="Strength, Mobility",
            training_frequency=4,
            equipment="Full gym access",
            session_duration=60,
        )
    )
    planner = PlannerService(clients, ProgramRepository(db_path), sessions)
    program = planner.generate_program(client.id)
    first = sessions.fetch_for_program(program["program_id"])[0]
    SessionService(sessions, ExerciseLogRepository(db_path)).complete_session(
        first.id,
        [
            {"exercise_name": "Barbell Bench Press", "weight_used": 50.0, "reps_completed": 5, "rpe": 7},
            {"exercise_name": "Barbell Rows", "weight_used": 45.0, "reps_completed": 5, "rpe": 7},
        ],
    )
    print("Demo data inserted")
    return client.id


def serve(db_path: str, yaml_path: str, host: str, port: int) -> None:
    import uvicorn
    from rest_api import TrainerAPI

    api = TrainerAPI(db_path, yaml_path, configure_logs=True)
    uvicorn.run(api.app, host=host, port=port)


def main() -> None:
    parser = argparse.ArgumentParser(description="Utility commands")
    sub = parser.add_subparsers(dest="cmd", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--db", default="trainer.db")
    exp.add_argument("--out", default=".")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default="trainer.db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default="trainer.db")

    demo = sub.add_parser("demo")
    demo.add_argument("--db", default="trainer.db")

    vac = sub.add_parser("vacuum")
    vac.add_argument("--db", default="trainer.db")

    cfg = sub.add_parser("settings")
    cfg.add_argument("--db", default="trainer.db")
    cfg.add_argument("--yaml", default="settings.yaml")
    cfg.add_argument("--set", nargs=2, action="append", metavar=("KEY", "VALUE"))

    bench = sub.add_parser("benchmark")
    bench.add_argument("--url", help="defaults to the remote_api_url setting")
    bench.add_argument("--db", default="trainer.db")
    bench.add_argument("--yaml", default="settings.yaml")
    bench.add_argument("--runs", type=int, default=10)

    srv = sub.add_parser("serve")
    srv.add_argument("--db", default="trainer.db")
    srv.add_argument("--yaml", default="settings.yaml")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    if args.cmd == "export":
        export_data(args.db, args.out)
    elif args.cmd == "backup":
        backup_db(args.db, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, args.db)
    elif args.cmd == "demo":
        demo_data(args.db)
    elif args.cmd == "vacuum":
        vacuum_db(args.db)
    elif args.cmd == "settings":
        show_settings(args.db, args.yaml, args.set)
    elif args.cmd == "benchmark":
        if args.url:
            client = TrainerClient(args.url)
        else:
            client = TrainerClient.from_settings(SettingsRepository(args.db, args.yaml))
        benchmark(client, args.runs)
    elif args.cmd == "serve":
        serve(args.db, args.yaml, args.host, args.port)


if __name__ == "__main__":
    main()
