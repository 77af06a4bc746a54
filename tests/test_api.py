import os
import sys
import unittest
from fastapi.testclient import TestClient

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import APP_VERSION
from rest_api import TrainerAPI

CLIENT = {
    "name": "Morgan",
    "age": 30,
    "gender": "male",
    "height": 180,
    "weight": 85,
    "experience": "intermediate",
    "goals": "Build muscle, endurance",
    "training_frequency": 4,
    "equipment": "Full gym access",
    "session_duration": 60,
    "injuries": "left shoulder",
}


class APITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_trainer.db"
        self.yaml_path = "test_settings.yaml"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)
        self.api = TrainerAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.client = TestClient(self.api.app)

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)

    def create_client(self, **overrides) -> str:
        response = self.client.post("/clients", json={**CLIENT, **overrides})
        self.assertEqual(response.status_code, 201)
        return response.json()["id"]

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})
        self.assertEqual(self.api.app.version, APP_VERSION)

    def test_client_crud(self) -> None:
        cid = self.create_client()
        response = self.client.get(f"/clients/{cid}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Morgan")
        self.assertIsNone(response.json()["body_fat_percentage"])

        response = self.client.get("/clients")
        self.assertEqual([c["id"] for c in response.json()], [cid])

        response = self.client.put(f"/clients/{cid}", json={"weight": 82.5})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["weight"], 82.5)
        self.assertEqual(response.json()["goals"], CLIENT["goals"])

        response = self.client.delete(f"/clients/{cid}")
        self.assertEqual(response.json(), {"success": True})
        response = self.client.get(f"/clients/{cid}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"detail": "Client not found"})
        self.assertEqual(self.client.delete(f"/clients/{cid}").status_code, 404)
        self.assertEqual(
            self.client.put(f"/clients/{cid}", json={"age": 31}).status_code, 404
        )

    def test_client_validation(self) -> None:
        for bad in (
            {"training_frequency": 8},
            {"training_frequency": 0},
            {"height": 0},
            {"weight": -1},
            {"session_duration": 0},
            {"experience": "elite"},
        ):
            response = self.client.post("/clients", json={**CLIENT, **bad})
            self.assertEqual(response.status_code, 422, bad)
        incomplete = dict(CLIENT)
        incomplete.pop("goals")
        self.assertEqual(self.client.post("/clients", json=incomplete).status_code, 422)

    def test_update_cannot_clear_required_fields(self) -> None:
        cid = self.create_client()
        for field in ("goals", "name", "training_frequency", "session_duration", "experience"):
            response = self.client.put(f"/clients/{cid}", json={field: None})
            self.assertEqual(response.status_code, 422, field)
        response = self.client.put(f"/clients/{cid}", json={"injuries": None})
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["injuries"])
        self.assertEqual(response.json()["goals"], CLIENT["goals"])

    def test_program_workflow(self) -> None:
        cid = self.create_client()
        response = self.client.post("/programs/generate", json={"client_id": cid})
        self.assertEqual(response.status_code, 201)
        program = response.json()
        self.assertEqual(program["split_type"], "Upper/Lower")
        self.assertEqual(program["duration_weeks"], 8)
        self.assertEqual(
            program["program_name"], "Morgan's 8-Week Upper/Lower - Build muscle"
        )
        self.assertEqual(len(program["program_data"]["weeks"]), 8)
        self.assertEqual(program["program_data"]["deload_week"], 8)
        pid = program["program_id"]

        response = self.client.get(f"/programs/client/{cid}")
        self.assertEqual([p["id"] for p in response.json()], [pid])

        response = self.client.get(f"/sessions/program/{pid}")
        sessions = response.json()
        self.assertEqual(len(sessions), 8)
        self.assertEqual(sessions[0]["session_name"], "Week 1 - Foundation")
        self.assertEqual(sessions[-1]["session_name"], "Deload")
        self.assertEqual(sessions[-1]["exercises"][0]["sets"], 2)
        self.assertTrue(all(s["day_number"] == 1 for s in sessions))
        self.assertFalse(any(s["completed"] for s in sessions))

        response = self.client.get(f"/programs/{pid}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["sessions"]), 8)

        response = self.client.delete(f"/programs/{pid}")
        self.assertEqual(response.json(), {"success": True})
        self.assertEqual(self.client.get(f"/programs/{pid}").status_code, 404)
        self.assertEqual(self.client.get(f"/sessions/program/{pid}").json(), [])

    def test_generate_for_unknown_client(self) -> None:
        response = self.client.post("/programs/generate", json={"client_id": "missing"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"detail": "Client not found"})
        response = self.client.get("/programs/client/missing")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"detail": "Client not found"})

    def test_session_completion_and_analytics(self) -> None:
        cid = self.create_client()
        pid = self.client.post("/programs/generate", json={"client_id": cid}).json()[
            "program_id"
        ]
        sessions = self.client.get(f"/sessions/program/{pid}").json()
        sid = sessions[0]["id"]

        body = {
            "exercises": [
                {"exercise_name": "Barbell Bench Press", "weight_used": 80, "reps_completed": 8, "rpe": 8},
                {"exercise_name": "Barbell Rows", "weight_used": 70, "reps_completed": 10},
            ],
            "notes": "felt strong",
        }
        response = self.client.put(f"/sessions/{sid}/complete", json=body)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["completed"])
        self.assertIsNotNone(response.json()["completed_at"])
        completed_at = response.json()["completed_at"]

        response = self.client.put(f"/sessions/{sid}/complete", json=body)
        self.assertEqual(response.status_code, 409)

        response = self.client.post(
            f"/sessions/{sid}/log",
            json={"exercise_name": "Barbell Bench Press", "weight_used": 85, "reps_completed": 6},
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["client_id"], cid)

        response = self.client.get(f"/sessions/{sid}/logs")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 3)

        response = self.client.get(f"/analytics/client/{cid}")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["total_sessions"], 8)
        self.assertEqual(data["completed_sessions"], 1)
        self.assertEqual(data["compliance_rate"], 13)
        self.assertEqual(data["last_workout_date"], completed_at)
        bench = data["strength_progress"]["bench"]
        self.assertEqual(bench["first_log"]["weight"], 80)
        self.assertEqual(bench["last_log"]["weight"], 85)
        self.assertEqual(bench["progress"], 5)
        self.assertIsNone(data["strength_progress"]["squat"]["first_log"])
        self.assertEqual(
            data["muscle_group_volume"], {"Chest": 1150.0, "Back": 700.0}
        )

    def test_session_errors(self) -> None:
        body = {"exercises": [{"exercise_name": "Row", "weight_used": 50, "reps_completed": 8}]}
        with self.assertLogs(level="WARNING") as captured:
            self.assertEqual(self.client.get("/sessions/missing").status_code, 404)
        not_found = [r for r in captured.records if "not found" in r.getMessage()]
        self.assertEqual(len(not_found), 1)
        self.assertEqual(
            self.client.put("/sessions/missing/complete", json=body).status_code, 404
        )
        self.assertEqual(
            self.client.post("/sessions/missing/log", json=body["exercises"][0]).status_code,
            404,
        )
        self.assertEqual(self.client.get("/sessions/missing/logs").status_code, 404)
        self.assertEqual(
            self.client.put("/sessions/missing/complete", json={"exercises": []}).status_code,
            422,
        )
        bad_rpe = {"exercises": [{"exercise_name": "Row", "weight_used": 50, "reps_completed": 8, "rpe": 11}]}
        self.assertEqual(
            self.client.put("/sessions/missing/complete", json=bad_rpe).status_code, 422
        )

    def test_readiness(self) -> None:
        cid = self.create_client()
        response = self.client.post(
            f"/readiness/client/{cid}",
            json={"sleep": 8, "stress": 3, "soreness": 2, "energy": 8},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["readiness_score"], 8)
        self.assertEqual(response.json()["intensity_adjustment"], "Increase")

        response = self.client.get(f"/readiness/client/{cid}")
        self.assertEqual(response.json()["readiness_score"], 7)
        self.assertEqual(response.json()["intensity_adjustment"], "Maintain")

        response = self.client.post(
            f"/readiness/client/{cid}",
            json={"sleep": 11, "stress": 3, "soreness": 2, "energy": 8},
        )
        self.assertEqual(response.status_code, 422)
        response = self.client.post(
            "/readiness/client/missing",
            json={"sleep": 8, "stress": 3, "soreness": 2, "energy": 8},
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.client.get("/readiness/client/missing").status_code, 404)

    def test_nutrition(self) -> None:
        cid = self.create_client(goals="Build muscle")
        response = self.client.get(f"/nutrition/client/{cid}")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["macros"]["daily_calories"], 3073)
        self.assertEqual(data["macros"]["protein_grams"], 153)
        self.assertEqual(len(data["meal_templates"]), 4)
        self.assertEqual(len(data["suggestions"]), 5)
        self.assertEqual(self.client.get("/nutrition/client/missing").status_code, 404)

    def test_exercise_swap(self) -> None:
        cid = self.create_client()
        response = self.client.get(
            "/exercises/swap",
            params={
                "exercise_name": "Barbell Bench Press",
                "muscle_group": "chest",
                "equipment": "dumbbells",
                "client_id": cid,
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([s["name"] for s in response.json()], ["Dumbbell Bench Press"])

        response = self.client.get(
            "/exercises/swap",
            params={"exercise_name": "Squat", "muscle_group": "quadriceps", "client_id": cid},
        )
        self.assertEqual(len(response.json()), 5)

        response = self.client.get(
            "/exercises/swap",
            params={"exercise_name": "Squat", "muscle_group": "quadriceps", "client_id": "missing"},
        )
        self.assertEqual(response.status_code, 404)

    def test_delete_client_removes_history(self) -> None:
        cid = self.create_client()
        pid = self.client.post("/programs/generate", json={"client_id": cid}).json()[
            "program_id"
        ]
        sid = self.client.get(f"/sessions/program/{pid}").json()[0]["id"]
        self.client.post(
            f"/sessions/{sid}/log",
            json={"exercise_name": "Row", "weight_used": 50, "reps_completed": 8},
        )
        self.client.delete(f"/clients/{cid}")
        self.assertEqual(self.client.get(f"/programs/{pid}").status_code, 404)
        self.assertEqual(self.client.get(f"/sessions/{sid}").status_code, 404)
        self.assertEqual(self.api.logs.fetch_all_logs(), [])


class RateLimitTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_rate.db"
        self.yaml_path = "test_rate.yaml"
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def test_rate_limit(self) -> None:
        api = TrainerAPI(self.db_path, self.yaml_path, rate_limit=2, rate_window=60)
        client = TestClient(api.app)
        self.assertEqual(client.get("/health").status_code, 200)
        self.assertEqual(client.get("/health").status_code, 200)
        self.assertEqual(client.get("/health").status_code, 429)

    def test_rate_limit_from_settings(self) -> None:
        with open(self.yaml_path, "w", encoding="utf-8") as f:
            f.write("rate_limit: 1\n")
        api = TrainerAPI(self.db_path, self.yaml_path)
        client = TestClient(api.app)
        self.assertEqual(client.get("/health").status_code, 200)
        self.assertEqual(client.get("/health").status_code, 429)


if __name__ == "__main__":
    unittest.main()
