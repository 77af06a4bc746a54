import requests
from typing import Optional


class TrainerClient:
    """Simple REST client for the trainer API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        timeout: float = 10,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"X-API-Key": token} if token else {}

    @classmethod
    def from_settings(cls, settings, timeout: float = 10) -> "TrainerClient":
        """Build a client from the stored ``remote_api_url``/``remote_api_token``."""
        return cls(
            settings.get_text("remote_api_url", "http://localhost:8000"),
            settings.get_text("remote_api_token", "") or None,
            timeout=timeout,
        )

    def _get(self, path: str, **params):
        resp = requests.get(
            f"{self.base_url}{path}",
            params=params or None,
            headers=self.headers,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def _send(self, method: str, path: str, payload: Optional[dict] = None):
        resp = requests.request(
            method,
            f"{self.base_url}{path}",
            json=payload,
            headers=self.headers,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def health(self) -> dict:
        return self._get("/health")

    def create_client(self, **profile) -> str:
        return self._send("POST", "/clients", profile)["id"]

    def list_clients(self) -> list:
        return self._get("/clients")

    def update_client(self, client_id: str, **changes) -> dict:
        return self._send("PUT", f"/clients/{client_id}", changes)

    def delete_client(self, client_id: str) -> None:
        self._send("DELETE", f"/clients/{client_id}")

    def generate_program(self, client_id: str) -> dict:
        return self._send("POST", "/programs/generate", {"client_id": client_id})

    def list_sessions(self, program_id: str) -> list:
        return self._get(f"/sessions/program/{program_id}")

    def complete_session(
        self, session_id: str, exercises: list[dict], notes: Optional[str] = None
    ) -> dict:
        payload: dict = {"exercises": exercises}
        if notes is not None:
            payload["notes"] = notes
        return self._send("PUT", f"/sessions/{session_id}/complete", payload)

    def log_exercise(
        self,
        session_id: str,
        exercise_name: str,
        weight_used: float,
        reps_completed: int,
        rpe: Optional[int] = None,
    ) -> dict:
        payload = {
            "exercise_name": exercise_name,
            "weight_used": weight_used,
            "reps_completed": reps_completed,
        }
        if rpe is not None:
            payload["rpe"] = rpe
        return self._send("POST", f"/sessions/{session_id}/log", payload)

    def analytics(self, client_id: str) -> dict:
        return self._get(f"/analytics/client/{client_id}")

    def nutrition(self, client_id: str) -> dict:
        return self._get(f"/nutrition/client/{client_id}")

    def readiness(
        self, client_id: str, sleep: int, stress: int, soreness: int, energy: int
    ) -> dict:
        return self._send(
            "POST",
            f"/readiness/client/{client_id}",
            {"sleep": sleep, "stress": stress, "soreness": soreness, "energy": energy},
        )

    def swap_exercise(
        self, client_id: str, exercise_name: str, muscle_group: str, equipment: str = ""
    ) -> list:
        return self._get(
            "/exercises/swap",
            client_id=client_id,
            exercise_name=exercise_name,
            muscle_group=muscle_group,
            equipment=equipment,
        )
