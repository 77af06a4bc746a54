from typing import Optional

from pydantic import BaseModel, Field, ValidationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SettingsSchema(BaseModel):
    log_level: str = "INFO"
    rate_limit: int = Field(0, ge=0)
    rate_window: int = Field(60, gt=0)
    remote_api_url: str = "http://localhost:8000"
    remote_api_token: Optional[str] = None


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
    level = str(data.get("log_level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"invalid log_level: {data.get('log_level')}")
