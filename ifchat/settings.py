from __future__ import annotations

import os

from pydantic import BaseModel, Field

from ifchat.infra.redis_client import get_redis_url


class Settings(BaseModel):
    redis_url: str
    # Fixed per-title identity; one save slot and one transcript per game_id.
    game_id: str = Field(default="zork1", min_length=1)
    save_command: str = Field(default="save", min_length=1)
    log_level: str = "INFO"


def settings_from_env(**overrides: str | None) -> Settings:
    """Read settings from the environment; non-None keyword overrides win (CLI flags)."""

    values: dict[str, str] = {
        "redis_url": get_redis_url(),
        "game_id": os.environ.get("IFCHAT_GAME_ID", "zork1"),
        "save_command": os.environ.get("IFCHAT_SAVE_COMMAND", "save"),
        "log_level": os.environ.get("IFCHAT_LOG_LEVEL", "INFO"),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings.model_validate(values)
