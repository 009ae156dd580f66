"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from household_hub.domain.members import Role

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_DEFAULT_SECURITY_ANSWERS = {
    Role.RAM.value: "67",
    Role.MUNNA.value: "panipuri",
    Role.SURIYA.value: "tea",
    Role.KAUSHIK.value: "kamal",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    security_answers: dict[str, str] = Field(
        default_factory=lambda: dict(_DEFAULT_SECURITY_ANSWERS)
    )
    chat_realtime: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_security_answers(raw: dict[str, str]) -> dict[Role, str]:
    """Map configured answers onto roles, ignoring unknown role names."""
    by_name = {role.value.lower(): role for role in Role}
    answers: dict[Role, str] = {}
    for name, answer in raw.items():
        role = by_name.get(name.strip().lower())
        if role is None:
            continue
        cleaned = answer.strip()
        if cleaned:
            answers[role] = cleaned
    return answers
