"""Runtime settings."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TRAINER_", extra="ignore")

    app_name: str = "TrainerGate"
    env: str = "dev"
    log_level: str = "info"
    # At DEBUG, log the full request body; otherwise only method/path/body_size
    log_full_request_body: bool = False
    host: str = "127.0.0.1"
    port: int = 18080
    route_path: str = "/api/trainer"

    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("TRAINER_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    upstream_base_url: str = "https://api.openai.com/v1"
    upstream_model: str = "gpt-4o-mini"
    upstream_timeout_seconds: float = 60.0
    upstream_max_connections: int = 100
    upstream_max_keepalive_connections: int = 20
    upstream_error_body_max_chars: int = 3000

    max_request_body_bytes: int = 200_000
    cors_allow_origin: str = "*"
    coach_profile_path: str = "trainergate/config/rules/coach_profile.yaml"


settings = Settings()
