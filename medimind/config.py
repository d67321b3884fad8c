from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field


class Settings(BaseSettings):
    # Local Ollama server. Requests go to its OpenAI-compatible API, so the
    # base URL must end in /v1 (Ollama 0.1.24 or newer); the native /api/chat
    # route is not used.
    llm_base_url: str = "http://127.0.0.1:11434/v1"
    llm_model: str = "mistral"
    llm_api_key: str = "ollama"
    llm_request_timeout_seconds: float | None = None
    llm_log_enabled: bool = False
    llm_log_path: str = "logs/llm_calls.jsonl"

    # Supabase (service role key, server-side only)
    supabase_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_URL", "MEDIMIND_SUPABASE_URL"),
    )
    supabase_service_role_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "SUPABASE_SERVICE_ROLE_KEY",
            "MEDIMIND_SUPABASE_SERVICE_ROLE_KEY",
        ),
    )
    cases_table: str = "cases"

    # Uploads
    max_upload_bytes: int = 5 * 1024 * 1024

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["*"]

    model_config = {"env_prefix": "MEDIMIND_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
