"""Application configuration using pydantic-settings."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Internal Tools"
    environment: str = "development"
    log_level: str = "info"
    debug: bool = False

    # JSON stores
    data_dir: Path = Path("data")
    chat_store_file: str = "chatbot.json"
    codegen_store_file: str = "codeGen.json"
    integrations_file: str = "integrations.json"

    # Inference backends
    local_model: str = "mistral"
    proxied_model: str = "vllm-llama-3-1-8b"
    proxy_backends: dict[str, str] = {"nutanix": "/api/v1/chat/completions"}
    proxied_backend: str = "nutanix"
    upstream_timeout: Optional[float] = None

    # CORS
    frontend_url: str = "http://localhost:3000"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def chat_store_path(self) -> Path:
        return self.data_dir / self.chat_store_file

    @property
    def codegen_store_path(self) -> Path:
        return self.data_dir / self.codegen_store_file

    @property
    def integrations_path(self) -> Path:
        return self.data_dir / self.integrations_file


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency for injecting settings."""
    return settings
