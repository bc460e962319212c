from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PLAYTUBE_",
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    API_URL: str = "http://localhost:8000/api/v1"
    STORAGE_PATH: str = "~/.playtube/local_storage.json"
    TIMEOUT_SECONDS: float = 60.0


client_settings = ClientSettings()
