from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreAdapter(Enum):
    POSTGREST = "postgrest"
    MEMORY = "memory"


class StoreConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SUPABASE_", env_file=".env", extra="ignore")

    url: str = ""
    anon_key: str = ""
    adapter: StoreAdapter = StoreAdapter.POSTGREST
    timeout: float = 30


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    store: StoreConfig = Field(default_factory=lambda: StoreConfig())
