from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime settings, read from the environment or a local .env file.

    Graph store: NEO4J_URI, NEO4J_USER (or NEO4J_USERNAME), NEO4J_PASSWORD,
    NEO4J_DATABASE. Entity suggestions need OPENAI_API_KEY; without it the
    disambiguator returns no suggestions.
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    log_level: str = "INFO"

    # Neo4j
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = Field(default="neo4j", validation_alias=AliasChoices("neo4j_user", "neo4j_username"))
    neo4j_password: str = "password"
    neo4j_database: str = "neo4j"

    # Entity disambiguation
    openai_api_key: str = ""
    disambiguation_model: str = "gpt-4o-mini"
    disambiguation_timeout: float = 60.0

    # Source metadata
    metadata_timeout: float = 15.0
    metadata_user_agent: str = "Mozilla/5.0 (compatible; CurationGraph/1.0)"

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return (v or "INFO").upper()

    @property
    def has_openai(self) -> bool:
        return bool(self.openai_api_key)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def reset_settings() -> None:
    get_settings.cache_clear()
