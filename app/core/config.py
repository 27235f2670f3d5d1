from typing import Annotated, Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict, NoDecode
from pydantic import PostgresDsn, field_validator


def _split_csv(value):
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class PostgresSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    host: str = Field(default="localhost", alias="POSTGRES_HOST")
    port: int = Field(default=5432, alias="POSTGRES_DB_PORT")
    db_name: str = Field(default="flashcards", alias="POSTGRES_DB_NAME")
    user: str = Field(default="postgres", alias="POSTGRES_DB_USER")
    password: str = Field(default="postgres", alias="POSTGRES_DB_PASSWORD")
    url: Optional[str] = Field(default=None, alias="DATABASE_URL")

    @computed_field
    def connection_string(self) -> str:
        if self.url:
            return self.url
        return str(
            PostgresDsn(
                f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db_name}"
            )
        )


class AuthSettings(BaseSettings):
    """Token verification for the hosted auth provider.

    Either ``public_key`` (PEM) or ``jwks_url`` must be set; the PEM wins when
    both are present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    issuer: Optional[str] = Field(default=None, alias="AUTH_ISSUER")
    audience: Optional[str] = Field(default=None, alias="AUTH_AUDIENCE")
    jwks_url: Optional[str] = Field(default=None, alias="AUTH_JWKS_URL")
    public_key: Optional[str] = Field(default=None, alias="AUTH_PUBLIC_KEY")
    authorized_parties: Annotated[list[str], NoDecode] = Field(
        default_factory=list, alias="AUTH_AUTHORIZED_PARTIES"
    )
    sign_in_url: str = Field(default="/sign-in", alias="AUTH_SIGN_IN_URL")
    leeway_seconds: int = Field(default=5, alias="AUTH_LEEWAY_SECONDS")

    @field_validator("authorized_parties", mode="before")
    @classmethod
    def split_parties(cls, value):
        return _split_csv(value)


class GenerationSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    endpoint_url: str = Field(
        default="http://localhost:9000/api/generate", alias="GENERATION_ENDPOINT_URL"
    )
    timeout_seconds: float = Field(default=60.0, alias="GENERATION_TIMEOUT_SECONDS")
    cards_per_generation: int = Field(default=10, alias="FLASHCARDS_PER_GENERATION")


class QuotaSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    monthly_limit: int = Field(default=10, alias="MONTHLY_FLASHCARDS_LIMIT")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="flashcards", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ORIGINS"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        return _split_csv(value)

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"

    @computed_field
    def is_testing(self) -> bool:
        return self.mode == "test"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    postgres: PostgresSettings = Field(default_factory=lambda: PostgresSettings())
    auth: AuthSettings = Field(default_factory=lambda: AuthSettings())
    generation: GenerationSettings = Field(default_factory=lambda: GenerationSettings())
    quota: QuotaSettings = Field(default_factory=lambda: QuotaSettings())

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")

    # Model provider selection: "google" or "openrouter"
    model_provider: str = Field(default="google", alias="MODEL_PROVIDER")
    openrouter_model: str = Field(
        default="openai/gpt-4o-mini", alias="OPENROUTER_MODEL"
    )


settings = Settings()
