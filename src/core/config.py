"""Application configuration."""

import secrets
import warnings
from typing import Annotated, Any, Literal, Self

from pydantic import (
    AnyUrl,
    BeforeValidator,
    HttpUrl,
    computed_field,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "projects-api"
    SERVER_PORT: int = 8000
    ROOTPATH: str = ""
    API_V1_STR: str = "/api/v1"
    FRONTEND_HOST: str = "http://localhost:3000"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []
    CORS_ALLOW_METHODS: list[str] = ["GET", "POST", "DELETE"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # Admin (release write endpoints, HTTP Basic)
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = secrets.token_urlsafe(32)

    # GitHub content repository (read side)
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_ACCESS_TOKEN: str | None = None
    GITHUB_CONTENT_ORG: str = "spring-io"
    GITHUB_CONTENT_REPO: str = "spring-website-content"
    GITHUB_CONTENT_BRANCH: str = "main"
    GITHUB_PROJECTS_PATH: str = "project"
    GITHUB_WEBHOOK_SECRET: str | None = None  # 未配置时不校验签名
    GITHUB_TIMEOUT_SEC: float = 20.0
    DEFAULT_SUPPORT_POLICY: str = "SPRING_BOOT"

    # Contentful management API (write side)
    CONTENTFUL_API_URL: str = "https://api.contentful.com"
    CONTENTFUL_ACCESS_TOKEN: str | None = None
    CONTENTFUL_SPACE_ID: str = ""
    CONTENTFUL_ENVIRONMENT_ID: str = "master"
    CONTENTFUL_LOCALE: str = "en-US"
    CONTENTFUL_TIMEOUT_SEC: float = 30.0
    CONTENTFUL_RETRY_BUDGET_SEC: float = 300.0  # 限流重试总时长上限（5 分钟）

    def _check_default_secret(self, var_name: str, value: str | None) -> None:
        if value == "changethis":
            message = (
                f'The value of {var_name} is "changethis", '
                "for security, please change it, at least for deployments."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        self._check_default_secret("ADMIN_PASSWORD", self.ADMIN_PASSWORD)
        self._check_default_secret("GITHUB_WEBHOOK_SECRET", self.GITHUB_WEBHOOK_SECRET)
        if not self.GITHUB_WEBHOOK_SECRET and self.ENVIRONMENT != "local":
            raise ValueError(
                "GITHUB_WEBHOOK_SECRET must be set outside local, "
                "otherwise /refresh_cache is unauthenticated."
            )
        return self


settings = Settings()
