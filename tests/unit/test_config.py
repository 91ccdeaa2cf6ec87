"""Tests for application settings validation."""

import pytest
from pydantic import ValidationError

from src.core.config import Settings


def test_local_allows_missing_webhook_secret() -> None:
    settings = Settings(ENVIRONMENT="local", GITHUB_WEBHOOK_SECRET=None)

    assert settings.GITHUB_WEBHOOK_SECRET is None


@pytest.mark.parametrize("environment", ["staging", "production"])
def test_deployed_environment_requires_webhook_secret(environment: str) -> None:
    with pytest.raises(ValidationError, match="GITHUB_WEBHOOK_SECRET must be set"):
        Settings(
            ENVIRONMENT=environment,
            ADMIN_PASSWORD="a-real-password",
            GITHUB_WEBHOOK_SECRET=None,
        )


def test_deployed_environment_with_webhook_secret() -> None:
    settings = Settings(
        ENVIRONMENT="production",
        ADMIN_PASSWORD="a-real-password",
        GITHUB_WEBHOOK_SECRET="webhook-secret",
    )

    assert settings.GITHUB_WEBHOOK_SECRET == "webhook-secret"


def test_deployed_environment_rejects_placeholder_secret() -> None:
    with pytest.raises(ValidationError, match="changethis"):
        Settings(
            ENVIRONMENT="production",
            ADMIN_PASSWORD="changethis",
            GITHUB_WEBHOOK_SECRET="webhook-secret",
        )
