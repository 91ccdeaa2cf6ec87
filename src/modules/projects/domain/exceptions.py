"""Project domain exceptions."""

from src.core.domain.exceptions import (
    AmbiguousEntityError,
    EntityNotFoundError,
    ServiceUnavailableError,
    UpstreamServiceError,
)


class ProjectNotFoundError(EntityNotFoundError):
    """Raised when no project exists for a slug."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("Project", slug)


class ProjectDocumentationNotFoundError(EntityNotFoundError):
    """Raised when a project has no documentation release for a version."""

    error_code = "DOCUMENTATION_NOT_FOUND"

    def __init__(self, slug: str, version: str | None = None):
        self.slug = slug
        self.version = version
        if version is None:
            super().__init__("Current documentation for project", slug)
        else:
            super().__init__(f"Documentation for project '{slug}'", version)


class ProjectSourceError(UpstreamServiceError):
    """Raised when the project source cannot be read or returns bad data."""

    error_code = "PROJECT_SOURCE_ERROR"


class SnapshotLoadError(ServiceUnavailableError):
    """Raised when a complete project snapshot could not be loaded."""

    error_code = "SNAPSHOT_LOAD_FAILED"

    def __init__(self, message: str = "Project data could not be loaded"):
        super().__init__(message)


# ============================================
# Contentful (release administration backend)
# ============================================


class ContentfulError(UpstreamServiceError):
    """Base error for the Contentful management backend."""

    error_code = "CONTENTFUL_ERROR"


class ContentfulHttpError(ContentfulError):
    """Non-successful Contentful response.

    ``rate_limit_reset`` is the backend-reported cool-down in seconds, or -1
    when the response carried no usable rate-limit signal.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        rate_limit_reset: int = -1,
    ):
        self.status_code = status_code
        self.rate_limit_reset = rate_limit_reset
        super().__init__(message)

    @property
    def is_rate_limited(self) -> bool:
        return self.rate_limit_reset >= 0


class ContentfulRateLimitExhaustedError(ContentfulError):
    """Raised when rate-limit retries ran past the retry time budget."""

    http_status_code = ServiceUnavailableError.http_status_code
    error_code = "CONTENTFUL_RATE_LIMITED"

    def __init__(self, operation: str, elapsed_sec: float, budget_sec: float):
        self.operation = operation
        self.elapsed_sec = elapsed_sec
        self.budget_sec = budget_sec
        super().__init__(
            f"Contentful '{operation}' still rate limited after "
            f"{elapsed_sec:.1f}s (budget {budget_sec:.0f}s)"
        )


class InvalidContentfulQueryResponseError(ContentfulError):
    """Raised when Contentful returns an empty or malformed payload."""

    error_code = "CONTENTFUL_INVALID_RESPONSE"

    def __init__(self, message: str = "Empty or invalid contentful response"):
        super().__init__(message)


class ContentfulProjectNotFoundError(ProjectNotFoundError):
    """Raised when Contentful holds no project entry for a slug."""

    error_code = "CONTENTFUL_PROJECT_NOT_FOUND"


class NoUniqueContentfulProjectError(AmbiguousEntityError):
    """Raised when Contentful holds several project entries for one slug."""

    def __init__(self, slug: str, count: int):
        self.slug = slug
        super().__init__("Contentful project", slug, count)
