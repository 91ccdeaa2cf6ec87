"""Contentful management API adapters."""

from src.modules.projects.infrastructure.contentful.client import HttpContentfulClient
from src.modules.projects.infrastructure.contentful.retrying import (
    RetryingContentfulClient,
)

__all__ = [
    "HttpContentfulClient",
    "RetryingContentfulClient",
]
