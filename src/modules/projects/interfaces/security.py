"""Request authentication for the projects API.

- Release writes require HTTP Basic admin credentials.
- The cache refresh webhook is signed by GitHub (``X-Hub-Signature-256``).
"""

import hashlib
import hmac

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from src.core.config import settings

SIGNATURE_PREFIX = "sha256="

_basic = HTTPBasic()


async def require_admin(
    credentials: HTTPBasicCredentials = Depends(_basic),
) -> str:
    username_ok = hmac.compare_digest(
        credentials.username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8")
    )
    password_ok = hmac.compare_digest(
        credentials.password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8")
    )
    if not (username_ok and password_ok):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username


def compute_signature(secret: str, body: bytes) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


async def verify_webhook_signature(
    request: Request,
    x_hub_signature_256: str | None = Header(default=None),
) -> None:
    """Reject webhook calls whose body signature does not match.

    Signature checking is skipped when no ``GITHUB_WEBHOOK_SECRET`` is set.
    """
    secret = settings.GITHUB_WEBHOOK_SECRET
    if not secret:
        return
    if not x_hub_signature_256:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Missing webhook signature",
        )
    expected = compute_signature(secret, await request.body())
    if not hmac.compare_digest(expected, x_hub_signature_256):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid webhook signature",
        )
