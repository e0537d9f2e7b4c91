"""
GitHub Authentication Service

This module supplies the access token used for GitHub API requests.

Two modes are supported:
- GitHub App: a short-lived JWT is exchanged for an installation
  access token, cached per installation until shortly before expiry
- Static token: a personal access token or CI-provided token is
  used as-is

Design Decisions:
- Use RS256 algorithm for JWT signing (GitHub requirement)
- Cache installation tokens to minimize API calls
- Refresh installation tokens five minutes before they expire
"""

import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import httpx
import jwt
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from reviewer_mention.config import get_settings
from reviewer_mention.logging_config import get_logger

logger = get_logger(__name__)

TOKEN_REFRESH_MARGIN = timedelta(minutes=5)


@dataclass
class CachedToken:
    """Installation access token with its expiry time."""
    token: str
    expires_at: datetime

    @property
    def is_expired(self) -> bool:
        """True once the token is within the refresh margin of expiry."""
        return datetime.now(timezone.utc) >= (self.expires_at - TOKEN_REFRESH_MARGIN)


class GitHubAuthError(Exception):
    """Custom exception for GitHub authentication errors."""
    pass


class GitHubAppAuth:
    """
    GitHub token provider.

    Usage:
        auth = GitHubAppAuth()
        token = await auth.get_installation_token(installation_id)
    """

    def __init__(self):
        """Initialize the auth manager."""
        self.settings = get_settings()
        self._private_key: Optional[str] = None
        self._token_cache: Dict[int, CachedToken] = {}

    @property
    def private_key(self) -> str:
        """Lazy load and cache the private key."""
        if self._private_key is None:
            self._private_key = self.settings.get_private_key()
            logger.debug("Loaded GitHub App private key")
        return self._private_key

    def generate_jwt(self) -> str:
        """
        Generate a JWT identifying the GitHub App itself.

        Returns:
            Signed JWT string, valid for nine minutes

        Raises:
            GitHubAuthError: If the App is not configured or signing fails
        """
        if not self.settings.github_app_id:
            raise GitHubAuthError("GitHub App ID not configured")

        try:
            now = int(time.time())

            payload = {
                # Backdated to tolerate clock drift
                "iat": now - 60,
                "exp": now + (9 * 60),
                "iss": self.settings.github_app_id,
            }

            token = jwt.encode(payload, self.private_key, algorithm="RS256")

            logger.debug("Generated GitHub App JWT", app_id=self.settings.github_app_id)
            return token

        except (ValueError, jwt.PyJWTError) as e:
            logger.error("Failed to generate JWT", error=str(e))
            raise GitHubAuthError(f"Failed to generate JWT: {e}") from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True
    )
    async def _fetch_installation_token(self, installation_id: int) -> CachedToken:
        """
        Exchange the App JWT for an installation access token.

        Raises:
            GitHubAuthError: If GitHub rejects the exchange
        """
        jwt_token = self.generate_jwt()

        url = f"{self.settings.github_api_url}/app/installations/{installation_id}/access_tokens"

        headers = {
            "Authorization": f"Bearer {jwt_token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.post(url, headers=headers)

        if response.status_code >= 400:
            logger.error(
                "Failed to get installation token",
                installation_id=installation_id,
                status_code=response.status_code,
                error=response.text[:500]
            )
            raise GitHubAuthError(
                f"Failed to get installation token: {response.status_code}"
            )

        data = response.json()
        expires_at = datetime.fromisoformat(data["expires_at"].replace("Z", "+00:00"))

        logger.info(
            "Obtained installation access token",
            installation_id=installation_id,
            expires_at=expires_at.isoformat()
        )

        return CachedToken(token=data["token"], expires_at=expires_at)

    async def get_installation_token(self, installation_id: Optional[int] = None) -> str:
        """
        Get a token for API requests.

        Args:
            installation_id: GitHub App installation ID; ignored when a
                static token is configured

        Returns:
            Access token

        Raises:
            GitHubAuthError: If no token can be obtained
        """
        if self.settings.uses_static_token:
            return self.settings.github_token

        if installation_id is None:
            raise GitHubAuthError(
                "No installation in webhook payload and no static token configured"
            )

        cached = self._token_cache.get(installation_id)
        if cached and not cached.is_expired:
            return cached.token

        logger.debug(
            "Fetching new installation token",
            installation_id=installation_id,
            reason="expired" if cached else "not_cached"
        )

        new_token = await self._fetch_installation_token(installation_id)
        self._token_cache[installation_id] = new_token

        return new_token.token

    def invalidate_token(self, installation_id: Optional[int]) -> None:
        """
        Drop a cached installation token after GitHub rejected it.

        Args:
            installation_id: Installation whose token was rejected
        """
        if installation_id in self._token_cache:
            del self._token_cache[installation_id]
            logger.info("Invalidated cached token", installation_id=installation_id)


_auth_instance: Optional[GitHubAppAuth] = None


def get_github_auth() -> GitHubAppAuth:
    """Get the singleton GitHubAppAuth instance."""
    global _auth_instance
    if _auth_instance is None:
        _auth_instance = GitHubAppAuth()
    return _auth_instance
