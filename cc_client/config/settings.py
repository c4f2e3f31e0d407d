"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)
        else:
            if secret_value:
                logger.info("Loaded %s from /run/secrets", secret_name)
                return secret_value

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.info("Loaded %s from environment (fallback)", env_var)
            return secret_value

    return None


@dataclass
class AppConfig:
    """Client configuration container."""
    api_url: str = "http://localhost:8080"
    token_url: str = ""

    # OAuth client used for the client credentials grant
    client_id: str = "cf"
    client_secret: str = ""

    # Password grant, used instead of client credentials when both are set
    username: str = ""
    password: str = ""

    log_level: str = "INFO"

    @property
    def uses_password_grant(self) -> bool:
        return bool(self.username and self.password)

    @property
    def client_secret_resolved(self) -> str:
        """Get the OAuth client secret.

        Priority:
        1. Configured value in client_secret
        2. Docker secrets: /run/secrets/cc_client_secret
        3. Environment variable: CC_CLIENT_SECRET

        Raises:
            ValueError: If the secret cannot be found
        """
        if self.client_secret:
            return self.client_secret

        secret = _load_secret_from_file("cc_client_secret", "CC_CLIENT_SECRET")
        if secret:
            return secret

        raise ValueError(
            "CC_CLIENT_SECRET not found. "
            "Provide it via Docker secrets (/run/secrets/cc_client_secret) or environment variable."
        )


def derive_token_url(api_url: str) -> str:
    """Guess the UAA token endpoint from the API URL (api.<domain> -> uaa.<domain>)."""
    scheme, sep, rest = api_url.partition("://")
    if sep and rest.startswith("api."):
        return f"{scheme}://uaa.{rest[len('api.'):].rstrip('/')}/oauth/token"
    return ""


def load_settings() -> AppConfig:
    """Load client settings from environment and /run/secrets."""
    api_url = os.environ.get("CC_API_URL", "http://localhost:8080").rstrip("/")
    token_url = os.environ.get("CC_TOKEN_URL") or derive_token_url(api_url)

    client_id = os.environ.get("CC_CLIENT_ID", "cf")
    client_secret = _load_secret_from_file("cc_client_secret", "CC_CLIENT_SECRET") or ""

    username = os.environ.get("CC_USERNAME", "")
    password = _load_secret_from_file("cc_password", "CC_PASSWORD") or ""

    log_level = os.environ.get("CC_LOG_LEVEL", "INFO").strip().upper()

    logger.info("api_url=%s; token_url=%s; client_id=%s", api_url, token_url or "<unset>", client_id)

    return AppConfig(
        api_url=api_url,
        token_url=token_url,
        client_id=client_id,
        client_secret=client_secret,
        username=username,
        password=password,
        log_level=log_level,
    )


def build_client(config: Optional[AppConfig] = None):
    """Create an authenticated CloudControllerClient from settings.

    Uses the password grant when username and password are configured,
    the client credentials grant otherwise.
    """
    from cc_client.core.cloud_controller.client import CloudControllerClient

    config = config or load_settings()
    if not config.token_url:
        raise ValueError("CC_TOKEN_URL is required (could not derive it from CC_API_URL)")

    client = CloudControllerClient(config.api_url)
    if config.uses_password_grant:
        client.authenticate_password(
            config.token_url, config.username, config.password, client_id=config.client_id,
            client_secret=config.client_secret,
        )
    else:
        client.authenticate_client_credentials(config.token_url, config.client_id, config.client_secret_resolved)
    return client
