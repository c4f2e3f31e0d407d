"""Low-level HTTP client for the Cloud Controller v2 API.

Handles authentication against the UAA token endpoint, token management,
error translation and request logging.
"""
from __future__ import annotations
import logging
import os
import time
from typing import Optional, Dict, Any
from datetime import datetime, timedelta

import jwt
import requests

from .exceptions import CloudControllerAPIError, NotAuthenticatedError
from .scrubbing import ScrubbingFilter

CONNECT_TIMEOUT = 30
READ_TIMEOUT = 5 * 60
REQUEST_TIMEOUT = (CONNECT_TIMEOUT, READ_TIMEOUT)

# Used when neither expires_in nor a decodable exp claim is available
DEFAULT_TOKEN_TTL = 60
REFRESH_MARGIN = timedelta(seconds=10)

logger = logging.getLogger(__name__)
logger.addFilter(ScrubbingFilter())


class CloudControllerClient:
    """HTTP client for the Cloud Controller API with automatic token management.

    Features:
    - Bearer token injection and refresh before expiry
    - Centralized error handling (non-2xx -> CloudControllerAPIError)
    - Relative API paths and absolute continuation URLs accepted alike

    Usage:
        client = CloudControllerClient("https://api.example.com")
        client.authenticate_client_credentials("https://uaa.example.com/oauth/token", "admin", "secret")
        orgs = client.get_json("/v2/organizations")
    """

    def __init__(self, base_url: Optional[str] = None):
        """Initialize Cloud Controller client.

        Args:
            base_url: API base URL (defaults to CC_API_URL env var)
        """
        self.base_url = (base_url or os.environ.get("CC_API_URL", "http://localhost:8080")).rstrip("/")
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None
        self._auth_method: Optional[str] = None
        self._auth_params: Dict[str, Any] = {}

    def authenticate_client_credentials(self, token_url: str, client_id: str, client_secret: str) -> str:
        """Authenticate with the client credentials grant and store credentials for auto-refresh.

        Args:
            token_url: UAA token endpoint (e.g. https://uaa.example.com/oauth/token)
            client_id: OAuth client ID
            client_secret: OAuth client secret

        Returns:
            Access token
        """
        self._auth_method = "client_credentials"
        self._auth_params = {"token_url": token_url, "client_id": client_id, "client_secret": client_secret}
        return self._refresh_token()

    def authenticate_password(
        self,
        token_url: str,
        username: str,
        password: str,
        client_id: str = "cf",
        client_secret: str = "",
    ) -> str:
        """Authenticate with the password grant and store credentials for auto-refresh.

        Args:
            token_url: UAA token endpoint
            username: Platform user name
            password: Platform user password
            client_id: OAuth client ID (default: cf)
            client_secret: OAuth client secret (empty for the cf client)

        Returns:
            Access token
        """
        self._auth_method = "password"
        self._auth_params = {
            "token_url": token_url,
            "username": username,
            "password": password,
            "client_id": client_id,
            "client_secret": client_secret,
        }
        return self._refresh_token()

    def _refresh_token(self) -> str:
        params = self._auth_params
        if self._auth_method == "client_credentials":
            data = {"grant_type": "client_credentials"}
        else:
            data = {"grant_type": "password", "username": params["username"], "password": params["password"]}
        token, expires_in = self._request_token(params["token_url"], params["client_id"], params["client_secret"], data)
        self._token = token
        self._token_expires_at = token_expiry(token, expires_in)
        return token

    def _request_token(
        self, token_url: str, client_id: str, client_secret: str, data: Dict[str, str]
    ) -> tuple[str, Optional[int]]:
        """Obtain a token from UAA. Returns the token and its advertised lifetime."""
        resp = requests.post(
            token_url,
            data=data,
            auth=(client_id, client_secret),
            headers={"Accept": "application/json"},
            timeout=REQUEST_TIMEOUT,
        )
        if resp.status_code != 200:
            raise CloudControllerAPIError(resp.status_code, _response_body(resp), token_url)
        payload = resp.json()
        logger.info("Obtained %s token from %s for client %s", data["grant_type"], token_url, client_id)
        return payload["access_token"], payload.get("expires_in")

    def _ensure_authenticated(self) -> None:
        """Ensure we have a valid token, refreshing if necessary."""
        if not self._token or not self._token_expires_at:
            raise NotAuthenticatedError(
                "Not authenticated - call authenticate_client_credentials or authenticate_password first"
            )

        if self._auth_method and datetime.now() >= self._token_expires_at - REFRESH_MARGIN:
            self._refresh_token()

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute GET request with automatic authentication.

        Args:
            path: API path (e.g. "/v2/organizations") or absolute continuation URL
            params: Query parameters
            **kwargs: Additional arguments for requests.get

        Returns:
            Response object

        Raises:
            CloudControllerAPIError: On HTTP error
        """
        return self._send("GET", requests.get, path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Any] = None, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute POST request with automatic authentication."""
        return self._send("POST", requests.post, path, json=json, params=params, **kwargs)

    def put(self, path: str, json: Optional[Any] = None, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute PUT request with automatic authentication."""
        return self._send("PUT", requests.put, path, json=json, params=params, **kwargs)

    def delete(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute DELETE request with automatic authentication."""
        return self._send("DELETE", requests.delete, path, params=params, **kwargs)

    def get_json(self, path: str, params: Optional[Dict] = None) -> Any:
        """GET and decode the JSON body."""
        return self.get(path, params=params).json()

    def url_for(self, path: str) -> str:
        """Join a relative API path to the base URL; absolute URLs pass through verbatim."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}{path}"

    def _send(self, method: str, send, path: str, **kwargs) -> requests.Response:
        self._ensure_authenticated()
        url = self.url_for(path)
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {self._token}"
        headers.setdefault("Accept", "application/json")

        started = time.monotonic()
        resp = send(url, headers=headers, timeout=REQUEST_TIMEOUT, **kwargs)
        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info("%s %s -> %s (%.0fms)", method, url, resp.status_code, elapsed_ms)

        self._handle_error(resp, url)
        return resp

    def _handle_error(self, resp: requests.Response, url: str) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            CloudControllerAPIError: If response status indicates error
        """
        if resp.status_code >= 400:
            body = _response_body(resp)
            logger.warning("Cloud Controller rejected %s with %s: %s", url, resp.status_code, body)
            raise CloudControllerAPIError(resp.status_code, body, url)


def _response_body(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def token_expiry(token: str, expires_in: Optional[int] = None) -> datetime:
    """Compute when ``token`` expires.

    Prefers the advertised ``expires_in``; falls back to the JWT ``exp`` claim
    (signature is not verified, the token is only inspected), then to a
    conservative default.
    """
    if expires_in:
        return datetime.now() + timedelta(seconds=int(expires_in))
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return datetime.now() + timedelta(seconds=DEFAULT_TOKEN_TTL)
    exp = claims.get("exp")
    if exp is None:
        return datetime.now() + timedelta(seconds=DEFAULT_TOKEN_TTL)
    return datetime.fromtimestamp(exp)


def create_client_with_token(api_url: str, token: str, expires_in: Optional[int] = None) -> CloudControllerClient:
    """Create a pre-authenticated client from an already obtained access token.

    The token is never refreshed; callers holding a refresh token should use
    the authenticate_* methods instead.

    Args:
        api_url: Cloud Controller API URL
        token: Access token
        expires_in: Token validity in seconds (default: read from the token's exp claim)

    Returns:
        CloudControllerClient instance with token pre-set
    """
    client = CloudControllerClient(api_url)
    client._token = token
    client._token_expires_at = token_expiry(token, expires_in)
    return client
