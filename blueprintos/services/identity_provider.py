"""
Identity provider client (Supabase GoTrue admin API) and access-token
verification.

The admin API is only called with the service role key; the token check uses
the project JWT secret.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx
from jose import JWTError, jwt
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from blueprintos.config import settings

logger = logging.getLogger("blueprintos.identity")


class IdentityProviderError(Exception):
    """The identity provider refused or failed a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidTokenError(Exception):
    pass


@dataclass
class IdentityUser:
    id: str
    email: str = ""
    user_metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "IdentityUser":
        # create returns the user object directly, some versions wrap it
        user = payload.get("user", payload)
        return cls(
            id=str(user["id"]),
            email=user.get("email") or "",
            user_metadata=user.get("user_metadata") or {},
        )


# Lookups and deletes are idempotent: any transport error is retried.
_transient = retry(
    retry=retry_if_exception_type(httpx.TransportError),
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=1, min=1, max=5),
    reraise=True,
)

# User creation is not: only retry when the request never reached the provider.
_unsent = retry(
    retry=retry_if_exception_type(httpx.ConnectError),
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=1, min=1, max=5),
    reraise=True,
)


class IdentityProviderClient:
    """
    Identity provider admin client
    Creates, looks up and deletes users on behalf of provisioning
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        service_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.SUPABASE_URL).rstrip("/")
        self.service_key = service_key if service_key is not None else settings.SUPABASE_SERVICE_ROLE_KEY
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
        }

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            return client.request(
                method,
                f"{self.base_url}/auth/v1{path}",
                headers=self._headers(),
                **kwargs,
            )

    @_transient
    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        return self._send(method, path, **kwargs)

    @_unsent
    def _create_request(self, path: str, **kwargs) -> httpx.Response:
        return self._send("POST", path, **kwargs)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        return (
            body.get("msg")
            or body.get("message")
            or body.get("error_description")
            or body.get("error")
            or f"HTTP {response.status_code}"
        )

    def create_user(self, email: str, password: str, metadata: Dict[str, Any]) -> IdentityUser:
        """Create a confirmed user; raises ``IdentityProviderError`` on refusal."""
        try:
            response = self._create_request(
                "/admin/users",
                json={
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                    "user_metadata": metadata,
                },
            )
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Identity provider unavailable: {e}") from e

        if response.status_code >= 400:
            raise IdentityProviderError(self._error_message(response), response.status_code)
        return IdentityUser.from_payload(response.json())

    def get_user(self, user_id: str) -> Optional[IdentityUser]:
        """Look a user up by id; None when the provider does not know it."""
        try:
            response = self._request("GET", f"/admin/users/{user_id}")
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Identity provider unavailable: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise IdentityProviderError(self._error_message(response), response.status_code)
        return IdentityUser.from_payload(response.json())

    def delete_user(self, user_id: str) -> None:
        try:
            response = self._request("DELETE", f"/admin/users/{user_id}")
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Identity provider unavailable: {e}") from e

        if response.status_code >= 400 and response.status_code != 404:
            raise IdentityProviderError(self._error_message(response), response.status_code)


def verify_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify an identity provider access token (HS256)."""
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e


def unverified_subject(token: str) -> Optional[str]:
    """Subject claim without signature checks; for log context only."""
    try:
        return jwt.get_unverified_claims(token).get("sub")
    except JWTError:
        return None
