"""
HTTP client for the Email Service API (Djoser-style auth endpoints).

Every call opens its own AsyncClient, like the gateway proxy does. Non-2xx
responses become ServiceError with the decoded body attached so the
controller can turn it into a message. Any request-level httpx failure
becomes TransportError.
"""

import logging
from typing import Any, Optional

import httpx

from . import config
from .exceptions import ServiceError, TransportError, UnknownResponseError
from .models import EmailMessage, LoginCredentials, RegisterCredentials

logger = logging.getLogger(__name__)

REGISTER_PATH = "/auth/users/"
LOGIN_PATH = "/auth/token/login/"
SEND_EMAIL_PATH = "/api/send-email/"


def _decode(resp: httpx.Response) -> Optional[Any]:
    try:
        return resp.json()
    except ValueError:
        return None


class EmailServiceClient:
    def __init__(
        self,
        base_url: str = config.EMAIL_SERVICE_URL,
        timeout: float = config.HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _post(self, path: str, payload: dict, headers: Optional[dict] = None) -> Optional[Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                resp = await client.post(path, json=payload, headers=headers)
        except httpx.TimeoutException:
            logger.warning("POST %s timed out after %ss", path, self.timeout)
            raise TransportError("Service timed out")
        except httpx.RequestError as e:
            logger.warning("POST %s failed: %s", path, e)
            raise TransportError(str(e) or e.__class__.__name__)

        body = _decode(resp)
        if not resp.is_success:
            logger.info("POST %s -> %s", path, resp.status_code)
            raise ServiceError(resp.status_code, body)
        return body

    async def register(self, credentials: RegisterCredentials) -> None:
        await self._post(REGISTER_PATH, {
            "username": credentials.username,
            "email": credentials.email,
            "password": credentials.password,
        })

    async def login(self, credentials: LoginCredentials) -> str:
        body = await self._post(LOGIN_PATH, {
            "username": credentials.username,
            "password": credentials.password,
        })
        token = body.get("auth_token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise UnknownResponseError("Login response did not include auth_token")
        return token

    async def send_email(self, token: str, message: EmailMessage) -> Optional[Any]:
        return await self._post(
            SEND_EMAIL_PATH,
            message.model_dump(),
            headers={"Authorization": f"Bearer {token}"},
        )
