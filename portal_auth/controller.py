"""
Auth controller: the login/register state machine.

    IDLE ⇄ FORM_VISIBLE(mode) → SUBMITTING(mode) → AUTHENTICATED
                                                 ↘ FORM_VISIBLE(mode) + error

Only one submission may be in flight. The state flips to SUBMITTING before
the first await, so a second submit() on the same loop sees it and bails out.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .client import EmailServiceClient
from .database import TokenStore
from .exceptions import (
    AuthClientError,
    FieldValidationError,
    ServiceError,
    SubmissionInProgress,
)
from .models import AuthSession, Mode
from .notifications import NotificationFeed
from .validation import validate

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong!"
LOGIN_SUCCESS = "Login successful! Token saved."
REGISTER_SUCCESS = "Registration successful! Now log in to get your token."


class AuthState(str, Enum):
    IDLE = "idle"
    FORM_VISIBLE = "form_visible"
    SUBMITTING = "submitting"
    AUTHENTICATED = "authenticated"


class Outcome(str, Enum):
    IGNORED = "ignored"
    INVALID = "invalid"
    AUTHENTICATED = "authenticated"
    REGISTERED = "registered"
    FAILED = "failed"


@dataclass
class SubmitOutcome:
    outcome: Outcome
    message: str = ""
    field_errors: Dict[str, str] = field(default_factory=dict)
    error: Optional[AuthClientError] = None


# ── Error normalization ───────────────────────────────────────────────────────

def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def normalize_error_body(body: Any) -> str:
    if not isinstance(body, dict):
        return GENERIC_ERROR

    non_field = body.get("non_field_errors")
    if isinstance(non_field, list):
        summary = next((m for m in non_field if isinstance(m, str) and m), None)
        if summary:
            return summary

    detail = body.get("detail")
    if isinstance(detail, str) and detail:
        return detail

    lines = []
    for key, value in body.items():
        if isinstance(value, list):
            messages = [str(m) for m in value if isinstance(m, (str, int, float)) and str(m)]
            if messages:
                lines.append(f"{_capitalize(str(key))}: {', '.join(messages)}")
        elif isinstance(value, str) and value:
            lines.append(f"{_capitalize(str(key))}: {value}")

    return "\n".join(lines) if lines else GENERIC_ERROR


def describe_failure(exc: AuthClientError) -> str:
    if isinstance(exc, ServiceError):
        return normalize_error_body(exc.body)
    return GENERIC_ERROR


# ── Controller ────────────────────────────────────────────────────────────────

class AuthController:
    def __init__(
        self,
        service: EmailServiceClient,
        token_store: TokenStore,
        notifier: NotificationFeed,
    ):
        self.service = service
        self.token_store = token_store
        self.notifier = notifier

        self.mode = Mode.LOGIN
        self.field_errors: Dict[str, str] = {}
        self.session = AuthSession(token=token_store.get())
        self.state = AuthState.AUTHENTICATED if self.session.is_authenticated else AuthState.IDLE
        if self.session.is_authenticated:
            logger.info("Restored saved token; session is authenticated")

    @property
    def is_submitting(self) -> bool:
        return self.state is AuthState.SUBMITTING

    def toggle_form(self) -> AuthState:
        if self.state is AuthState.IDLE:
            self.state = AuthState.FORM_VISIBLE
        elif self.state is AuthState.FORM_VISIBLE:
            self.state = AuthState.IDLE
        return self.state

    def switch_mode(self, mode: Mode):
        if self.is_submitting:
            raise SubmissionInProgress("Cannot switch mode while a submission is in flight")
        self.mode = Mode(mode)
        self.field_errors = {}

    async def submit(self, mode: Mode, raw: Mapping[str, Any]) -> SubmitOutcome:
        if self.state is not AuthState.FORM_VISIBLE:
            logger.debug("Ignoring submit in state %s", self.state.value)
            return SubmitOutcome(Outcome.IGNORED)

        mode = Mode(mode)
        if mode is not self.mode:
            self.switch_mode(mode)

        try:
            credentials = validate(mode, raw)
        except FieldValidationError as e:
            self.field_errors = e.errors
            return SubmitOutcome(Outcome.INVALID, field_errors=e.errors, error=e)

        self.field_errors = {}
        self.state = AuthState.SUBMITTING
        try:
            if mode is Mode.LOGIN:
                token = await self.service.login(credentials)
                self.token_store.set(token)
                self.session = AuthSession(token=token)
                self.state = AuthState.AUTHENTICATED
                self.notifier.success(LOGIN_SUCCESS)
                return SubmitOutcome(Outcome.AUTHENTICATED, message=LOGIN_SUCCESS)

            await self.service.register(credentials)
            self.mode = Mode.LOGIN
            self.state = AuthState.FORM_VISIBLE
            self.notifier.success(REGISTER_SUCCESS)
            return SubmitOutcome(Outcome.REGISTERED, message=REGISTER_SUCCESS)
        except AuthClientError as e:
            message = describe_failure(e)
            logger.info("%s failed: %s", mode.value, e)
            self.notifier.error(message)
            return SubmitOutcome(Outcome.FAILED, message=message, error=e)
        finally:
            del credentials
            if self.state is AuthState.SUBMITTING:
                self.state = AuthState.FORM_VISIBLE

    def snapshot(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "mode": self.mode.value,
            "form_visible": self.state in (AuthState.FORM_VISIBLE, AuthState.SUBMITTING),
            "field_errors": dict(self.field_errors),
            "is_authenticated": self.session.is_authenticated,
            "token": self.session.token,
        }
