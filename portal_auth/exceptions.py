"""Failures the auth flow raises and knows how to turn into user messages."""

from typing import Any, Dict, Optional


class AuthClientError(Exception):
    """Base class for every failure the auth flow knows how to surface."""


class FieldValidationError(AuthClientError):
    def __init__(self, errors: Dict[str, str]):
        super().__init__(", ".join(f"{field}: {msg}" for field, msg in errors.items()))
        self.errors = errors


class ServiceError(AuthClientError):
    def __init__(self, status_code: int, body: Optional[Any] = None):
        super().__init__(f"Email service responded with {status_code}")
        self.status_code = status_code
        self.body = body


class TransportError(AuthClientError):
    def __init__(self, detail: str):
        super().__init__(f"Could not reach email service: {detail}")
        self.detail = detail


class UnknownResponseError(AuthClientError):
    def __init__(self, detail: str = "Unrecognized response from email service"):
        super().__init__(detail)
        self.detail = detail


class SubmissionInProgress(AuthClientError):
    def __init__(self, detail: str = "A submission is already in flight"):
        super().__init__(detail)
        self.detail = detail


class TokenStoreError(AuthClientError):
    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
