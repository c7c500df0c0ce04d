"""Portal auth: credential, session and request models."""

from enum import Enum
from typing import Annotated, Dict, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _check_email(value: str) -> str:
    """Reject anything that is not a bare address; hand back the input untouched."""
    if "<" in value or ">" in value:
        raise ValueError("display names are not allowed")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from None
    return value


EmailAddress = Annotated[str, AfterValidator(_check_email)]


class Mode(str, Enum):
    LOGIN = "login"
    REGISTER = "register"


class LoginCredentials(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = Field(min_length=3)
    password: str = Field(min_length=6)


class RegisterCredentials(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = Field(min_length=3)
    email: EmailAddress
    password: str = Field(min_length=6)


class AuthSession(BaseModel):
    token: str = ""

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def authorization_header(self) -> Dict[str, str]:
        if not self.is_authenticated:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


# ── Request bodies for the portal app ─────────────────────────────────────────

class SubmitRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class ModeSwitch(BaseModel):
    mode: Mode


class EmailMessage(BaseModel):
    subject: str
    body: str
    email: EmailAddress


class DisplaySettings(BaseModel):
    dark_mode: bool = False
