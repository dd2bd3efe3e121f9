"""Request bodies, validated before they reach the services."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError as PydanticValidationError, field_validator

from scoreboard.errors import ValidationError

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72
MAX_EMAIL_LENGTH = 120


def normalize_email(value: str) -> str:
    return value.strip().lower()


def _fit_email(value: str) -> str:
    value = normalize_email(value)
    if len(value) > MAX_EMAIL_LENGTH:
        raise ValueError(f'email longer than {MAX_EMAIL_LENGTH} characters')
    return value


class _Body(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)


class RegisterRequest(_Body):
    name: str = Field(min_length=1, max_length=80)
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator('name', 'email', mode='before')
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator('email')
    @classmethod
    def _lower_email(cls, value):
        return _fit_email(value)

    @field_validator('password')
    @classmethod
    def _fits_bcrypt(cls, value):
        if len(value.encode('utf-8')) > MAX_PASSWORD_BYTES:
            raise ValueError(f'password longer than {MAX_PASSWORD_BYTES} bytes')
        return value


class LoginRequest(_Body):
    email: str
    password: str
    remember_me: Optional[bool] = Field(default=False, alias='rememberMe')

    @field_validator('email')
    @classmethod
    def _normalize(cls, value):
        return normalize_email(value)


class ProfileUpdateRequest(_Body):
    """Partial update; empty strings count as "not provided"."""

    name: Optional[str] = Field(default=None, max_length=80)
    email: Optional[EmailStr] = None

    @field_validator('name', 'email', mode='before')
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value or None

    @field_validator('email')
    @classmethod
    def _lower_email(cls, value):
        return _fit_email(value) if value is not None else None


class ScoreSubmission(_Body):
    score: float = Field(ge=0, le=100, allow_inf_nan=False)

    @field_validator('score', mode='before')
    @classmethod
    def _must_be_number(cls, value):
        # Reject numeric strings and booleans; only JSON numbers are scores.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError('score must be a number')
        return value


def parse_body(model, data, error_cls=ValidationError):
    """Validate ``data`` against ``model`` or raise ``error_cls``."""
    try:
        return model.model_validate(data if isinstance(data, dict) else {})
    except PydanticValidationError as exc:
        if error_cls is not ValidationError:
            raise error_cls() from exc
        errors = exc.errors()
        field = errors[0]['loc'][0] if errors and errors[0]['loc'] else None
        raise ValidationError(f'Invalid {field}' if field else None) from exc
