# File: fundiflow/core/env_validation.py

"""
Environment validation for production deployment.

The schema mirrors the variables the service needs in production: app URL,
database, token signing and SMTP delivery. Optional variables get defaults.
Every failing variable is reported in a single aggregated error.
"""

import os
from typing import Literal, Mapping, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
)


class EnvironmentValidationError(RuntimeError):
    """Raised when the process environment does not match the schema."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__(
            "Environment validation failed:\n"
            + "\n".join(problems)
            + "\n\nPlease check your environment variables."
        )


class EnvSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # App
    APP_URL: AnyHttpUrl
    ENVIRONMENT: Literal["development", "production", "test"]

    # Persistence / auth
    DATABASE_URL: str = Field(min_length=1)
    SECRET_KEY: str = Field(min_length=1)

    # Email
    EMAIL_PROVIDER: str = "smtp"
    SMTP_HOST: str = Field(min_length=1)
    SMTP_PORT: str = Field(pattern=r"^\d+$")
    SMTP_USER: EmailStr
    SMTP_PASS: str = Field(min_length=1)
    FROM_EMAIL: EmailStr
    FROM_NAME: str = Field(min_length=1)

    # Optional
    OPENAI_API_KEY: Optional[str] = None
    DEBUG_EMAIL: str = "false"


def _describe(error: dict) -> str:
    field = ".".join(str(part) for part in error["loc"])
    if error["type"] == "missing":
        return f"{field}: {field} is required"
    if error["type"] == "string_pattern_mismatch" and field == "SMTP_PORT":
        return f"{field}: SMTP port must be a number"
    return f"{field}: {error['msg']}"


def validate_env(environ: Optional[Mapping[str, str]] = None) -> EnvSchema:
    """
    Validate environment variables against EnvSchema.

    Args:
        environ: mapping to validate (defaults to os.environ)

    Returns:
        The parsed EnvSchema

    Raises:
        EnvironmentValidationError listing every invalid variable
    """
    source = dict(os.environ if environ is None else environ)
    try:
        return EnvSchema.model_validate(source)
    except ValidationError as e:
        raise EnvironmentValidationError([_describe(err) for err in e.errors()]) from e
