# File: tests/test_env_validation.py

import pytest

from fundiflow.core.env_validation import EnvironmentValidationError, validate_env

VALID_ENV = {
    "APP_URL": "https://fundiflow.app",
    "ENVIRONMENT": "production",
    "DATABASE_URL": "postgresql://fundi:pw@db/fundiflow",
    "SECRET_KEY": "s3cret",
    "SMTP_HOST": "smtp.gmail.com",
    "SMTP_PORT": "587",
    "SMTP_USER": "mailer@fundiflow.app",
    "SMTP_PASS": "app-password",
    "FROM_EMAIL": "notifications@fundiflow.app",
    "FROM_NAME": "FundiFlow",
}


def test_valid_environment_parses_with_defaults():
    env = validate_env(VALID_ENV)
    assert env.EMAIL_PROVIDER == "smtp"
    assert env.DEBUG_EMAIL == "false"
    assert env.OPENAI_API_KEY is None


def test_unknown_variables_are_ignored():
    env = validate_env({**VALID_ENV, "PATH": "/usr/bin"})
    assert env.SMTP_PORT == "587"


def test_every_failing_variable_is_reported():
    bad = {**VALID_ENV, "SMTP_PORT": "58x", "SMTP_USER": "not-an-email"}
    del bad["SECRET_KEY"]

    with pytest.raises(EnvironmentValidationError) as exc_info:
        validate_env(bad)

    err = exc_info.value
    assert len(err.problems) == 3
    message = str(err)
    assert message.startswith("Environment validation failed:\n")
    assert message.endswith("\n\nPlease check your environment variables.")
    assert "SECRET_KEY: SECRET_KEY is required" in message
    assert "SMTP_PORT: SMTP port must be a number" in message
    assert any(p.startswith("SMTP_USER:") for p in err.problems)


def test_environment_must_be_known():
    with pytest.raises(EnvironmentValidationError) as exc_info:
        validate_env({**VALID_ENV, "ENVIRONMENT": "staging"})
    assert exc_info.value.problems[0].startswith("ENVIRONMENT:")
