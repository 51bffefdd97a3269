"""Pydantic models for API requests."""

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic import ValidationError as PydanticValidationError

from domain.model.errors import FieldError, ValidationError


class _AuthRequest(BaseModel):
    # Fields default to "" so the service reports missing values as field errors.
    model_config = ConfigDict(coerce_numbers_to_str=True, extra='ignore')

    @model_validator(mode='before')
    @classmethod
    def _null_as_missing(cls, data):
        if isinstance(data, dict):
            return {key: "" if value is None else value for key, value in data.items()}
        return data


class RegisterRequest(_AuthRequest):
    """Request model for user registration."""
    firstName: str = ""
    lastName: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(_AuthRequest):
    """Request model for user login."""
    email: str = ""
    password: str = ""


class VerifyOtpRequest(_AuthRequest):
    email: str = ""
    otp: str = ""


class ResendOtpRequest(_AuthRequest):
    email: str = ""


def parse_request(model: type[_AuthRequest], body: dict) -> _AuthRequest:
    """Validate a raw body against ``model``.

    Raises:
        ValidationError: a field holds something other than a string or number
    """
    try:
        return model.model_validate(body)
    except PydanticValidationError as e:
        errors = [
            FieldError(str(err['loc'][0]) if err['loc'] else 'body', "Invalid value.")
            for err in e.errors()
        ]
        raise ValidationError("Validation Error.", errors) from e
