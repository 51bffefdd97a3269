"""Authentication routes (register, login, OTP confirmation)."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_auth_service, read_body
from api.models import LoginRequest, RegisterRequest, ResendOtpRequest, VerifyOtpRequest, parse_request
from api.responses import (
    error_response,
    success_response,
    success_response_with_data,
    unauthorized_response,
    validation_error_with_data,
)
from api.security import get_current_claims
from domain.model.errors import DependencyError, DomainError, UnauthorizedError, ValidationError
from domain.model.user import SessionClaims
from services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def domain_error_response(error: DomainError) -> JSONResponse:
    """Map a domain error raised by the auth service to its envelope."""
    if isinstance(error, ValidationError):
        return validation_error_with_data(error.message, [e.to_dict() for e in error.errors])
    if isinstance(error, UnauthorizedError):
        return unauthorized_response(error.message)
    if isinstance(error, DependencyError):
        logger.error("Dependency failure", extra={"error": error.message})
        return error_response(error.message)
    logger.error("Unhandled domain error", extra={"error": error.message})
    return error_response(error.message)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: dict = Depends(read_body), service: AuthService = Depends(get_auth_service)):
    """Register a new account and mail its confirmation OTP."""
    try:
        request = parse_request(RegisterRequest, body)
        user = await service.register(
            first_name=request.firstName,
            last_name=request.lastName,
            email=request.email,
            password=request.password,
        )
    except DomainError as e:
        return domain_error_response(e)

    return success_response_with_data(
        "Registration Success.", user.to_public_dict(), status_code=status.HTTP_201_CREATED
    )


@router.post("/login")
async def login(body: dict = Depends(read_body), service: AuthService = Depends(get_auth_service)):
    """Login user and return a JWT token with the profile."""
    try:
        request = parse_request(LoginRequest, body)
        result = await service.login(email=request.email, password=request.password)
    except DomainError as e:
        return domain_error_response(e)

    return success_response_with_data("Login Success.", result.to_dict())


@router.post("/verify-otp")
async def verify_otp(body: dict = Depends(read_body), service: AuthService = Depends(get_auth_service)):
    try:
        request = parse_request(VerifyOtpRequest, body)
        await service.verify_otp(email=request.email, otp=request.otp)
    except DomainError as e:
        return domain_error_response(e)

    return success_response("Account confirmed success.")


@router.post("/resend-verify-otp")
async def resend_verify_otp(body: dict = Depends(read_body), service: AuthService = Depends(get_auth_service)):
    try:
        request = parse_request(ResendOtpRequest, body)
        await service.resend_otp(email=request.email)
    except DomainError as e:
        return domain_error_response(e)

    return success_response("Confirm otp sent.")


@router.get("/me")
async def get_me(claims: SessionClaims = Depends(get_current_claims)):
    """Return the identity carried by the caller's token."""
    return success_response_with_data("Token valid.", claims.to_dict())
