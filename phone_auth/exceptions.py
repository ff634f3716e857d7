import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from .application.errors import (
    CodeRejectedError,
    IdentityProviderError,
    OTPProviderError,
    ProviderErrorKind,
)

logger = logging.getLogger(__name__)

PROVIDER_ERROR_STATUS = {
    ProviderErrorKind.INVALID_INPUT: 400,
    ProviderErrorKind.UNAUTHORIZED: 401,
    ProviderErrorKind.RATE_LIMITED: 429,
    ProviderErrorKind.UPSTREAM_FAILURE: 500,
}


def create_error_response(error_message: str, code: str) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message,
        "code": code,
    }


def create_success_response(data: dict) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "data": data,
        "error": None,
    }


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies are a client error, never a remote call
    errors = exc.errors()
    if errors:
        loc = ".".join(str(p) for p in errors[0].get("loc", ()) if p != "body")
        message = f"invalid request: {loc} {errors[0].get('msg', '')}".strip() if loc else "invalid request"
    else:
        message = "invalid request"
    return JSONResponse(status_code=400, content=create_error_response(message, "invalid_request"))


async def otp_provider_exception_handler(request: Request, exc: OTPProviderError) -> JSONResponse:
    status_code = PROVIDER_ERROR_STATUS[exc.kind]
    if exc.kind is ProviderErrorKind.UNAUTHORIZED:
        logger.error("OTP provider rejected our API credentials")
    elif exc.kind is ProviderErrorKind.UPSTREAM_FAILURE:
        logger.error(f"OTP provider failure on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_code, content=create_error_response(exc.message, exc.kind.value))


async def code_rejected_exception_handler(request: Request, exc: CodeRejectedError) -> JSONResponse:
    return JSONResponse(status_code=401, content=create_error_response(exc.message, "code_rejected"))


async def identity_provider_exception_handler(request: Request, exc: IdentityProviderError) -> JSONResponse:
    logger.error(f"Identity provider failure on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=500, content=create_error_response(exc.message, "identity_provider_failure"))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail), "http_error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(OTPProviderError, otp_provider_exception_handler)
    app.add_exception_handler(CodeRejectedError, code_rejected_exception_handler)
    app.add_exception_handler(IdentityProviderError, identity_provider_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
