# phone_auth/routers/auth_router.py
import logging

from fastapi import APIRouter, Depends, Request

from ..application.services.verification_service import VerificationService
from ..exceptions import create_success_response
from ..schemas import (
    ErrorResponse, SendCodeRequest, SendCodeData, SuccessResponse, VerifyRequest, VerifyData
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["Authentication"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed request or rejected by the OTP provider"},
    401: {"model": ErrorResponse, "description": "code_rejected or upstream_unauthorized"},
    429: {"model": ErrorResponse, "description": "OTP provider rate limit"},
    500: {"model": ErrorResponse, "description": "OTP or identity provider failure"},
}


def get_verification_service(request: Request) -> VerificationService:
    return request.app.state.verification_service


@router.post("/send_code", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def send_code(
    payload: SendCodeRequest,
    service: VerificationService = Depends(get_verification_service),
):
    """Send a one-time code to the phone number and return the authentication uuid."""
    session_id = await service.initiate(payload.phone_number)
    return create_success_response(SendCodeData(authentication_uuid=session_id).model_dump())


@router.post("/verify", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def verify(
    payload: VerifyRequest,
    service: VerificationService = Depends(get_verification_service),
):
    """
    Check the code for an authentication uuid and, if valid, return a
    Firebase custom token for the user owning the phone number.
    The user is created on first sign-in.
    """
    token = await service.complete(payload.phone_number, payload.code, payload.authentication_uuid)
    return create_success_response(VerifyData(token=token).model_dump())
