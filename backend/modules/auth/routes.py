"""
Sign-In-With-Ethereum API endpoints.

GET issues a nonce; POST verifies a signed message and returns a session.
Failure bodies are always ``{"error": "..."}``.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from api.dependencies import get_auth_service
from api.errors import public_message, status_for
from shared.exceptions import SubVaultError

from .exceptions import MissingFieldsError
from .interfaces import IAuthService
from .models import AuthErrorResponse, NonceResponse, VerifyRequest, VerifyResponse

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": AuthErrorResponse},
    401: {"model": AuthErrorResponse},
    500: {"model": AuthErrorResponse},
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/verify", response_model=NonceResponse, responses={500: {"model": AuthErrorResponse}})
async def get_nonce(service: IAuthService = Depends(get_auth_service)):
    """
    Issue a single-use nonce for a SIWE message.
    """
    try:
        return await service.issue_nonce()
    except SubVaultError as e:
        return _error(status_for(e), public_message(e))
    except Exception:
        logger.exception("Nonce issuance failed")
        return _error(500, "Internal server error")


@router.post("/verify", response_model=VerifyResponse, responses=ERROR_RESPONSES)
async def verify(request: Request, service: IAuthService = Depends(get_auth_service)):
    """
    Verify a signed SIWE message.

    Body: ``{address, message, signature}``. The nonce in the message is
    consumed whether or not the signature checks out.
    """
    try:
        try:
            body = await request.json()
            payload = VerifyRequest.model_validate(body if isinstance(body, dict) else {})
        except (ValueError, PydanticValidationError):
            raise MissingFieldsError()
        return await service.verify(payload)
    except SubVaultError as e:
        return _error(status_for(e), public_message(e))
    except Exception:
        logger.exception("Auth verification error")
        return _error(500, "Internal server error")
