"""FastAPI router exposing the credential check endpoint."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request

from credential_auth.application.dto.auth_models import (
    ErrorResponse,
    LoginResponse,
    LoginUserResponse,
)
from credential_auth.application.ports.user_repository_port import StorageUnavailableError
from credential_auth.application.services.auth_service import AuthOutcome, Authenticator

INVALID_CREDENTIALS_DETAIL = "invalid credentials"
UNAVAILABLE_DETAIL = "authentication temporarily unavailable"
logger = logging.getLogger(__name__)


def build_auth_router(*, authenticator: Authenticator, timeout_seconds: float) -> APIRouter:
    """Build router that checks credentials; session issuance is left to the caller."""

    router = APIRouter(tags=["auth"])

    @router.post(
        "/auth/login",
        response_model=LoginResponse,
        responses={401: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    )
    async def login(request: Request) -> LoginResponse:
        # Validation belongs to the authenticator so every malformed body
        # gets the same answer as a wrong password.
        try:
            raw_credentials: object = await request.json()
        except ValueError:
            raw_credentials = None

        try:
            result = await asyncio.wait_for(
                authenticator.authenticate(raw_credentials),
                timeout=timeout_seconds,
            )
        except StorageUnavailableError as exc:
            logger.warning("auth_login_unavailable reason=storage_unavailable")
            raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc
        except TimeoutError as exc:
            logger.warning(
                "auth_login_unavailable reason=timeout timeout_seconds=%s",
                timeout_seconds,
            )
            raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc

        if result.outcome is not AuthOutcome.AUTHENTICATED or result.user is None:
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS_DETAIL)

        return LoginResponse(
            user=LoginUserResponse(
                id=result.user.user_id,
                email=result.user.email,
                name=result.user.name,
            )
        )

    return router
