"""Pydantic response models for the login endpoint."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class LoginUserResponse(StrictModel):
    """Authenticated user summary returned after a successful login."""

    id: UUID
    email: str
    name: str


class LoginResponse(StrictModel):
    """HTTP response model for a successful credential check."""

    user: LoginUserResponse


class ErrorResponse(StrictModel):
    """Generic error body; never names the failing field or subsystem."""

    detail: str
