"""Pydantic schemas for the auth API."""

from pydantic import BaseModel, Field

from spotify_top.core import TokenValidationResult


class TokenValidationRequest(BaseModel):
    access_token: str = Field(min_length=1)


class TokenValidationResponse(BaseModel):
    status_code: int
    message: str
    data: TokenValidationResult


class LogoutResponse(BaseModel):
    status_code: int = 200
    message: str = "Logged out successfully."
