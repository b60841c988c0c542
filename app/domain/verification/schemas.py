"""Pydantic schemas for the verification endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class SendVerificationRequest(BaseModel):
    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class VerifyCodeRequest(SendVerificationRequest):
    code: str = Field(pattern=r"^\d{6}$")


class SendVerificationResponse(BaseModel):
    success: bool = True
    message: str
    expires_in_minutes: int
    dev_code: Optional[str] = None


class ParentOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    children: list[Any] = []
    children_details: list[Any] = []

    model_config = ConfigDict(from_attributes=True)


class VerifyCodeResponse(BaseModel):
    success: bool = True
    token: str
    expires_at: datetime
    identity: ParentOut
