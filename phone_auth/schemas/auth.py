# phone_auth/schemas/auth.py
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class SendCodeRequest(BaseModel):
    phone_number: str = Field(..., description="Phone number with country code, e.g. +15551234567")

    @field_validator('phone_number')
    @classmethod
    def validate_phone_number(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('phone_number must not be empty')
        return v


class SendCodeData(BaseModel):
    authentication_uuid: str


class VerifyRequest(BaseModel):
    phone_number: str = Field(..., description="Phone number the code was sent to")
    code: str = Field(..., min_length=1, description="Code received by SMS")
    authentication_uuid: UUID = Field(..., description="Value returned by /send_code")

    @field_validator('phone_number')
    @classmethod
    def validate_phone_number(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('phone_number must not be empty')
        return v


class VerifyData(BaseModel):
    token: str
