# phone_auth/schemas/common.py
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    success: bool = False
    data: None = None
    error: str
    code: str


class SuccessResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    timestamp: str
