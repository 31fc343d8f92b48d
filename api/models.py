from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str
    message: Optional[str] = None
    maxPage: Optional[int] = None
    retryAfter: Optional[int] = None


class HelloResponse(BaseModel):
    message: str
    timestamp: datetime


class HealthResponse(BaseModel):
    status: str
