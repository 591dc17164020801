from __future__ import annotations

import uuid
from typing import Dict, List, Optional

from pydantic import BaseModel


class DeleteResult(BaseModel):
    success: bool


class ErrorResponse(BaseModel):
    status: int
    id: uuid.UUID
    message: str


class ValidationErrorResponse(ErrorResponse):
    errors: List[dict]


class SyncErrorResponse(ErrorResponse):
    applied: Dict[str, int]
    post_id: Optional[int] = None
