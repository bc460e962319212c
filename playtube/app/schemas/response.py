# playtube/app/schemas/response.py
from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, model_validator

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope returned by every endpoint."""
    statusCode: int = 200
    data: Optional[T] = None
    message: str = "Success"
    success: bool = True

    @model_validator(mode="after")
    def _derive_success(self) -> "ApiResponse[T]":
        self.success = self.statusCode < 400
        return self
