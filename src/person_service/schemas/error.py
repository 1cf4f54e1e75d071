"""Error response schema shared by every non-2xx answer."""

from typing import Literal

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    {"status": 404, "type": "NotFound", "title": "Resource not found", "detail": "..."}

    `type` is the stable discriminant clients branch on; `detail` is for humans.
    """

    status: int
    type: Literal["NotFound", "Conflict", "Unexpected", "UnprocessableEntity"]
    title: str
    detail: str = Field(description="Free-text explanation, not meant for programmatic matching")
