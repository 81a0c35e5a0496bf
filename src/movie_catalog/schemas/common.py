"""Shared response envelope."""

from pydantic import BaseModel, Field


class ActionResponse(BaseModel):
    """Outcome of an interactive request.

    Business-rule failures are reported here with ``success`` false rather than
    through the HTTP status code.
    """

    success: bool = Field(description="Whether the request did what was asked")
    message: str = Field(description="Human-readable outcome")
