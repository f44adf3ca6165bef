"""Common response envelopes shared across routes."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error body returned with every non-2xx status."""

    error: str


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class StatusResponse(BaseModel):
    """Status-only response."""

    status: str = "ok"
