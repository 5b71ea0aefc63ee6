from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class Envelope(BaseModel, Generic[T]):
    """
    Standard success wrapper for every API response.

    Usage:
        response_model=Envelope[VideoOut]
        response_model=Envelope[list[VideoOut]]
    """

    data: T | None = None
    message: str | None = None


class ErrorEnvelope(BaseModel):
    """Failure wrapper. ``error`` and ``message`` carry the same text."""

    error: str
    message: str
