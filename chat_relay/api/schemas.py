"""Request/response schemas for the relay routes."""

from pydantic import BaseModel


class ChatRequest(BaseModel):
    """Incoming chat payload.

    `message` is optional at the schema level so a missing field reaches the relay
    validation and produces the relay's own 400 body instead of a FastAPI 422.
    """

    message: str | None = None


class ChatReply(BaseModel):
    reply: str


class ErrorBody(BaseModel):
    error: str
