"""Error body shared by every controller."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of 4xx/5xx responses raised through ``HTTPException``."""

    detail: str = Field(..., description="Human-readable reason, e.g. 'Ritual session not found'")


NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse}}
